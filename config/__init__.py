import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module; anything unknown falls back to development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def engine_from_env() -> dict:
    """Engine constants shared by every settings module. Unset keys keep their defaults."""
    keys = (
        "OFFICE_NAME",
        "OFFICE_LAT",
        "OFFICE_LNG",
        "OFFICE_RADIUS_KM",
        "HOME_RADIUS_KM",
        "LATE_CUTOFF",
        "SICK_LEAVE_DAYS_PER_YEAR",
        "UNRECORDED_WORKDAY_STATUS",
    )
    return {key: os.environ[key] for key in keys if os.getenv(key)}

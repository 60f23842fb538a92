from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_hhmm_to_minutes
from ..common.geo import GeoPoint
from .constants import (
    DEFAULT_HOME_RADIUS_KM,
    DEFAULT_LATE_CUTOFF_MINUTES,
    DEFAULT_OFFICE_LAT,
    DEFAULT_OFFICE_LNG,
    DEFAULT_OFFICE_NAME,
    DEFAULT_OFFICE_RADIUS_KM,
    DEFAULT_SICK_LEAVE_DAYS_PER_YEAR,
)
from .enums import DayStatus
from .exceptions import ValidationError


@dataclass(frozen=True)
class EngineSettings:
    """Environment-specific constants of the attendance engine.

    Built once from the settings module and passed into services, so tests can
    use any office location, radius or cutoff without touching code.
    """

    office_name: str = DEFAULT_OFFICE_NAME
    office_lat: float = DEFAULT_OFFICE_LAT
    office_lng: float = DEFAULT_OFFICE_LNG
    office_radius_km: float = DEFAULT_OFFICE_RADIUS_KM
    home_radius_km: float = DEFAULT_HOME_RADIUS_KM
    late_cutoff_minutes: int = DEFAULT_LATE_CUTOFF_MINUTES
    sick_leave_days_per_year: int = DEFAULT_SICK_LEAVE_DAYS_PER_YEAR
    # A working weekday without any record shows as week-off in the calendar.
    unrecorded_workday_status: DayStatus = DayStatus.WEEKOFF

    @property
    def office_location(self) -> GeoPoint:
        return GeoPoint(self.office_lat, self.office_lng)

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "EngineSettings":
        values = dict(values or {})
        defaults = cls()

        cutoff = values.get("LATE_CUTOFF")
        cutoff_minutes = parse_hhmm_to_minutes(cutoff) if cutoff else defaults.late_cutoff_minutes

        fallback = DayStatus(values.get("UNRECORDED_WORKDAY_STATUS") or defaults.unrecorded_workday_status.value)
        if fallback not in {DayStatus.WEEKOFF, DayStatus.NO_RECORD}:
            raise ValidationError("UNRECORDED_WORKDAY_STATUS must be 'weekoff' or 'no-record'")

        return cls(
            office_name=str(values.get("OFFICE_NAME") or defaults.office_name),
            office_lat=float(values.get("OFFICE_LAT", defaults.office_lat)),
            office_lng=float(values.get("OFFICE_LNG", defaults.office_lng)),
            office_radius_km=float(values.get("OFFICE_RADIUS_KM", defaults.office_radius_km)),
            home_radius_km=float(values.get("HOME_RADIUS_KM", defaults.home_radius_km)),
            late_cutoff_minutes=cutoff_minutes,
            sick_leave_days_per_year=int(values.get("SICK_LEAVE_DAYS_PER_YEAR", defaults.sick_leave_days_per_year)),
            unrecorded_workday_status=fallback,
        )

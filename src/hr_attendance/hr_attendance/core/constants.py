"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Runtime values come from EngineSettings; these are only the defaults.
"""

EARTH_RADIUS_KM = 6371.0

DEFAULT_OFFICE_NAME = "SimpleHunt"
DEFAULT_OFFICE_LAT = 12.99695
DEFAULT_OFFICE_LNG = 77.66048
DEFAULT_OFFICE_RADIUS_KM = 0.1
DEFAULT_HOME_RADIUS_KM = 0.2

# 09:35 local wall-clock time
DEFAULT_LATE_CUTOFF_MINUTES = 9 * 60 + 35

DEFAULT_SICK_LEAVE_DAYS_PER_YEAR = 12

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_UPCOMING_LEAVE_DAYS = 30
DEFAULT_LIST_LIMIT = 200

# Lower bounds (inclusive) for the attendance distribution, highest first.
ATTENDANCE_BUCKETS = (
    ("95-100%", 95.0),
    ("85-94%", 85.0),
    ("75-84%", 75.0),
    ("Below 75%", 0.0),
)

ATTENDANCE_RATINGS = (
    ("Excellent", 95.0),
    ("Good", 85.0),
    ("Average", 75.0),
    ("Poor", 0.0),
)

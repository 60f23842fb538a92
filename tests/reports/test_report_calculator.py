from decimal import Decimal

import pytest

from src.hr_attendance.hr_attendance.core.enums import DayStatus
from src.hr_attendance.hr_attendance.reports.calculator import (
    attendance_percentage,
    average_work_hours,
    bucket_for,
    distribution,
    mean,
    rating_for,
    tally_days,
)
from src.hr_attendance.hr_attendance.reports.model import DayCounts


def test_attendance_percentage_counts_late_as_attended():
    assert attendance_percentage(DayCounts(present=18, late=2, leave=1, absent=1)) == 90.9


def test_attendance_percentage_with_no_working_days_is_zero():
    assert attendance_percentage(DayCounts()) == 0.0


def test_tally_ignores_weekoffs_and_holidays():
    counts = tally_days(
        [
            DayStatus.PRESENT,
            DayStatus.LATE,
            DayStatus.LEAVE,
            DayStatus.NO_RECORD,
            DayStatus.WEEKOFF,
            DayStatus.HOLIDAY,
        ]
    )

    assert counts == DayCounts(present=1, late=1, leave=1, absent=1)


@pytest.mark.parametrize(
    "percentage, bucket, rating",
    [
        (100.0, "95-100%", "Excellent"),
        (95.0, "95-100%", "Excellent"),
        (94.9, "85-94%", "Good"),
        (85.0, "85-94%", "Good"),
        (75.0, "75-84%", "Average"),
        (74.9, "Below 75%", "Poor"),
        (0.0, "Below 75%", "Poor"),
    ],
)
def test_bucket_and_rating_boundaries(percentage, bucket, rating):
    assert bucket_for(percentage) == bucket
    assert rating_for(percentage) == rating


def test_distribution_keeps_empty_buckets():
    assert distribution([100.0, 96.0, 50.0]) == {
        "95-100%": 2,
        "85-94%": 0,
        "75-84%": 0,
        "Below 75%": 1,
    }


def test_average_work_hours_skips_days_without_hours():
    assert average_work_hours([Decimal("8.50"), None, Decimal("0"), 7.5]) == 8.0
    assert average_work_hours([]) == 0.0


def test_mean_rounds_to_one_decimal():
    assert mean([100.0, 50.0, 33.3]) == 61.1
    assert mean([]) == 0.0

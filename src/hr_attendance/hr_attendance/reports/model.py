from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import DayStatus, WorkMode


@dataclass(frozen=True)
class DayCounts:
    present: int = 0
    late: int = 0
    leave: int = 0
    absent: int = 0


@dataclass(frozen=True)
class EmployeeAttendanceSummary:
    employee_id: int
    employee_code: str
    full_name: str
    department: str
    position: str
    present_days: int
    late_days: int
    leave_days: int
    absent_days: int
    avg_work_hours: float
    attendance_percentage: float
    rating: str


@dataclass(frozen=True)
class DepartmentAverage:
    department: str
    employees: int
    attendance: float


@dataclass(frozen=True)
class DistributionBucket:
    range: str
    count: int


@dataclass(frozen=True)
class OverallStats:
    total_employees: int
    avg_attendance: float
    total_present_days: int
    avg_work_hours: float


@dataclass(frozen=True)
class CompanyReport:
    start: date
    end: date
    employees: list[EmployeeAttendanceSummary]
    departments: list[DepartmentAverage]
    distribution: list[DistributionBucket]
    overall: OverallStats


@dataclass(frozen=True)
class DailyRow:
    employee_id: int
    employee_code: str
    full_name: str
    gender: str
    status: DayStatus
    work_mode: Optional[WorkMode] = None
    punch_in_time: Optional[datetime] = None
    punch_out_time: Optional[datetime] = None
    work_hours: Optional[float] = None
    home_reached: bool = False
    home_reached_at: Optional[datetime] = None


@dataclass(frozen=True)
class DailyReport:
    day: date
    rows: list[DailyRow]
    counts: dict[str, int] = field(default_factory=dict)

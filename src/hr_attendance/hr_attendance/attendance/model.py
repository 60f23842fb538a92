from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus, LateApproval, WorkMode, WorkModeApproval


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar date."""

    attendance_id: int
    employee_id: int
    work_date: date
    punch_in_time: datetime
    status: AttendanceStatus
    work_mode: WorkMode
    approval_status: WorkModeApproval
    late_approval_status: Optional[LateApproval] = None
    punch_out_time: Optional[datetime] = None
    work_hours: Optional[Decimal] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    home_reached: bool = False
    home_reached_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.punch_out_time is None

    @property
    def is_late(self) -> bool:
        return self.status == AttendanceStatus.LATE


@dataclass(frozen=True)
class NewAttendance:
    """Everything punch-in writes, decided before the insert."""

    employee_id: int
    work_date: date
    punch_in_time: datetime
    status: AttendanceStatus
    work_mode: WorkMode
    approval_status: WorkModeApproval
    late_approval_status: Optional[LateApproval]
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None


@dataclass(frozen=True)
class LateStats:
    approved: int
    not_approved: int

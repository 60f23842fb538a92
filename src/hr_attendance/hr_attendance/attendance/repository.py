from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, LateApproval, WorkModeApproval
from .model import AttendanceRecord, NewAttendance


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_punch_in(self, new: NewAttendance) -> int:
        """Insert the day's record.

        Must raise DuplicateRecordError when (employee_id, work_date) already exists.
        """

        raise NotImplementedError

    def close_punch(self, *, attendance_id: int, punch_out_time: datetime, work_hours: Decimal) -> bool:
        """Set punch-out and work hours in one write, only while punch-out is still empty."""

        raise NotImplementedError

    def mark_home_reached(self, *, attendance_id: int, reached_at: datetime) -> bool:
        raise NotImplementedError

    def decide_work_mode(
        self,
        *,
        attendance_id: int,
        status: WorkModeApproval,
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        """Move a pending record to approved/rejected. False when it was not pending."""

        raise NotImplementedError

    def approve_late(self, *, attendance_id: int) -> bool:
        """Move a late, not_approved record to approved. False otherwise."""

        raise NotImplementedError

    def list_pending_work_mode(self, *, limit: int = 200) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_late(self, *, late_approval: Optional[LateApproval] = None, limit: int = 200) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_for_employee(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Sequence[AttendanceStatus],
        late_approval: Optional[LateApproval] = None,
    ) -> int:
        raise NotImplementedError

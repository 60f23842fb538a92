from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType, PayType
from .model import LeaveRequest, NewLeave


class LeaveRepository(Protocol):
    def create(self, new: NewLeave) -> int:
        raise NotImplementedError

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(
        self,
        *,
        employee_id: int,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_by_status(self, *, status: LeaveStatus, limit: int = 200) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_approved_overlapping(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        pay_type: Optional[PayType],
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        """Write status and pay type together, only while the request is pending.

        A ``None`` pay type keeps whatever is already stored.
        """

        raise NotImplementedError

    def set_pay_type(self, *, leave_id: int, pay_type: PayType) -> bool:
        """Set pay type without touching status. Never applies to rejected requests."""

        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType, PayType


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    reason: str
    status: LeaveStatus
    applied_on: date
    pay_type: Optional[PayType] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None

    @property
    def is_approved(self) -> bool:
        return self.status == LeaveStatus.APPROVED

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class NewLeave:
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    reason: str
    applied_on: date


@dataclass(frozen=True)
class LeaveBalance:
    """Consumption numbers shown next to the leave form."""

    sick_quota: int
    sick_taken_this_year: int
    sick_remaining_this_year: int
    sick_taken_this_month: int
    casual_taken_this_month: int
    approved_this_month: int
    rejected_this_month: int
    pending_this_month: int

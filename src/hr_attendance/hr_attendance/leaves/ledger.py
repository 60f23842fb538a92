"""Pure leave-ledger rules: day counting, sick-leave gate and quota, pay type."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import same_month
from ..common.validators import require_date_range
from ..core.enums import LeaveStatus, LeaveType, PayType
from .model import LeaveBalance, LeaveRequest


def count_days(start: date, end: date) -> int:
    """Inclusive day count; rejects ``end < start`` with InvalidDateRange."""
    require_date_range(start, end)
    return (end - start).days + 1


def sick_leave_taken_in_month(existing: Iterable[LeaveRequest], start: date) -> bool:
    """True when an approved Sick Leave already starts in ``start``'s month.

    Only start dates are compared, not full spans.
    """
    return any(
        leave.leave_type == LeaveType.SICK and leave.is_approved and same_month(leave.start_date, start)
        for leave in existing
    )


def resolve_pay_type(leave_type: LeaveType, requested: Optional[PayType]) -> Optional[PayType]:
    """Pay type written at approval: Sick is always paid, Casual keeps what was supplied."""
    if leave_type == LeaveType.SICK:
        return PayType.PAID
    return requested


def _approved_days(leaves: Iterable[LeaveRequest], leave_type: LeaveType, *, month_of: Optional[date] = None, year: Optional[int] = None) -> int:
    total = 0
    for leave in leaves:
        if leave.leave_type != leave_type or not leave.is_approved:
            continue
        if month_of is not None and not same_month(leave.start_date, month_of):
            continue
        if year is not None and leave.start_date.year != year:
            continue
        total += leave.days
    return total


def sick_remaining(leaves: Iterable[LeaveRequest], *, year: int, quota: int) -> int:
    return max(quota - _approved_days(leaves, LeaveType.SICK, year=year), 0)


def build_balance(leaves: Iterable[LeaveRequest], *, as_of: date, sick_quota: int) -> LeaveBalance:
    leaves = list(leaves)
    this_month = [leave for leave in leaves if same_month(leave.start_date, as_of)]

    return LeaveBalance(
        sick_quota=sick_quota,
        sick_taken_this_year=_approved_days(leaves, LeaveType.SICK, year=as_of.year),
        sick_remaining_this_year=sick_remaining(leaves, year=as_of.year, quota=sick_quota),
        sick_taken_this_month=_approved_days(leaves, LeaveType.SICK, month_of=as_of),
        casual_taken_this_month=_approved_days(leaves, LeaveType.CASUAL, month_of=as_of),
        approved_this_month=sum(1 for leave in this_month if leave.status == LeaveStatus.APPROVED),
        rejected_this_month=sum(1 for leave in this_month if leave.status == LeaveStatus.REJECTED),
        pending_this_month=sum(1 for leave in this_month if leave.status == LeaveStatus.PENDING),
    )

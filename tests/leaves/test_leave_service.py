from datetime import date

import pytest

from src.hr_attendance.hr_attendance.core.enums import LeaveStatus, LeaveType, PayType, Role
from src.hr_attendance.hr_attendance.core.exceptions import (
    AuthorizationError,
    InvalidDateRange,
    LeaveAlreadyDecided,
    NotFoundError,
    SickLeaveAlreadyTakenThisMonth,
    ValidationError,
)

from conftest import ADMIN, MANAGER, RAHUL

TODAY = date(2026, 3, 2)


def _apply(service, leave_type, start, end, reason="Fever"):
    return service.apply(
        employee_id=RAHUL.employee_id,
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        reason=reason,
        today=TODAY,
    )


def _approve(service, leave_id, pay_type=None, role=Role.ADMIN):
    return service.approve(
        current_role=role,
        admin_employee_id=ADMIN.employee_id,
        leave_id=leave_id,
        pay_type=pay_type,
    )


def test_apply_counts_inclusive_days_and_starts_pending(leave_service):
    leave = _apply(leave_service, LeaveType.CASUAL, date(2026, 3, 10), date(2026, 3, 12))

    assert leave.days == 3
    assert leave.status == LeaveStatus.PENDING
    assert leave.pay_type is None
    assert leave.applied_on == TODAY


def test_single_day_leave(leave_service):
    leave = _apply(leave_service, "Casual Leave", date(2026, 3, 10), date(2026, 3, 10))
    assert leave.days == 1


def test_apply_rejects_reversed_range(leave_service, leaves_repo):
    with pytest.raises(InvalidDateRange):
        _apply(leave_service, LeaveType.CASUAL, date(2026, 3, 12), date(2026, 3, 10))
    assert leaves_repo.list_by_status(status=LeaveStatus.PENDING) == []


def test_apply_requires_reason_and_known_type(leave_service):
    with pytest.raises(ValidationError):
        _apply(leave_service, LeaveType.CASUAL, date(2026, 3, 10), date(2026, 3, 10), reason="   ")
    with pytest.raises(ValidationError):
        _apply(leave_service, "Vacation", date(2026, 3, 10), date(2026, 3, 10))
    with pytest.raises(ValidationError):
        _apply(leave_service, LeaveType.CASUAL, None, date(2026, 3, 10))


def test_second_sick_leave_in_same_month_is_rejected(leave_service, leaves_repo):
    leaves_repo.add(employee_id=RAHUL.employee_id, leave_type=LeaveType.SICK, start_date=date(2026, 3, 5))

    with pytest.raises(SickLeaveAlreadyTakenThisMonth):
        _apply(leave_service, LeaveType.SICK, date(2026, 3, 20), date(2026, 3, 20))

    leave = _apply(leave_service, LeaveType.SICK, date(2026, 4, 1), date(2026, 4, 1))
    assert leave.status == LeaveStatus.PENDING


def test_pending_or_rejected_sick_leave_does_not_block(leave_service, leaves_repo):
    leaves_repo.add(
        employee_id=RAHUL.employee_id,
        leave_type=LeaveType.SICK,
        start_date=date(2026, 3, 5),
        status=LeaveStatus.PENDING,
    )
    leaves_repo.add(
        employee_id=RAHUL.employee_id,
        leave_type=LeaveType.SICK,
        start_date=date(2026, 3, 6),
        status=LeaveStatus.REJECTED,
    )

    leave = _apply(leave_service, LeaveType.SICK, date(2026, 3, 20), date(2026, 3, 20))
    assert leave.status == LeaveStatus.PENDING


def test_casual_leave_is_not_month_gated(leave_service, leaves_repo):
    leaves_repo.add(employee_id=RAHUL.employee_id, leave_type=LeaveType.SICK, start_date=date(2026, 3, 5))

    leave = _apply(leave_service, LeaveType.CASUAL, date(2026, 3, 20), date(2026, 3, 20))
    assert leave.leave_type == LeaveType.CASUAL


def test_sick_leave_approval_is_always_paid(leave_service):
    leave = _apply(leave_service, LeaveType.SICK, date(2026, 3, 20), date(2026, 3, 20))

    approved = _approve(leave_service, leave.leave_id, pay_type="unpaid")

    assert approved.status == LeaveStatus.APPROVED
    assert approved.pay_type == PayType.PAID
    assert approved.decided_by == ADMIN.employee_id


def test_casual_pay_type_is_set_later_without_touching_status(leave_service):
    leave = _apply(leave_service, LeaveType.CASUAL, date(2026, 3, 10), date(2026, 3, 12))
    approved = _approve(leave_service, leave.leave_id)
    assert approved.pay_type is None

    updated = leave_service.set_pay_type(current_role=Role.MANAGER, leave_id=leave.leave_id, pay_type="unpaid")

    assert updated.pay_type == PayType.UNPAID
    assert updated.status == LeaveStatus.APPROVED


def test_casual_approval_keeps_supplied_pay_type(leave_service):
    leave = _apply(leave_service, LeaveType.CASUAL, date(2026, 3, 10), date(2026, 3, 10))

    approved = _approve(leave_service, leave.leave_id, pay_type=PayType.PAID)

    assert approved.pay_type == PayType.PAID


def test_pay_type_on_pending_casual_keeps_it_pending(leave_service):
    leave = _apply(leave_service, LeaveType.CASUAL, date(2026, 3, 10), date(2026, 3, 10))

    updated = leave_service.set_pay_type(current_role=Role.ADMIN, leave_id=leave.leave_id, pay_type="paid")

    assert updated.status == LeaveStatus.PENDING
    assert updated.pay_type == PayType.PAID


def test_pay_type_cannot_be_set_on_sick_or_rejected_leave(leave_service):
    sick = _apply(leave_service, LeaveType.SICK, date(2026, 3, 20), date(2026, 3, 20))
    with pytest.raises(ValidationError):
        leave_service.set_pay_type(current_role=Role.ADMIN, leave_id=sick.leave_id, pay_type="unpaid")

    casual = _apply(leave_service, LeaveType.CASUAL, date(2026, 3, 10), date(2026, 3, 10))
    leave_service.reject(current_role=Role.ADMIN, admin_employee_id=ADMIN.employee_id, leave_id=casual.leave_id)
    with pytest.raises(LeaveAlreadyDecided):
        leave_service.set_pay_type(current_role=Role.ADMIN, leave_id=casual.leave_id, pay_type="paid")


def test_reject_then_approve_is_a_conflict(leave_service):
    leave = _apply(leave_service, LeaveType.CASUAL, date(2026, 3, 10), date(2026, 3, 10))

    rejected = leave_service.reject(current_role=Role.MANAGER, admin_employee_id=MANAGER.employee_id, leave_id=leave.leave_id)
    assert rejected.status == LeaveStatus.REJECTED
    assert rejected.pay_type is None

    with pytest.raises(LeaveAlreadyDecided):
        _approve(leave_service, leave.leave_id)


def test_repeated_approval_is_a_no_op(leave_service):
    leave = _apply(leave_service, LeaveType.CASUAL, date(2026, 3, 10), date(2026, 3, 10))
    first = _approve(leave_service, leave.leave_id, pay_type="paid")

    second = _approve(leave_service, leave.leave_id, pay_type="unpaid")

    assert second == first


def test_employee_cannot_decide_leave(leave_service):
    leave = _apply(leave_service, LeaveType.CASUAL, date(2026, 3, 10), date(2026, 3, 10))

    with pytest.raises(AuthorizationError):
        _approve(leave_service, leave.leave_id, role=Role.EMPLOYEE)
    with pytest.raises(AuthorizationError):
        leave_service.set_pay_type(current_role=Role.EMPLOYEE, leave_id=leave.leave_id, pay_type="paid")
    with pytest.raises(AuthorizationError):
        leave_service.list_pending(current_role=Role.EMPLOYEE)


def test_unknown_leave_is_not_found(leave_service):
    with pytest.raises(NotFoundError):
        _approve(leave_service, 999)


def test_balance_and_upcoming(leave_service, leaves_repo):
    leaves_repo.add(employee_id=RAHUL.employee_id, leave_type=LeaveType.SICK, start_date=date(2026, 1, 5), end_date=date(2026, 1, 6))
    leaves_repo.add(employee_id=RAHUL.employee_id, leave_type=LeaveType.SICK, start_date=date(2026, 3, 3))
    leaves_repo.add(employee_id=RAHUL.employee_id, start_date=date(2026, 3, 16), end_date=date(2026, 3, 17))
    leaves_repo.add(employee_id=RAHUL.employee_id, start_date=date(2026, 3, 25), status=LeaveStatus.REJECTED)
    leaves_repo.add(employee_id=RAHUL.employee_id, start_date=date(2026, 3, 27), status=LeaveStatus.PENDING)

    balance = leave_service.balance(employee_id=RAHUL.employee_id, as_of=date(2026, 3, 10))

    assert balance.sick_quota == 12
    assert balance.sick_taken_this_year == 3
    assert balance.sick_remaining_this_year == 9
    assert balance.sick_taken_this_month == 1
    assert balance.casual_taken_this_month == 2
    assert balance.approved_this_month == 2
    assert balance.rejected_this_month == 1
    assert balance.pending_this_month == 1

    upcoming = leave_service.upcoming(employee_id=RAHUL.employee_id, today=date(2026, 3, 10), days=10)
    assert [lv.start_date for lv in upcoming] == [date(2026, 3, 16)]


def test_approval_without_pay_type_keeps_the_one_already_set(leave_service):
    leave = _apply(leave_service, LeaveType.CASUAL, date(2026, 3, 10), date(2026, 3, 11))
    leave_service.set_pay_type(current_role=Role.ADMIN, leave_id=leave.leave_id, pay_type="paid")

    approved = _approve(leave_service, leave.leave_id)

    assert approved.status == LeaveStatus.APPROVED
    assert approved.pay_type == PayType.PAID


def test_sick_balance_never_goes_negative(leave_service, leaves_repo):
    # Overdrawing the yearly quota is not blocked; the remainder just bottoms out at zero.
    leaves_repo.add(
        employee_id=RAHUL.employee_id,
        leave_type=LeaveType.SICK,
        start_date=date(2026, 2, 2),
        end_date=date(2026, 2, 21),
    )

    balance = leave_service.balance(employee_id=RAHUL.employee_id, as_of=date(2026, 3, 10))

    assert balance.sick_taken_this_year == 20
    assert balance.sick_remaining_this_year == 0

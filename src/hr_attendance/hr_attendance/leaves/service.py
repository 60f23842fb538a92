from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty, require_present
from ..core.constants import DEFAULT_LIST_LIMIT, DEFAULT_UPCOMING_LEAVE_DAYS
from ..core.enums import APPROVER_ROLES, LeaveStatus, LeaveType, PayType, Role
from ..core.exceptions import (
    AuthorizationError,
    LeaveAlreadyDecided,
    NotFoundError,
    SickLeaveAlreadyTakenThisMonth,
    ValidationError,
)
from ..core.settings import EngineSettings
from ..employees.repository import EmployeeRepository
from .ledger import build_balance, count_days, resolve_pay_type, sick_leave_taken_in_month
from .model import LeaveBalance, LeaveRequest, NewLeave
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        *,
        settings: EngineSettings | None = None,
    ):
        self._leaves = leaves
        self._employees = employees
        self._settings = settings or EngineSettings()

    @staticmethod
    def _require_approver(current_role: Role) -> None:
        if current_role not in APPROVER_ROLES:
            raise AuthorizationError("Only admins and managers can decide leave requests")

    def _get(self, leave_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave

    def apply(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType | str,
        start_date: Optional[date],
        end_date: Optional[date],
        reason: str,
        today: date | None = None,
    ) -> LeaveRequest:
        leave_type = require_enum(require_present(leave_type, "Leave type"), LeaveType, "Leave type")
        start_date = require_present(start_date, "Start date")
        end_date = require_present(end_date, "End date")
        reason = require_non_empty(reason, "Reason")
        days = count_days(start_date, end_date)
        today = today or now_local().date()

        if not self._employees.get_by_id(int(employee_id)):
            raise ValidationError("Employee not found")

        if leave_type == LeaveType.SICK:
            approved_sick = self._leaves.list_for_employee(
                employee_id=int(employee_id),
                status=LeaveStatus.APPROVED,
                leave_type=LeaveType.SICK,
                limit=1000,
            )
            if sick_leave_taken_in_month(approved_sick, start_date):
                logger.warning("Sick leave rejected for employee %s: already taken in %s", employee_id, start_date.strftime("%Y-%m"))
                raise SickLeaveAlreadyTakenThisMonth("Sick Leave already taken this month")

        new = NewLeave(
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days=days,
            reason=reason,
            applied_on=today,
        )
        leave_id = self._leaves.create(new)
        logger.info("Employee %s applied for %s (%s day(s))", employee_id, leave_type.value, days)
        return LeaveRequest(
            leave_id=leave_id,
            employee_id=new.employee_id,
            leave_type=new.leave_type,
            start_date=new.start_date,
            end_date=new.end_date,
            days=new.days,
            reason=new.reason,
            status=LeaveStatus.PENDING,
            applied_on=new.applied_on,
        )

    def approve(
        self,
        *,
        current_role: Role,
        admin_employee_id: int,
        leave_id: int,
        pay_type: PayType | str | None = None,
        now: datetime | None = None,
    ) -> LeaveRequest:
        self._require_approver(current_role)
        requested = require_enum(pay_type, PayType, "Pay type") if pay_type else None

        leave = self._get(leave_id)
        if leave.status == LeaveStatus.APPROVED:
            return leave
        if leave.status == LeaveStatus.REJECTED:
            raise LeaveAlreadyDecided("Leave request was already rejected")

        final_pay_type = resolve_pay_type(leave.leave_type, requested)
        if not self._leaves.decide(
            leave_id=leave.leave_id,
            status=LeaveStatus.APPROVED,
            pay_type=final_pay_type,
            decided_by=int(admin_employee_id),
            decided_at=now or now_local(),
        ):
            return self._settled(leave.leave_id, LeaveStatus.APPROVED)

        logger.info("Leave %s approved by %s (pay_type=%s)", leave.leave_id, admin_employee_id, final_pay_type)
        return self._get(leave.leave_id)

    def reject(
        self,
        *,
        current_role: Role,
        admin_employee_id: int,
        leave_id: int,
        now: datetime | None = None,
    ) -> LeaveRequest:
        self._require_approver(current_role)

        leave = self._get(leave_id)
        if leave.status == LeaveStatus.REJECTED:
            return leave
        if leave.status == LeaveStatus.APPROVED:
            raise LeaveAlreadyDecided("Leave request was already approved")

        if not self._leaves.decide(
            leave_id=leave.leave_id,
            status=LeaveStatus.REJECTED,
            pay_type=None,
            decided_by=int(admin_employee_id),
            decided_at=now or now_local(),
        ):
            return self._settled(leave.leave_id, LeaveStatus.REJECTED)

        logger.info("Leave %s rejected by %s", leave.leave_id, admin_employee_id)
        return self._get(leave.leave_id)

    def _settled(self, leave_id: int, wanted: LeaveStatus) -> LeaveRequest:
        # Another approver decided between our read and our write.
        leave = self._get(leave_id)
        if leave.status != wanted:
            raise LeaveAlreadyDecided(f"Leave request was already {leave.status.value}")
        return leave

    def set_pay_type(
        self,
        *,
        current_role: Role,
        leave_id: int,
        pay_type: PayType | str,
    ) -> LeaveRequest:
        self._require_approver(current_role)
        pay_type = require_enum(require_present(pay_type, "Pay type"), PayType, "Pay type")

        leave = self._get(leave_id)
        if leave.leave_type != LeaveType.CASUAL:
            raise ValidationError("Pay type can only be set for Casual Leave")
        if leave.status == LeaveStatus.REJECTED:
            raise LeaveAlreadyDecided("Leave request was rejected")

        if leave.pay_type != pay_type:
            self._leaves.set_pay_type(leave_id=leave.leave_id, pay_type=pay_type)
            logger.info("Leave %s pay type set to %s", leave.leave_id, pay_type.value)

        updated = self._get(leave.leave_id)
        if updated.status == LeaveStatus.REJECTED:
            raise LeaveAlreadyDecided("Leave request was rejected")
        return updated

    def balance(self, *, employee_id: int, as_of: date | None = None) -> LeaveBalance:
        as_of = as_of or now_local().date()
        leaves = self._leaves.list_for_employee(employee_id=int(employee_id), limit=1000)
        return build_balance(leaves, as_of=as_of, sick_quota=self._settings.sick_leave_days_per_year)

    def list_mine(self, *, employee_id: int, status: LeaveStatus | None = None) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_employee(employee_id=int(employee_id), status=status, limit=DEFAULT_LIST_LIMIT)

    def list_pending(self, *, current_role: Role) -> Sequence[LeaveRequest]:
        self._require_approver(current_role)
        return self._leaves.list_by_status(status=LeaveStatus.PENDING, limit=DEFAULT_LIST_LIMIT)

    def upcoming(
        self,
        *,
        employee_id: int,
        today: date | None = None,
        days: int = DEFAULT_UPCOMING_LEAVE_DAYS,
    ) -> Sequence[LeaveRequest]:
        today = today or now_local().date()
        return self._leaves.list_approved_overlapping(
            start_date=today,
            end_date=today + timedelta(days=int(days)),
            employee_id=int(employee_id),
        )

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import APPROVER_ROLES, LateApproval, Role, WorkMode, WorkModeApproval
from ..core.exceptions import ApprovalAlreadyDecided, ApprovalNotApplicable, AuthorizationError, NotFoundError

logger = logging.getLogger(__name__)


class ApprovalService:
    """Work-mode and late approval tracks on attendance records.

    The two tracks are independent of each other and of punch state: a
    punched-out record may still be pending on work mode. Repeating a
    decision that already holds is a no-op.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    @staticmethod
    def _require_approver(current_role: Role) -> None:
        if current_role not in APPROVER_ROLES:
            raise AuthorizationError("Only admins and managers can approve attendance")

    def _get(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    # Work-mode approval

    def approve_work_mode(
        self,
        *,
        current_role: Role,
        admin_employee_id: int,
        attendance_id: int,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        return self._decide_work_mode(current_role, admin_employee_id, attendance_id, WorkModeApproval.APPROVED, now)

    def reject_work_mode(
        self,
        *,
        current_role: Role,
        admin_employee_id: int,
        attendance_id: int,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        return self._decide_work_mode(current_role, admin_employee_id, attendance_id, WorkModeApproval.REJECTED, now)

    def _decide_work_mode(
        self,
        current_role: Role,
        admin_employee_id: int,
        attendance_id: int,
        target: WorkModeApproval,
        now: Optional[datetime],
    ) -> AttendanceRecord:
        self._require_approver(current_role)

        record = self._get(attendance_id)
        if record.work_mode == WorkMode.OFFICE:
            raise ApprovalNotApplicable("Office punches do not need work-mode approval")
        if record.approval_status == target:
            return record
        if record.approval_status != WorkModeApproval.PENDING:
            raise ApprovalAlreadyDecided(f"Work mode was already {record.approval_status.value}")

        changed = self._attendance.decide_work_mode(
            attendance_id=record.attendance_id,
            status=target,
            decided_by=int(admin_employee_id),
            decided_at=now or now_local(),
        )
        updated = self._get(record.attendance_id)
        if not changed and updated.approval_status != target:
            raise ApprovalAlreadyDecided(f"Work mode was already {updated.approval_status.value}")

        if changed:
            logger.info("Attendance %s work mode %s by %s", record.attendance_id, target.value, admin_employee_id)
        return updated

    # Late approval

    def approve_late(self, *, current_role: Role, attendance_id: int) -> AttendanceRecord:
        self._require_approver(current_role)

        record = self._get(attendance_id)
        if not record.is_late:
            raise ApprovalNotApplicable("Record is not late")
        if record.late_approval_status == LateApproval.APPROVED:
            return record

        if self._attendance.approve_late(attendance_id=record.attendance_id):
            logger.info("Late arrival approved for attendance %s", record.attendance_id)
        return self._get(record.attendance_id)

    def reject_late(self, *, current_role: Role, attendance_id: int) -> AttendanceRecord:
        """Re-affirm ``not_approved``. There is no separate rejected state."""
        self._require_approver(current_role)

        record = self._get(attendance_id)
        if not record.is_late:
            raise ApprovalNotApplicable("Record is not late")
        if record.late_approval_status == LateApproval.APPROVED:
            raise ApprovalAlreadyDecided("Late arrival was already approved")
        return record

    # Listings

    def list_pending_work_mode(self, *, current_role: Role) -> Sequence[AttendanceRecord]:
        self._require_approver(current_role)
        return self._attendance.list_pending_work_mode(limit=DEFAULT_LIST_LIMIT)

    def list_late(self, *, current_role: Role, late_approval: LateApproval | None = None) -> Sequence[AttendanceRecord]:
        self._require_approver(current_role)
        return self._attendance.list_late(late_approval=late_approval, limit=DEFAULT_LIST_LIMIT)

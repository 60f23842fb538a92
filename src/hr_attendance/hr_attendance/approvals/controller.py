from __future__ import annotations

from flask import Flask, request

from ..common.validators import require_enum
from ..common.web import approver_required, current_employee_id, current_role, ok
from ..core.enums import LateApproval
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/approvals/work-mode", methods=["GET"], endpoint="api_pending_work_mode")
    @approver_required
    def pending_work_mode():
        return ok(container.approval_service.list_pending_work_mode(current_role=current_role()))

    @app.route("/api/approvals/work-mode/<int:attendance_id>/approve", methods=["POST"], endpoint="api_approve_work_mode")
    @approver_required
    def approve_work_mode(attendance_id: int):
        record = container.approval_service.approve_work_mode(
            current_role=current_role(),
            admin_employee_id=current_employee_id(),
            attendance_id=attendance_id,
        )
        return ok(record, message="Work mode approved")

    @app.route("/api/approvals/work-mode/<int:attendance_id>/reject", methods=["POST"], endpoint="api_reject_work_mode")
    @approver_required
    def reject_work_mode(attendance_id: int):
        record = container.approval_service.reject_work_mode(
            current_role=current_role(),
            admin_employee_id=current_employee_id(),
            attendance_id=attendance_id,
        )
        return ok(record, message="Work mode rejected")

    @app.route("/api/approvals/late", methods=["GET"], endpoint="api_late_records")
    @approver_required
    def late_records():
        raw = (request.args.get("status") or "").strip()
        late_approval = require_enum(raw, LateApproval, "status") if raw else None
        return ok(container.approval_service.list_late(current_role=current_role(), late_approval=late_approval))

    @app.route("/api/approvals/late/<int:attendance_id>/approve", methods=["POST"], endpoint="api_approve_late")
    @approver_required
    def approve_late(attendance_id: int):
        record = container.approval_service.approve_late(current_role=current_role(), attendance_id=attendance_id)
        return ok(record, message="Late arrival approved")

    @app.route("/api/approvals/late/<int:attendance_id>/reject", methods=["POST"], endpoint="api_reject_late")
    @approver_required
    def reject_late(attendance_id: int):
        record = container.approval_service.reject_late(current_role=current_role(), attendance_id=attendance_id)
        return ok(record, message="Late arrival not approved")

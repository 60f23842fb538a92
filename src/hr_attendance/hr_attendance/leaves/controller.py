from __future__ import annotations

from flask import Flask, request

from ..common.validators import require_enum
from ..common.web import (
    approver_required,
    current_employee_id,
    current_role,
    date_field,
    json_body,
    login_required,
    ok,
)
from ..core.constants import DEFAULT_UPCOMING_LEAVE_DAYS
from ..core.enums import LeaveStatus
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves", methods=["GET"], endpoint="api_my_leaves")
    @login_required
    def my_leaves():
        raw = (request.args.get("status") or "").strip()
        status = require_enum(raw, LeaveStatus, "status") if raw else None
        return ok(container.leave_service.list_mine(employee_id=current_employee_id(), status=status))

    @app.route("/api/leaves", methods=["POST"], endpoint="api_apply_leave")
    @login_required
    def apply_leave():
        body = json_body()
        leave = container.leave_service.apply(
            employee_id=current_employee_id(),
            leave_type=body.get("leave_type"),
            start_date=date_field(body, "start_date"),
            end_date=date_field(body, "end_date"),
            reason=body.get("reason") or "",
        )
        return ok(leave, status=201, message="Leave applied successfully")

    @app.route("/api/leaves/balance", methods=["GET"], endpoint="api_leave_balance")
    @login_required
    def leave_balance():
        return ok(container.leave_service.balance(employee_id=current_employee_id()))

    @app.route("/api/leaves/upcoming", methods=["GET"], endpoint="api_upcoming_leaves")
    @login_required
    def upcoming_leaves():
        days = request.args.get("days", default=DEFAULT_UPCOMING_LEAVE_DAYS, type=int)
        return ok(container.leave_service.upcoming(employee_id=current_employee_id(), days=days))

    @app.route("/api/leaves/pending", methods=["GET"], endpoint="api_pending_leaves")
    @approver_required
    def pending_leaves():
        return ok(container.leave_service.list_pending(current_role=current_role()))

    @app.route("/api/leaves/<int:leave_id>/approve", methods=["POST"], endpoint="api_approve_leave")
    @approver_required
    def approve_leave(leave_id: int):
        leave = container.leave_service.approve(
            current_role=current_role(),
            admin_employee_id=current_employee_id(),
            leave_id=leave_id,
            pay_type=json_body().get("pay_type"),
        )
        return ok(leave, message="Leave approved")

    @app.route("/api/leaves/<int:leave_id>/reject", methods=["POST"], endpoint="api_reject_leave")
    @approver_required
    def reject_leave(leave_id: int):
        leave = container.leave_service.reject(
            current_role=current_role(),
            admin_employee_id=current_employee_id(),
            leave_id=leave_id,
        )
        return ok(leave, message="Leave rejected")

    @app.route("/api/leaves/<int:leave_id>/pay-type", methods=["POST"], endpoint="api_leave_pay_type")
    @approver_required
    def leave_pay_type(leave_id: int):
        leave = container.leave_service.set_pay_type(
            current_role=current_role(),
            leave_id=leave_id,
            pay_type=json_body().get("pay_type"),
        )
        return ok(leave, message="Pay type updated")

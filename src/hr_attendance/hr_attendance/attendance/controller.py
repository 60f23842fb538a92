from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.geo import GeoPoint
from ..common.validators import require_present
from ..common.web import (
    approver_required,
    current_employee_id,
    current_role,
    float_field,
    json_body,
    login_required,
    ok,
)
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import APPROVER_ROLES, WorkMode
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _location(body: dict, *, required: bool) -> GeoPoint | None:
        lat = float_field(body, "lat")
        lng = float_field(body, "lng")
        if lat is None or lng is None:
            if required:
                raise ValidationError("lat and lng are required")
            return None
        return GeoPoint(lat, lng)

    @app.route("/api/attendance/punch-in", methods=["POST"], endpoint="api_punch_in")
    @login_required
    def punch_in():
        body = json_body()
        work_mode = require_present(body.get("work_mode"), "work_mode")
        record = container.attendance_service.punch_in(
            current_employee_id(),
            work_mode=work_mode,
            location=_location(body, required=False),
        )
        message = "Logged in successfully" if record.work_mode == WorkMode.OFFICE else "Punch in recorded. Waiting for approval"
        return ok(record, status=201, message=message)

    @app.route("/api/attendance/punch-out", methods=["POST"], endpoint="api_punch_out")
    @login_required
    def punch_out():
        record = container.attendance_service.punch_out(current_employee_id())
        return ok(record, message="Punched out successfully")

    @app.route("/api/attendance/reached-home", methods=["POST"], endpoint="api_reached_home")
    @login_required
    def reached_home():
        record = container.attendance_service.mark_reached_home(
            current_employee_id(),
            location=_location(json_body(), required=True),
        )
        return ok(record, message="Reached home recorded")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    @login_required
    def today_record():
        return ok(container.attendance_service.get_today_record(current_employee_id(), now_local().date()))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @login_required
    def history():
        limit = request.args.get("limit", default=DEFAULT_HISTORY_LIMIT, type=int)
        return ok(container.attendance_service.get_history(current_employee_id(), limit=limit))

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="api_attendance_stats")
    @login_required
    def stats():
        employee_id = current_employee_id()
        today = now_local().date()
        late = container.attendance_service.late_stats(employee_id, today=today)
        return ok(
            {
                "monthly_present_days": container.attendance_service.monthly_present_days(employee_id, today=today),
                "late_approved": late.approved,
                "late_not_approved": late.not_approved,
            }
        )

    @app.route("/api/attendance/calendar", methods=["GET"], endpoint="api_attendance_calendar")
    @login_required
    def calendar():
        today = now_local().date()
        year = request.args.get("year", default=today.year, type=int)
        month = request.args.get("month", default=today.month, type=int)
        if not 1 <= month <= 12:
            raise ValidationError("month must be 1-12")

        employee_id = request.args.get("employee_id", default=current_employee_id(), type=int)
        if employee_id != current_employee_id() and current_role() not in APPROVER_ROLES:
            raise AuthorizationError("You can only view your own calendar")

        view = container.calendar_service.month(employee_id=employee_id, year=year, month=month)
        payload = {
            "employee_id": view.employee_id,
            "year": view.year,
            "month": view.month,
            "days": view.days,
            "counts": view.counts,
            "presents": view.presents,
        }
        return ok(payload)

    @app.route("/api/attendance/<int:employee_id>/day/<day>", methods=["GET"], endpoint="api_attendance_day_status")
    @approver_required
    def day_status(employee_id: int, day: str):
        try:
            parsed = parse_iso_date(day)
        except ValueError:
            raise ValidationError("day must be YYYY-MM-DD")
        status = container.calendar_service.day_status(employee_id=employee_id, day=parsed)
        return ok({"employee_id": employee_id, "day": parsed, "status": status})

from __future__ import annotations

from datetime import date, timedelta

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.web import approver_required, current_employee_id, date_arg, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _window() -> tuple[date, date]:
        today = now_local().date()
        end = date_arg("end", today)
        start = date_arg("start", end - timedelta(days=30))
        return start, end

    @app.route("/api/reports/company", methods=["GET"], endpoint="api_company_report")
    @approver_required
    def company_report():
        start, end = _window()
        department = (request.args.get("department") or "").strip() or None
        report = container.report_service.company_report(start=start, end=end, department=department)
        return ok(report)

    @app.route("/api/reports/daily", methods=["GET"], endpoint="api_daily_report")
    @approver_required
    def daily_report():
        day = date_arg("date", now_local().date())
        return ok(container.report_service.daily_report(day=day))

    @app.route("/api/reports/me", methods=["GET"], endpoint="api_my_report")
    @login_required
    def my_report():
        start, end = _window()
        summary = container.report_service.employee_summary(
            employee_id=current_employee_id(),
            start=start,
            end=end,
        )
        return ok(summary)

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .approvals.service import ApprovalService
from .attendance.calendar_service import CalendarService
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.settings import EngineSettings
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .reports.service import ReportService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    settings: EngineSettings

    employees_repo: MySQLEmployeeRepository
    holidays_repo: MySQLHolidayRepository
    attendance_repo: MySQLAttendanceRepository
    leaves_repo: MySQLLeaveRepository

    attendance_service: AttendanceService
    calendar_service: CalendarService
    approval_service: ApprovalService
    leave_service: LeaveService
    report_service: ReportService


def build_container(*, db_config: dict, engine: Optional[Mapping[str, Any]] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    settings = EngineSettings.from_mapping(engine)

    employees_repo = MySQLEmployeeRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        settings=settings,
        strategy_factory=AttendanceStrategyFactory(),
    )
    calendar_service = CalendarService(attendance_repo, leaves_repo, holidays_repo, settings=settings)
    approval_service = ApprovalService(attendance_repo)
    leave_service = LeaveService(leaves_repo, employees_repo, settings=settings)
    report_service = ReportService(attendance_repo, leaves_repo, holidays_repo, employees_repo)

    return Container(
        conn=conn,
        settings=settings,
        employees_repo=employees_repo,
        holidays_repo=holidays_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        attendance_service=attendance_service,
        calendar_service=calendar_service,
        approval_service=approval_service,
        leave_service=leave_service,
        report_service=report_service,
    )

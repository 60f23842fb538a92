from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.geo import GeoPoint, distance_between, within_radius
from ..common.validators import require_enum
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, Gender, LateApproval, WorkMode
from ..core.exceptions import (
    AlreadyPunchedToday,
    DuplicateRecordError,
    HomeLocationNotConfigured,
    NoActivePunchIn,
    NotPunchedOut,
    OutsideGeofence,
    OutsideHomeRadius,
    ReachedHomeNotApplicable,
    ValidationError,
)
from ..core.settings import EngineSettings
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .factory import AttendanceStrategyFactory, initial_work_mode_approval
from .model import AttendanceRecord, LateStats, NewAttendance
from .repository import AttendanceRepository
from .work_hours import compute_work_hours

logger = logging.getLogger(__name__)


class AttendanceService:
    """Punch lifecycle of one employee-day: NoRecord -> PunchedIn -> PunchedOut.

    Location is resolved by the caller before the request arrives, and every
    geofence check runs before any write, so an abandoned or rejected punch
    leaves nothing behind.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        settings: EngineSettings | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._settings = settings or EngineSettings()
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise ValidationError("Employee not found")
        return employee

    def punch_in(
        self,
        employee_id: int,
        *,
        work_mode: WorkMode | str,
        location: Optional[GeoPoint] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()
        mode = require_enum(work_mode, WorkMode, "work_mode")

        employee = self._get_employee(employee_id)
        if not employee.is_active:
            raise ValidationError("Inactive employees cannot punch in")

        if self._attendance.get_for_employee_and_date(employee.employee_id, today):
            raise AlreadyPunchedToday("Attendance already recorded for today")

        if mode == WorkMode.OFFICE:
            if location is None:
                raise ValidationError("Location is required for office punch-in")
            distance = distance_between(location, self._settings.office_location)
            if not within_radius(distance, self._settings.office_radius_km):
                logger.warning(
                    "Office punch-in rejected for employee %s: %.0fm from %s",
                    employee.employee_id,
                    distance * 1000,
                    self._settings.office_name,
                )
                raise OutsideGeofence(
                    f"You are {round(distance * 1000)}m away. "
                    f"Office radius is {round(self._settings.office_radius_km * 1000)}m",
                    distance_km=distance,
                    max_km=self._settings.office_radius_km,
                )

        strategy = self._factory.for_punch_in(now=now, cutoff_minutes=self._settings.late_cutoff_minutes)
        decision = strategy.decide_punch_in()

        new = NewAttendance(
            employee_id=employee.employee_id,
            work_date=today,
            punch_in_time=now,
            status=decision.status,
            work_mode=mode,
            approval_status=initial_work_mode_approval(mode),
            late_approval_status=decision.late_approval_status,
            location_lat=location.lat if mode == WorkMode.OFFICE else None,
            location_lng=location.lng if mode == WorkMode.OFFICE else None,
        )
        try:
            attendance_id = self._attendance.create_punch_in(new)
        except DuplicateRecordError:
            # A concurrent punch-in won the insert.
            raise AlreadyPunchedToday("Attendance already recorded for today")

        logger.info(
            "Employee %s punched in (%s, %s, approval=%s)",
            employee.employee_id,
            mode.value,
            decision.status.value,
            new.approval_status.value,
        )
        return AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=new.employee_id,
            work_date=new.work_date,
            punch_in_time=new.punch_in_time,
            status=new.status,
            work_mode=new.work_mode,
            approval_status=new.approval_status,
            late_approval_status=new.late_approval_status,
            location_lat=new.location_lat,
            location_lng=new.location_lng,
        )

    def punch_out(self, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if not record or not record.is_open:
            raise NoActivePunchIn("No active punch-in found")

        work_hours = compute_work_hours(record.punch_in_time, now)
        if not self._attendance.close_punch(
            attendance_id=record.attendance_id,
            punch_out_time=now,
            work_hours=work_hours,
        ):
            raise NoActivePunchIn("No active punch-in found")

        logger.info("Employee %s punched out after %s hours", employee_id, work_hours)
        return self._attendance.get_by_id(record.attendance_id) or record

    def mark_reached_home(
        self,
        employee_id: int,
        *,
        location: GeoPoint,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        employee = self._get_employee(employee_id)
        if employee.gender != Gender.FEMALE:
            raise ReachedHomeNotApplicable("Reached-home confirmation is only available for female employees")
        home = employee.home_location
        if home is None:
            raise HomeLocationNotConfigured("Home location not configured")

        record = self._attendance.get_for_employee_and_date(employee.employee_id, today)
        if not record:
            raise NoActivePunchIn("No attendance record for today")
        if record.is_open:
            raise NotPunchedOut("Punch out before confirming you reached home")

        distance = distance_between(location, home)
        if not within_radius(distance, self._settings.home_radius_km):
            raise OutsideHomeRadius(
                f"You are {round(distance * 1000)}m away from home",
                distance_km=distance,
                max_km=self._settings.home_radius_km,
            )

        if record.home_reached:
            return record

        if self._attendance.mark_home_reached(attendance_id=record.attendance_id, reached_at=now):
            logger.info("Employee %s reached home", employee.employee_id)
        return self._attendance.get_by_id(record.attendance_id) or record

    def get_today_record(self, employee_id: int, today: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(int(employee_id), today)

    def get_history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_employee(int(employee_id), int(limit))

    def late_stats(self, employee_id: int, *, today: date) -> LateStats:
        """Late punches of the current month, split by late-approval state."""
        start = today.replace(day=1)
        common = dict(
            employee_id=int(employee_id),
            start_date=start,
            end_date=today,
            statuses=[AttendanceStatus.LATE],
        )
        return LateStats(
            approved=self._attendance.count_for_employee(**common, late_approval=LateApproval.APPROVED),
            not_approved=self._attendance.count_for_employee(**common, late_approval=LateApproval.NOT_APPROVED),
        )

    def monthly_present_days(self, employee_id: int, *, today: date) -> int:
        return self._attendance.count_for_employee(
            employee_id=int(employee_id),
            start_date=today.replace(day=1),
            end_date=today,
            statuses=[AttendanceStatus.PRESENT, AttendanceStatus.LATE],
        )

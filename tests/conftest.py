from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.hr_attendance.hr_attendance.approvals.service import ApprovalService
from src.hr_attendance.hr_attendance.attendance.calendar_service import CalendarService
from src.hr_attendance.hr_attendance.attendance.model import AttendanceRecord
from src.hr_attendance.hr_attendance.attendance.service import AttendanceService
from src.hr_attendance.hr_attendance.common.geo import GeoPoint
from src.hr_attendance.hr_attendance.container import Container
from src.hr_attendance.hr_attendance.core.constants import EARTH_RADIUS_KM
from src.hr_attendance.hr_attendance.core.enums import (
    AttendanceStatus,
    EmploymentStatus,
    Gender,
    LateApproval,
    LeaveStatus,
    LeaveType,
    Role,
    WorkMode,
    WorkModeApproval,
)
from src.hr_attendance.hr_attendance.core.exceptions import DuplicateRecordError
from src.hr_attendance.hr_attendance.core.settings import EngineSettings
from src.hr_attendance.hr_attendance.employees.model import Employee
from src.hr_attendance.hr_attendance.holidays.model import Holiday
from src.hr_attendance.hr_attendance.leaves.model import LeaveRequest
from src.hr_attendance.hr_attendance.leaves.service import LeaveService
from src.hr_attendance.hr_attendance.reports.service import ReportService

OFFICE = GeoPoint(12.99695, 77.66048)
MEERA_HOME = GeoPoint(12.9352, 77.6245)

# Kilometres per degree of latitude on the haversine sphere.
_KM_PER_DEGREE = EARTH_RADIUS_KM * 3.141592653589793 / 180


def north_of(point: GeoPoint, metres: float) -> GeoPoint:
    return GeoPoint(point.lat + metres / 1000 / _KM_PER_DEGREE, point.lng)


ADMIN = Employee(1, "EMP001", "Asha Rao", Gender.FEMALE, Role.ADMIN, department="HR", position="HR Manager")
MANAGER = Employee(2, "EMP002", "Vikram Shetty", Gender.MALE, Role.MANAGER, department="Engineering")
MEERA = Employee(
    3,
    "EMP003",
    "Meera Nair",
    Gender.FEMALE,
    Role.EMPLOYEE,
    department="Engineering",
    position="Software Engineer",
    home_lat=MEERA_HOME.lat,
    home_lng=MEERA_HOME.lng,
)
RAHUL = Employee(4, "EMP004", "Rahul Menon", Gender.MALE, Role.EMPLOYEE, department="Sales")
PRIYA = Employee(5, "EMP005", "Priya Das", Gender.FEMALE, Role.EMPLOYEE)
GONE = Employee(6, "EMP006", "Former Staff", Gender.OTHER, Role.EMPLOYEE, status=EmploymentStatus.INACTIVE)


class FakeEmployeesRepo:
    def __init__(self, employees=None):
        self._by_id = {e.employee_id: e for e in (employees or [ADMIN, MANAGER, MEERA, RAHUL, PRIYA, GONE])}

    def get_by_id(self, employee_id):
        return self._by_id.get(int(employee_id))

    def list_active(self, *, department=None):
        rows = [e for e in self._by_id.values() if e.is_active]
        if department:
            rows = [e for e in rows if e.department == department]
        return sorted(rows, key=lambda e: e.employee_code)


class FakeHolidaysRepo:
    def __init__(self, holidays=None):
        self.holidays = list(holidays or [])

    def add(self, day: date, name: str = "Holiday") -> None:
        self.holidays.append(Holiday(holiday_date=day, name=name))

    def list_between(self, *, start_date, end_date):
        return [h for h in self.holidays if start_date <= h.holiday_date <= end_date]


class FakeAttendanceRepo:
    """Keeps the store's guarantees: unique (employee, date) and guarded updates."""

    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, AttendanceRecord] = {}

    def add(self, **fields) -> AttendanceRecord:
        fields.setdefault("attendance_id", self._next_id)
        fields.setdefault("status", AttendanceStatus.PRESENT)
        fields.setdefault("work_mode", WorkMode.OFFICE)
        fields.setdefault("approval_status", WorkModeApproval.APPROVED)
        fields.setdefault("punch_in_time", datetime.combine(fields["work_date"], datetime.min.time()).replace(hour=9))
        record = AttendanceRecord(**fields)
        self._rows[record.attendance_id] = record
        self._next_id = max(self._next_id, record.attendance_id) + 1
        return record

    def all(self):
        return list(self._rows.values())

    def get_by_id(self, attendance_id):
        return self._rows.get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id, work_date):
        return next(
            (r for r in self._rows.values() if r.employee_id == int(employee_id) and r.work_date == work_date),
            None,
        )

    def get_recent_for_employee(self, employee_id, limit):
        rows = [r for r in self._rows.values() if r.employee_id == int(employee_id)]
        return sorted(rows, key=lambda r: r.work_date, reverse=True)[: int(limit)]

    def list_between(self, *, start_date, end_date, employee_id=None):
        rows = [r for r in self._rows.values() if start_date <= r.work_date <= end_date]
        if employee_id is not None:
            rows = [r for r in rows if r.employee_id == int(employee_id)]
        return sorted(rows, key=lambda r: (r.work_date, r.punch_in_time))

    def create_punch_in(self, new):
        if self.get_for_employee_and_date(new.employee_id, new.work_date):
            raise DuplicateRecordError("Duplicate entry for key 'uq_attendance_employee_date'")
        return self.add(
            employee_id=new.employee_id,
            work_date=new.work_date,
            punch_in_time=new.punch_in_time,
            status=new.status,
            work_mode=new.work_mode,
            approval_status=new.approval_status,
            late_approval_status=new.late_approval_status,
            location_lat=new.location_lat,
            location_lng=new.location_lng,
        ).attendance_id

    def close_punch(self, *, attendance_id, punch_out_time, work_hours):
        r = self._rows.get(int(attendance_id))
        if not r or r.punch_out_time is not None:
            return False
        self._rows[r.attendance_id] = replace(r, punch_out_time=punch_out_time, work_hours=work_hours)
        return True

    def mark_home_reached(self, *, attendance_id, reached_at):
        r = self._rows.get(int(attendance_id))
        if not r or r.punch_out_time is None or r.home_reached:
            return False
        self._rows[r.attendance_id] = replace(r, home_reached=True, home_reached_at=reached_at)
        return True

    def decide_work_mode(self, *, attendance_id, status, decided_by, decided_at):
        r = self._rows.get(int(attendance_id))
        if not r or r.approval_status != WorkModeApproval.PENDING:
            return False
        self._rows[r.attendance_id] = replace(r, approval_status=status, approved_by=decided_by, approved_at=decided_at)
        return True

    def approve_late(self, *, attendance_id):
        r = self._rows.get(int(attendance_id))
        if not r or r.status != AttendanceStatus.LATE or r.late_approval_status != LateApproval.NOT_APPROVED:
            return False
        self._rows[r.attendance_id] = replace(r, late_approval_status=LateApproval.APPROVED)
        return True

    def list_pending_work_mode(self, *, limit=200):
        return [r for r in self._rows.values() if r.approval_status == WorkModeApproval.PENDING][:limit]

    def list_late(self, *, late_approval=None, limit=200):
        rows = [r for r in self._rows.values() if r.status == AttendanceStatus.LATE]
        if late_approval is not None:
            rows = [r for r in rows if r.late_approval_status == late_approval]
        return rows[:limit]

    def count_for_employee(self, *, employee_id, start_date, end_date, statuses, late_approval=None):
        rows = [
            r
            for r in self.list_between(start_date=start_date, end_date=end_date, employee_id=employee_id)
            if r.status in statuses
        ]
        if late_approval is not None:
            rows = [r for r in rows if r.late_approval_status == late_approval]
        return len(rows)


class FakeLeavesRepo:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, LeaveRequest] = {}

    def add(self, **fields) -> LeaveRequest:
        fields.setdefault("leave_id", self._next_id)
        fields.setdefault("leave_type", LeaveType.CASUAL)
        fields.setdefault("end_date", fields["start_date"])
        fields.setdefault("days", (fields["end_date"] - fields["start_date"]).days + 1)
        fields.setdefault("reason", "Personal")
        fields.setdefault("status", LeaveStatus.APPROVED)
        fields.setdefault("applied_on", fields["start_date"])
        leave = LeaveRequest(**fields)
        self._rows[leave.leave_id] = leave
        self._next_id = max(self._next_id, leave.leave_id) + 1
        return leave

    def create(self, new):
        return self.add(
            employee_id=new.employee_id,
            leave_type=new.leave_type,
            start_date=new.start_date,
            end_date=new.end_date,
            days=new.days,
            reason=new.reason,
            status=LeaveStatus.PENDING,
            applied_on=new.applied_on,
        ).leave_id

    def get_by_id(self, leave_id):
        return self._rows.get(int(leave_id))

    def list_for_employee(self, *, employee_id, status=None, leave_type=None, limit=200):
        rows = [lv for lv in self._rows.values() if lv.employee_id == int(employee_id)]
        if status is not None:
            rows = [lv for lv in rows if lv.status == status]
        if leave_type is not None:
            rows = [lv for lv in rows if lv.leave_type == leave_type]
        return sorted(rows, key=lambda lv: lv.start_date, reverse=True)[:limit]

    def list_by_status(self, *, status, limit=200):
        return [lv for lv in self._rows.values() if lv.status == status][:limit]

    def list_approved_overlapping(self, *, start_date, end_date, employee_id=None):
        rows = [
            lv
            for lv in self._rows.values()
            if lv.status == LeaveStatus.APPROVED and lv.start_date <= end_date and lv.end_date >= start_date
        ]
        if employee_id is not None:
            rows = [lv for lv in rows if lv.employee_id == int(employee_id)]
        return sorted(rows, key=lambda lv: lv.start_date)

    def decide(self, *, leave_id, status, pay_type, decided_by, decided_at):
        lv = self._rows.get(int(leave_id))
        if not lv or lv.status != LeaveStatus.PENDING:
            return False
        changes = dict(status=status, decided_by=decided_by, decided_at=decided_at)
        if status != LeaveStatus.REJECTED and pay_type is not None:
            changes["pay_type"] = pay_type
        self._rows[lv.leave_id] = replace(lv, **changes)
        return True

    def set_pay_type(self, *, leave_id, pay_type):
        lv = self._rows.get(int(leave_id))
        if not lv or lv.leave_type != LeaveType.CASUAL or lv.status == LeaveStatus.REJECTED:
            return False
        self._rows[lv.leave_id] = replace(lv, pay_type=pay_type)
        return True


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def employees_repo():
    return FakeEmployeesRepo()


@pytest.fixture
def attendance_repo():
    return FakeAttendanceRepo()


@pytest.fixture
def leaves_repo():
    return FakeLeavesRepo()


@pytest.fixture
def holidays_repo():
    return FakeHolidaysRepo()


@pytest.fixture
def attendance_service(attendance_repo, employees_repo, settings):
    return AttendanceService(attendance_repo, employees_repo, settings=settings)


@pytest.fixture
def approval_service(attendance_repo):
    return ApprovalService(attendance_repo)


@pytest.fixture
def leave_service(leaves_repo, employees_repo, settings):
    return LeaveService(leaves_repo, employees_repo, settings=settings)


@pytest.fixture
def calendar_service(attendance_repo, leaves_repo, holidays_repo, settings):
    return CalendarService(attendance_repo, leaves_repo, holidays_repo, settings=settings)


@pytest.fixture
def report_service(attendance_repo, leaves_repo, holidays_repo, employees_repo):
    return ReportService(attendance_repo, leaves_repo, holidays_repo, employees_repo)


@pytest.fixture
def container(
    settings,
    employees_repo,
    holidays_repo,
    attendance_repo,
    leaves_repo,
    attendance_service,
    calendar_service,
    approval_service,
    leave_service,
    report_service,
):
    return Container(
        conn=None,
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

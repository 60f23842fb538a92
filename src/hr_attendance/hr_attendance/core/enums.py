from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Portal roles used for permission checks."""

    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


APPROVER_ROLES = frozenset({Role.ADMIN, Role.MANAGER})


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class EmploymentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class AttendanceStatus(str, Enum):
    """Status frozen into an attendance record at punch-in."""

    PRESENT = "present"
    LATE = "late"


class WorkMode(str, Enum):
    OFFICE = "office"
    WFH = "wfh"
    OUTSIDE = "outside"


class WorkModeApproval(str, Enum):
    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"


class LateApproval(str, Enum):
    APPROVED = "approved"
    NOT_APPROVED = "not_approved"


class LeaveType(str, Enum):
    SICK = "Sick Leave"
    CASUAL = "Casual Leave"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PayType(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"


class DayStatus(str, Enum):
    """Display classification of one employee-date. Computed, never stored."""

    PRESENT = "present"
    LATE = "late"
    LEAVE = "leave"
    WEEKOFF = "weekoff"
    HOLIDAY = "holiday"
    NO_RECORD = "no-record"

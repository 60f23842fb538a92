from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..core.enums import AttendanceStatus, LateApproval, WorkMode, WorkModeApproval
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, punch_in_time, punch_out_time,
    status, work_mode, approval_status, late_approval_status, work_hours,
    location_lat, location_lng, home_reached, home_reached_at,
    approved_by, approved_at
"""


def _to_record(r: dict[str, Any]) -> AttendanceRecord:
    late = r.get("late_approval_status")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        punch_in_time=r["punch_in_time"],
        punch_out_time=r.get("punch_out_time"),
        status=AttendanceStatus(r["status"]),
        work_mode=WorkMode(r["work_mode"]),
        approval_status=WorkModeApproval(r["approval_status"]),
        late_approval_status=LateApproval(late) if late else None,
        work_hours=Decimal(str(r["work_hours"])) if r.get("work_hours") is not None else None,
        location_lat=float(r["location_lat"]) if r.get("location_lat") is not None else None,
        location_lng=float(r["location_lng"]) if r.get("location_lng") is not None else None,
        home_reached=bool(r.get("home_reached")),
        home_reached_at=r.get("home_reached_at"),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approved_at=r.get("approved_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {' AND '.join(clauses)}
                ORDER BY work_date ASC, punch_in_time ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_punch_in(self, new: NewAttendance) -> int:
        # uq_attendance_employee_date turns a concurrent second insert into DuplicateRecordError.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, work_date, punch_in_time, status, work_mode,
                    approval_status, late_approval_status, location_lat, location_lng
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(new.employee_id),
                    new.work_date,
                    new.punch_in_time,
                    new.status.value,
                    new.work_mode.value,
                    new.approval_status.value,
                    new.late_approval_status.value if new.late_approval_status else None,
                    new.location_lat,
                    new.location_lng,
                ),
            )
            return int(cur.lastrowid)

    def close_punch(self, *, attendance_id: int, punch_out_time: datetime, work_hours: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET punch_out_time=%s, work_hours=%s
                WHERE attendance_id=%s AND punch_out_time IS NULL
                """,
                (punch_out_time, work_hours, int(attendance_id)),
            )
            return cur.rowcount > 0

    def mark_home_reached(self, *, attendance_id: int, reached_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET home_reached=1, home_reached_at=%s
                WHERE attendance_id=%s AND punch_out_time IS NOT NULL AND home_reached=0
                """,
                (reached_at, int(attendance_id)),
            )
            return cur.rowcount > 0

    def decide_work_mode(
        self,
        *,
        attendance_id: int,
        status: WorkModeApproval,
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET approval_status=%s, approved_by=%s, approved_at=%s
                WHERE attendance_id=%s AND approval_status=%s
                """,
                (status.value, int(decided_by), decided_at, int(attendance_id), WorkModeApproval.PENDING.value),
            )
            return cur.rowcount > 0

    def approve_late(self, *, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET late_approval_status=%s
                WHERE attendance_id=%s AND status=%s AND late_approval_status=%s
                """,
                (
                    LateApproval.APPROVED.value,
                    int(attendance_id),
                    AttendanceStatus.LATE.value,
                    LateApproval.NOT_APPROVED.value,
                ),
            )
            return cur.rowcount > 0

    def list_pending_work_mode(self, *, limit: int = 200) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE approval_status=%s
                ORDER BY work_date DESC, punch_in_time DESC
                LIMIT %s
                """,
                (WorkModeApproval.PENDING.value, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_late(self, *, late_approval: Optional[LateApproval] = None, limit: int = 200) -> Sequence[AttendanceRecord]:
        clauses = ["status=%s"]
        params: list[object] = [AttendanceStatus.LATE.value]
        if late_approval is not None:
            clauses.append("late_approval_status=%s")
            params.append(late_approval.value)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {' AND '.join(clauses)}
                ORDER BY work_date DESC, punch_in_time DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_for_employee(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Sequence[AttendanceStatus],
        late_approval: Optional[LateApproval] = None,
    ) -> int:
        if not statuses:
            return 0
        placeholders = ",".join(["%s"] * len(statuses))
        clauses = ["employee_id=%s", "work_date BETWEEN %s AND %s", f"status IN ({placeholders})"]
        params: list[object] = [int(employee_id), start_date, end_date, *[s.value for s in statuses]]
        if late_approval is not None:
            clauses.append("late_approval_status=%s")
            params.append(late_approval.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS n FROM attendance_records WHERE {' AND '.join(clauses)}",
                tuple(params),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

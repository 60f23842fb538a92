from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType, PayType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest, NewLeave
from .repository import LeaveRepository

_COLUMNS = """
    leave_id, employee_id, leave_type, start_date, end_date, days, reason,
    status, pay_type, applied_on, decided_by, decided_at
"""


def _to_leave(r: dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=int(r["days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        pay_type=PayType(r["pay_type"]) if r.get("pay_type") else None,
        applied_on=r["applied_on"],
        decided_by=int(r["decided_by"]) if r.get("decided_by") is not None else None,
        decided_at=r.get("decided_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, new: NewLeave) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, days, reason, status, applied_on)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(new.employee_id),
                    new.leave_type.value,
                    new.start_date,
                    new.end_date,
                    int(new.days),
                    new.reason,
                    LeaveStatus.PENDING.value,
                    new.applied_on,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_for_employee(
        self,
        *,
        employee_id: int,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        clauses = ["employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if leave_type is not None:
            clauses.append("leave_type=%s")
            params.append(leave_type.value)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {' AND '.join(clauses)}
                ORDER BY start_date DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_by_status(self, *, status: LeaveStatus, limit: int = 200) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE status=%s
                ORDER BY applied_on ASC, leave_id ASC
                LIMIT %s
                """,
                (status.value, int(limit)),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_approved_overlapping(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["status=%s", "start_date <= %s", "end_date >= %s"]
        params: list[object] = [LeaveStatus.APPROVED.value, end_date, start_date]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {' AND '.join(clauses)}
                ORDER BY start_date ASC
                """,
                tuple(params),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        pay_type: Optional[PayType],
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if status == LeaveStatus.REJECTED:
                cur.execute(
                    """
                    UPDATE leave_requests
                    SET status=%s, decided_by=%s, decided_at=%s
                    WHERE leave_id=%s AND status=%s
                    """,
                    (status.value, int(decided_by), decided_at, int(leave_id), LeaveStatus.PENDING.value),
                )
            else:
                cur.execute(
                    """
                    UPDATE leave_requests
                    SET status=%s, pay_type=COALESCE(%s, pay_type), decided_by=%s, decided_at=%s
                    WHERE leave_id=%s AND status=%s
                    """,
                    (
                        status.value,
                        pay_type.value if pay_type else None,
                        int(decided_by),
                        decided_at,
                        int(leave_id),
                        LeaveStatus.PENDING.value,
                    ),
                )
            return cur.rowcount > 0

    def set_pay_type(self, *, leave_id: int, pay_type: PayType) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET pay_type=%s
                WHERE leave_id=%s AND leave_type=%s AND status<>%s
                """,
                (pay_type.value, int(leave_id), LeaveType.CASUAL.value, LeaveStatus.REJECTED.value),
            )
            # rowcount is 0 when the value is unchanged; callers re-read to confirm.
            return cur.rowcount > 0

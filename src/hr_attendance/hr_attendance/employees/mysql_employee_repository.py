from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import EmploymentStatus, Gender, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, employee_code, full_name, gender, role, status,
    department, position, home_lat, home_lng
"""


def _to_employee(r: dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        employee_code=r["employee_code"],
        full_name=r["full_name"],
        gender=Gender(r["gender"]),
        role=Role(r["role"]),
        status=EmploymentStatus(r["status"]),
        department=r.get("department"),
        position=r.get("position"),
        home_lat=float(r["home_lat"]) if r.get("home_lat") is not None else None,
        home_lng=float(r["home_lng"]) if r.get("home_lng") is not None else None,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_active(self, *, department: Optional[str] = None) -> Sequence[Employee]:
        clauses = ["status=%s"]
        params: list[object] = [EmploymentStatus.ACTIVE.value]
        if department:
            clauses.append("department=%s")
            params.append(department)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE {' AND '.join(clauses)} ORDER BY employee_code ASC",
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]

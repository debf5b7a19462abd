from __future__ import annotations

from typing import Optional

from ..core.enums import EmploymentType, StaffStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import StaffMember
from .repository import StaffRepository

_COLUMNS = "staff_id, name, email, phone, role, department, employment_type, status, points, recovery_shifts"


def _to_staff(r: dict) -> StaffMember:
    return StaffMember(
        staff_id=str(r["staff_id"]),
        name=r["name"],
        email=r["email"],
        phone=r.get("phone"),
        role=r["role"],
        department=r["department"],
        employment_type=EmploymentType(r["employment_type"]),
        status=StaffStatus(r["status"]),
        points=int(r.get("points") or 0),
        recovery_shifts=int(r.get("recovery_shifts") or 0),
    )


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, staff_id: str) -> Optional[StaffMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE staff_id=%s", (staff_id,))
            r = fetchone(cur)
            return _to_staff(r) if r else None

from __future__ import annotations

from typing import Optional

from ..core.enums import ShiftStatus, ShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import Shift
from .repository import ShiftRepository

_COLUMNS = (
    "shift_id, staff_id, shift_type, shift_date, start_time, end_time, "
    "department, role, status, swap_with_staff_id"
)


def _to_shift(r: dict) -> Shift:
    return Shift(
        shift_id=str(r["shift_id"]),
        staff_id=str(r["staff_id"]),
        shift_type=ShiftType(r["shift_type"]),
        shift_date=r["shift_date"],
        start_time=normalize_mysql_time(r["start_time"]).strftime("%H:%M"),
        end_time=normalize_mysql_time(r["end_time"]).strftime("%H:%M"),
        department=r["department"],
        role=r["role"],
        status=ShiftStatus(r["status"]),
        swap_with_staff_id=r.get("swap_with_staff_id"),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM shifts WHERE shift_id=%s", (shift_id,))
            r = fetchone(cur)
            return _to_shift(r) if r else None

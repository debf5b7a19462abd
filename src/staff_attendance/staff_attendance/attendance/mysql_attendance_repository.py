from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Mapping, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import month_bounds
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    DuplicateActiveRecordError,
    NotFoundError,
    PersistenceError,
    RecoveryLimitError,
    ShiftReleasedError,
    ValidationError,
)
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PATCHABLE_FIELDS, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, staff_id, shift_id, event_date, status, points,
    clock_in, clock_out, tardy_minutes, call_off_reason, cancel_reason,
    notification_time, expiration_date, notes, is_cancelled, is_swapped, swap_with_staff_id
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        staff_id=str(r["staff_id"]),
        shift_id=str(r["shift_id"]),
        event_date=r["event_date"],
        status=AttendanceStatus(r["status"]),
        points=int(r["points"]),
        clock_in=r.get("clock_in"),
        clock_out=r.get("clock_out"),
        tardy_minutes=int(r["tardy_minutes"]) if r.get("tardy_minutes") is not None else None,
        call_off_reason=r.get("call_off_reason"),
        cancel_reason=r.get("cancel_reason"),
        notification_time=r.get("notification_time"),
        expiration_date=r.get("expiration_date"),
        notes=r.get("notes"),
        is_cancelled=bool(r.get("is_cancelled")),
        is_swapped=bool(r.get("is_swapped")),
        swap_with_staff_id=r.get("swap_with_staff_id"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """MySQL store.

    ``create`` runs in one transaction that first locks the parent ``shifts``
    row (and the ``staff`` row when a monthly credit limit applies), so
    concurrent writers for the same shift or staff member are serialized.
    The generated columns ``active_shift_id`` and ``released_key`` carry
    UNIQUE indexes as a second line for rows whose shift is not in ``shifts``.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _check_shift(self, cur, record: AttendanceRecord) -> None:
        cur.execute("SELECT shift_id FROM shifts WHERE shift_id=%s FOR UPDATE", (record.shift_id,))
        fetchall(cur)
        cur.execute(
            "SELECT staff_id, is_cancelled, is_swapped FROM attendance_records WHERE shift_id=%s FOR UPDATE",
            (record.shift_id,),
        )
        for r in fetchall(cur):
            released = bool(r["is_cancelled"]) or bool(r["is_swapped"])
            if not released:
                raise DuplicateActiveRecordError(f"Shift {record.shift_id} already has an attendance record")
            if str(r["staff_id"]) == record.staff_id:
                raise ShiftReleasedError("This shift has already been cancelled or swapped")

    def _check_monthly_credits(self, cur, record: AttendanceRecord, limit: int) -> None:
        cur.execute("SELECT staff_id FROM staff WHERE staff_id=%s FOR UPDATE", (record.staff_id,))
        fetchall(cur)
        start, end = month_bounds(record.event_date)
        cur.execute(
            """
            SELECT COUNT(*) AS used
            FROM attendance_records
            WHERE staff_id=%s AND event_date BETWEEN %s AND %s AND status=%s AND points < 0
            FOR UPDATE
            """,
            (record.staff_id, start, end, AttendanceStatus.COMPLETED.value),
        )
        row = fetchone(cur)
        if row and int(row["used"]) >= limit:
            raise RecoveryLimitError(f"Recovery limit reached ({limit} per month)")

    def create(self, record: AttendanceRecord, *, monthly_credit_limit: Optional[int] = None) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                self._check_shift(cur, record)
                if monthly_credit_limit is not None and record.is_recovery_credit:
                    self._check_monthly_credits(cur, record, monthly_credit_limit)

                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        staff_id, shift_id, event_date, status, points,
                        clock_in, clock_out, tardy_minutes, call_off_reason, cancel_reason,
                        notification_time, expiration_date, notes, is_cancelled, is_swapped, swap_with_staff_id
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.staff_id,
                        record.shift_id,
                        record.event_date,
                        record.status.value,
                        int(record.points),
                        record.clock_in,
                        record.clock_out,
                        record.tardy_minutes,
                        record.call_off_reason,
                        record.cancel_reason,
                        record.notification_time,
                        record.expiration_date,
                        record.notes,
                        int(record.is_cancelled),
                        int(record.is_swapped),
                        record.swap_with_staff_id,
                    ),
                )
                return replace(record, attendance_id=int(cur.lastrowid))
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY and "uq_attendance_released" in str(e):
                raise ShiftReleasedError("This shift has already been cancelled or swapped") from e
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicateActiveRecordError(f"Shift {record.shift_id} already has an attendance record") from e
            raise PersistenceError(str(e)) from e

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_by_staff_and_date_range(self, staff_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE staff_id=%s AND event_date BETWEEN %s AND %s
                ORDER BY event_date, attendance_id
                """,
                (staff_id, start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def find_active_by_shift(self, shift_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE active_shift_id=%s", (shift_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_staff(self, staff_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE staff_id=%s ORDER BY event_date, attendance_id",
                (staff_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def update(self, attendance_id: int, patch: Mapping[str, Any]) -> AttendanceRecord:
        unknown = set(patch) - PATCHABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s FOR UPDATE", (int(attendance_id),))
            r = fetchone(cur)
            if not r:
                raise NotFoundError(f"Attendance record {attendance_id} not found")

            if patch:
                # Column names come from PATCHABLE_FIELDS, never from the caller.
                assignments = ", ".join(f"{k}=%s" for k in sorted(patch))
                cur.execute(
                    f"UPDATE attendance_records SET {assignments} WHERE attendance_id=%s",
                    tuple(patch[k] for k in sorted(patch)) + (int(attendance_id),),
                )
            return replace(_to_record(r), **dict(patch))

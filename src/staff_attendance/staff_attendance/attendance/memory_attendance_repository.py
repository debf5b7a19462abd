from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import month_bounds
from ..core.exceptions import (
    DuplicateActiveRecordError,
    NotFoundError,
    RecoveryLimitError,
    ShiftReleasedError,
    ValidationError,
)
from .model import PATCHABLE_FIELDS, AttendanceRecord
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local store. A single lock makes check-and-insert atomic."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[int, AttendanceRecord] = {}
        self._active_by_shift: dict[str, int] = {}
        # (staff_id, shift_id) pairs the staff member cancelled or swapped away
        self._released: set[tuple[str, str]] = set()
        self._id = 0

    def create(self, record: AttendanceRecord, *, monthly_credit_limit: Optional[int] = None) -> AttendanceRecord:
        with self._lock:
            if record.shift_id in self._active_by_shift:
                raise DuplicateActiveRecordError(f"Shift {record.shift_id} already has an attendance record")
            if (record.staff_id, record.shift_id) in self._released:
                raise ShiftReleasedError("This shift has already been cancelled or swapped")
            if monthly_credit_limit is not None and record.is_recovery_credit:
                start, end = month_bounds(record.event_date)
                used = sum(
                    1
                    for r in self._by_id.values()
                    if r.staff_id == record.staff_id and start <= r.event_date <= end and r.is_recovery_credit
                )
                if used >= monthly_credit_limit:
                    raise RecoveryLimitError(f"Recovery limit reached ({monthly_credit_limit} per month)")

            self._id += 1
            saved = replace(record, attendance_id=self._id)
            self._by_id[self._id] = saved
            if saved.is_active:
                self._active_by_shift[saved.shift_id] = saved.attendance_id
            else:
                self._released.add((saved.staff_id, saved.shift_id))
            return saved

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(int(attendance_id))

    def find_by_staff_and_date_range(self, staff_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        items = [r for r in self._by_id.values() if r.staff_id == staff_id and start <= r.event_date <= end]
        items.sort(key=lambda r: (r.event_date, r.attendance_id))
        return items

    def find_active_by_shift(self, shift_id: str) -> Optional[AttendanceRecord]:
        attendance_id = self._active_by_shift.get(shift_id)
        return self._by_id.get(attendance_id) if attendance_id is not None else None

    def list_for_staff(self, staff_id: str) -> Sequence[AttendanceRecord]:
        items = [r for r in self._by_id.values() if r.staff_id == staff_id]
        items.sort(key=lambda r: (r.event_date, r.attendance_id))
        return items

    def update(self, attendance_id: int, patch: Mapping[str, Any]) -> AttendanceRecord:
        unknown = set(patch) - PATCHABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        with self._lock:
            current = self._by_id.get(int(attendance_id))
            if current is None:
                raise NotFoundError(f"Attendance record {attendance_id} not found")
            updated = replace(current, **dict(patch))
            self._by_id[current.attendance_id] = updated
            return updated

from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance record store.

    ``create`` is an atomic check-and-insert. It raises
    DuplicateActiveRecordError when the shift already has an active record,
    ShiftReleasedError when the same staff member already cancelled or swapped
    the shift, and RecoveryLimitError when ``monthly_credit_limit`` is given
    and the staff member already has that many recovery credits in the
    record's month. Other failures surface as PersistenceError.
    """

    def create(self, record: AttendanceRecord, *, monthly_credit_limit: Optional[int] = None) -> AttendanceRecord:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_by_staff_and_date_range(self, staff_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_active_by_shift(self, shift_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_staff(self, staff_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def update(self, attendance_id: int, patch: Mapping[str, Any]) -> AttendanceRecord:
        """Patch clock_out / notes. Raises NotFoundError for an unknown id."""

        raise NotImplementedError

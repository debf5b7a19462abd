from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus

# Fields that may be changed through ``AttendanceRepository.update``.
PATCHABLE_FIELDS = frozenset({"clock_out", "notes"})


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: the attendance outcome of one shift.

    ``points`` is fixed when the record is created. ``expiration_date`` is the
    last day the points count toward the staff member's live total.
    """

    staff_id: str
    shift_id: str
    event_date: date
    status: AttendanceStatus
    points: int
    attendance_id: Optional[int] = None
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    tardy_minutes: Optional[int] = None
    call_off_reason: Optional[str] = None
    cancel_reason: Optional[str] = None
    notification_time: Optional[datetime] = None
    expiration_date: Optional[date] = None
    notes: Optional[str] = None
    is_cancelled: bool = False
    is_swapped: bool = False
    swap_with_staff_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return not (self.is_cancelled or self.is_swapped)

    @property
    def is_recovery_credit(self) -> bool:
        # Recovery credits are the only records carrying negative points.
        return self.status == AttendanceStatus.COMPLETED and self.points < 0

    def counts_on(self, day: date) -> bool:
        return self.expiration_date is None or day <= self.expiration_date

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds
from ..core.enums import ConsequenceLevel
from ..policy.model import AttendancePolicy, ConsequenceThresholds
from ..staff.model import StaffMember


def classify_consequence(total: int, thresholds: ConsequenceThresholds) -> ConsequenceLevel:
    """Highest threshold met wins; each boundary is inclusive."""
    if total >= thresholds.termination:
        return ConsequenceLevel.TERMINATION
    if total >= thresholds.probation:
        return ConsequenceLevel.PROBATION
    if total >= thresholds.warning:
        return ConsequenceLevel.WARNING
    return ConsequenceLevel.NONE


def live_total(records: Iterable[AttendanceRecord], as_of: date) -> int:
    total = sum(r.points for r in records if r.counts_on(as_of))
    return max(0, total)


@dataclass(frozen=True)
class PointsSummary:
    staff_id: str
    total: int
    level: ConsequenceLevel
    recovery_shifts_this_month: int
    recovery_eligible: bool

    def as_dict(self) -> dict:
        return {
            "staff_id": self.staff_id,
            "total": self.total,
            "level": self.level.value,
            "recovery_shifts_this_month": self.recovery_shifts_this_month,
            "recovery_eligible": self.recovery_eligible,
        }


class PointsService:
    """Read path over attendance records: live totals and escalation tier.

    The tier is advisory; nothing here enforces a consequence.
    """

    def __init__(self, attendance: AttendanceRepository, policy: AttendancePolicy):
        self._attendance = attendance
        self._policy = policy

    def live_total(self, staff_id: str, as_of: date) -> int:
        return live_total(self._attendance.list_for_staff(staff_id), as_of)

    def recoveries_in_month(self, staff_id: str, day: date) -> int:
        start, end = month_bounds(day)
        records = self._attendance.find_by_staff_and_date_range(staff_id, start, end)
        return sum(1 for r in records if r.is_recovery_credit)

    def summary(self, staff: StaffMember, as_of: date) -> PointsSummary:
        total = self.live_total(staff.staff_id, as_of)
        return PointsSummary(
            staff_id=staff.staff_id,
            total=total,
            level=classify_consequence(total, self._policy.consequences),
            recovery_shifts_this_month=self.recoveries_in_month(staff.staff_id, as_of),
            recovery_eligible=total >= self._policy.recovery.points_threshold,
        )

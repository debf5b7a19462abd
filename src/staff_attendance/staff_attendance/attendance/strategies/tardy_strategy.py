from __future__ import annotations

from datetime import date

from ...core.enums import AttendanceStatus
from ...policy.model import AttendancePolicy
from .. import evaluator
from .base import ClockInStrategy, StatusDecision


class TardyStrategy(ClockInStrategy):
    """Late clock-in beyond the grace threshold, tiered by minutes late."""

    def decide(self, *, policy: AttendancePolicy, event_date: date, minutes_late: int) -> StatusDecision:
        status = AttendanceStatus.TARDY
        return StatusDecision(
            status=status,
            points=evaluator.points_for(policy, status, minutes_late),
            expiration_date=evaluator.expiration_date(policy, status, event_date),
            tardy_minutes=minutes_late,
        )

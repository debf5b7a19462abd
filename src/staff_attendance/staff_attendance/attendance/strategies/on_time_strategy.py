from __future__ import annotations

from datetime import date

from ...core.enums import AttendanceStatus
from ...policy.model import AttendancePolicy
from .. import evaluator
from .base import ClockInStrategy, StatusDecision


class OnTimeStrategy(ClockInStrategy):
    """Clock-in within the grace threshold."""

    def decide(self, *, policy: AttendancePolicy, event_date: date, minutes_late: int) -> StatusDecision:
        status = AttendanceStatus.ON_TIME
        return StatusDecision(
            status=status,
            points=evaluator.points_for(policy, status),
            expiration_date=evaluator.expiration_date(policy, status, event_date),
        )

from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceStatus
from . import evaluator
from .strategies.base import ClockInStrategy
from .strategies.on_time_strategy import OnTimeStrategy
from .strategies.tardy_strategy import TardyStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_clock_in(self, *, minutes_late: int, threshold_minutes: int) -> ClockInStrategy:
        if evaluator.classify(minutes_late, threshold_minutes) == AttendanceStatus.ON_TIME:
            return OnTimeStrategy()
        return TardyStrategy()

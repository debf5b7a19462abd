from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ...core.enums import AttendanceStatus
from ...policy.model import AttendancePolicy


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    points: int
    expiration_date: date
    tardy_minutes: Optional[int] = None


class ClockInStrategy(ABC):
    """Strategy Pattern: encapsulate how a clock-in is adjudicated."""

    @abstractmethod
    def decide(self, *, policy: AttendancePolicy, event_date: date, minutes_late: int) -> StatusDecision:
        raise NotImplementedError

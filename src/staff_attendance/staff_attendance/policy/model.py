from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


@dataclass(frozen=True)
class TieredPenalty:
    """Points for a status tiered by minutes (TARDY / LEFT_EARLY)."""

    points: int
    under_15_min: int
    over_15_min: int
    over_30_min: int


@dataclass(frozen=True)
class CallOffPolicy:
    with_approval: int
    without_approval: int
    expiration_days: int


@dataclass(frozen=True)
class ConsequenceThresholds:
    warning: int
    probation: int
    termination: int


@dataclass(frozen=True)
class RecoveryPolicy:
    points_threshold: int
    recovery_shift_value: int
    max_recovery_per_month: int


@dataclass(frozen=True)
class AttendancePolicy:
    """Validated, immutable view over the policy tables."""

    on_time_points: int
    tardy_threshold_minutes: int
    tardy: TieredPenalty
    left_early: TieredPenalty
    no_show_points: int
    called_off: CallOffPolicy
    completed_points: int
    consequences: ConsequenceThresholds
    recovery: RecoveryPolicy
    rules: Mapping[str, Mapping[str, int]] = field(default_factory=dict, compare=False, repr=False)

    def lookup(self, status_name: str, tier: str) -> int:
        """Read a raw table value by status name and tier name."""
        return self.rules[status_name][tier]

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Tuple

from ..core.enums import NotificationChannel, NotificationPriority, NotificationType


@dataclass(frozen=True)
class PendingNotification:
    """A notification the workflow wants delivered after persistence."""

    recipient_id: str
    message: str
    channels: FrozenSet[NotificationChannel]
    priority: NotificationPriority
    type: NotificationType


@dataclass(frozen=True)
class DeliveredNotification:
    recipient_id: str
    message: str
    channels: FrozenSet[NotificationChannel]
    priority: NotificationPriority
    type: NotificationType
    delivered_at: datetime


@dataclass(frozen=True)
class NotificationPreference:
    """Per-recipient delivery preferences.

    ``quiet_hours`` holds inclusive (start_hour, end_hour) pairs; during quiet
    hours only HIGH and URGENT notifications pass.
    """

    muted_types: FrozenSet[NotificationType] = frozenset()
    muted_channels: FrozenSet[NotificationChannel] = frozenset()
    priority_threshold: NotificationPriority = NotificationPriority.LOW
    quiet_hours: Tuple[Tuple[int, int], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DispatchReport:
    sent: int = 0
    suppressed: int = 0
    failed: int = 0
    errors: Tuple[str, ...] = ()

    def as_dict(self) -> dict:
        return {"sent": self.sent, "suppressed": self.suppressed, "failed": self.failed}

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Iterable, Optional, Protocol, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import NotificationChannel, NotificationPriority, NotificationType
from .model import DeliveredNotification, NotificationPreference

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    def send(
        self,
        recipient_id: str,
        message: str,
        *,
        channels: Iterable[NotificationChannel],
        priority: NotificationPriority,
        type: NotificationType,
    ) -> bool:
        """Deliver a message. Returns False when preferences suppress it."""

        raise NotImplementedError


class InMemoryNotificationDispatcher(NotificationDispatcher):
    """Dispatcher that honours recipient preferences and keeps an outbox."""

    def __init__(self, *, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or now_local
        self._lock = threading.Lock()
        self._preferences: dict[str, NotificationPreference] = {}
        self._outbox: list[DeliveredNotification] = []

    def update_preferences(self, recipient_id: str, preference: NotificationPreference) -> None:
        self._preferences[recipient_id] = preference

    def outbox(self, recipient_id: Optional[str] = None) -> Sequence[DeliveredNotification]:
        items = list(self._outbox)
        if recipient_id is not None:
            items = [n for n in items if n.recipient_id == recipient_id]
        return items

    def _allowed_channels(
        self,
        preference: Optional[NotificationPreference],
        channels: frozenset,
        priority: NotificationPriority,
        type: NotificationType,
        now: datetime,
    ) -> frozenset:
        if preference is None:
            return channels
        if type in preference.muted_types:
            return frozenset()
        if priority.rank < preference.priority_threshold.rank:
            return frozenset()
        in_quiet_hours = any(start <= now.hour <= end for start, end in preference.quiet_hours)
        if in_quiet_hours and priority.rank < NotificationPriority.HIGH.rank:
            return frozenset()
        return channels - preference.muted_channels

    def send(
        self,
        recipient_id: str,
        message: str,
        *,
        channels: Iterable[NotificationChannel],
        priority: NotificationPriority,
        type: NotificationType,
    ) -> bool:
        now = self._clock()
        allowed = self._allowed_channels(
            self._preferences.get(recipient_id), frozenset(channels), priority, type, now
        )
        if not allowed:
            logger.debug("Notification to %s suppressed by preferences", recipient_id)
            return False

        with self._lock:
            self._outbox.append(
                DeliveredNotification(
                    recipient_id=recipient_id,
                    message=message,
                    channels=allowed,
                    priority=priority,
                    type=type,
                    delivered_at=now,
                )
            )
        return True

from __future__ import annotations

import logging
from typing import Iterable

from .dispatcher import NotificationDispatcher
from .model import DispatchReport, PendingNotification

logger = logging.getLogger(__name__)


class NotificationService:
    """Delivers workflow notifications, best effort.

    A failing channel never propagates: the attendance record it belongs to is
    already persisted. Nothing is retried.
    """

    def __init__(self, dispatcher: NotificationDispatcher):
        self._dispatcher = dispatcher

    def dispatch_all(self, notifications: Iterable[PendingNotification]) -> DispatchReport:
        sent = suppressed = failed = 0
        errors: list[str] = []

        for n in notifications:
            try:
                delivered = self._dispatcher.send(
                    n.recipient_id,
                    n.message,
                    channels=n.channels,
                    priority=n.priority,
                    type=n.type,
                )
            except Exception as e:
                failed += 1
                errors.append(str(e))
                logger.warning("Notification to %s failed", n.recipient_id, exc_info=True)
                continue

            if delivered:
                sent += 1
            else:
                suppressed += 1

        return DispatchReport(
            sent=sent,
            suppressed=suppressed,
            failed=failed,
            errors=tuple(errors),
        )

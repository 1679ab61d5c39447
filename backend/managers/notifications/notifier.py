"""Notification surface: success and error toasts for one admin session."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

NotificationSink = Callable[[Dict[str, Any]], None]


@dataclass(frozen=True)
class Notification:
    level: str
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
        }


class Notifier:
    """
    Queues notifications until the next response drains them.

    An optional ``sink`` also receives every notification as it is raised.
    Sink failures are logged and never reach the caller.
    """

    def __init__(self, sink: Optional[NotificationSink] = None, max_queued: int = 50):
        self._sink = sink
        self._max_queued = max_queued
        self._queue: List[Notification] = []

    def notify_success(self, message: str) -> None:
        self._publish(Notification(level="success", message=message))

    def notify_error(self, message: str) -> None:
        self._publish(Notification(level="error", message=message))

    def _publish(self, notification: Notification) -> None:
        self._queue.append(notification)
        if len(self._queue) > self._max_queued:
            del self._queue[: len(self._queue) - self._max_queued]
        if not self._sink:
            return
        try:
            self._sink(notification.to_dict())
            logger.debug(f"Sent {notification.level} notification")
        except Exception as sink_error:
            logger.error(f"Error sending notification: {sink_error}")

    def pending(self) -> List[Notification]:
        return list(self._queue)

    def drain(self) -> List[Dict[str, Any]]:
        """Return and clear the queued notifications."""
        drained, self._queue = self._queue, []
        return [n.to_dict() for n in drained]

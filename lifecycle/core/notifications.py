"""User notifications raised by workflow operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class NotificationLevel(str, Enum):
    """Severity of a notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A message shown to the administrator."""

    message: str
    level: NotificationLevel = NotificationLevel.INFO


class Notifier(Protocol):
    """Destination for user notifications."""

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        """Deliver a notification."""
        ...


_LOG_LEVELS = {
    NotificationLevel.INFO: logging.INFO,
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.ERROR,
}


class LoggingNotifier:
    """Writes notifications to the ``lifecycle.notifications`` logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("lifecycle.notifications")

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        self.logger.log(_LOG_LEVELS[NotificationLevel(level)], message)


class CollectingNotifier:
    """Keeps notifications in memory, e.g. to return them with a response."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        self.notifications.append(Notification(message=message, level=NotificationLevel(level)))

    @property
    def messages(self) -> list[str]:
        return [n.message for n in self.notifications]

    def clear(self) -> None:
        self.notifications.clear()

"""Core building blocks of the workflow manager."""
from lifecycle.core.notifications import (
    CollectingNotifier,
    LoggingNotifier,
    Notification,
    NotificationLevel,
    Notifier,
)
from lifecycle.core.ranking import SortRanking

__all__ = [
    "CollectingNotifier",
    "LoggingNotifier",
    "Notification",
    "NotificationLevel",
    "Notifier",
    "SortRanking",
]

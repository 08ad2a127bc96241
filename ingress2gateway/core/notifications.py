"""
Diagnostics emitted during conversion.

Passes report anything a human must look at (unsupported constructs,
advisories, informational guidance) through a :class:`NotificationSink`.
The default :class:`NotificationCollector` keeps every notification for the
caller and mirrors it to ``logging``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..models.kubernetes import NamespacedName

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    BLOCKER = "BLOCKER"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @property
    def log_level(self) -> int:
        return _LOG_LEVELS[self]


_RANKS = {Severity.INFO: 0, Severity.WARNING: 1, Severity.BLOCKER: 2}
_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.BLOCKER: logging.ERROR,
}


@dataclass(frozen=True)
class Notification:
    severity: Severity
    message: str
    source: NamespacedName | None = None

    def __str__(self) -> str:
        if self.source is None:
            return f"[{self.severity.value}] {self.message}"
        return f"[{self.severity.value}] {self.source}: {self.message}"


class NotificationCollector:
    """Collects notifications in emission order and logs each one."""

    def __init__(self) -> None:
        self._logger = logger.getChild(self.__class__.__name__)
        self._notifications: list[Notification] = []

    def emit(
        self,
        severity: Severity,
        message: str,
        source: NamespacedName | None = None,
    ) -> None:
        notification = Notification(severity, message, source)
        self._notifications.append(notification)
        self._logger.log(severity.log_level, str(notification))

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications)

    def by_severity(self, severity: Severity) -> list[Notification]:
        return [n for n in self._notifications if n.severity == severity]

    def has_blockers(self) -> bool:
        return any(n.severity == Severity.BLOCKER for n in self._notifications)

    def highest_severity(self) -> Severity | None:
        if not self._notifications:
            return None
        return max((n.severity for n in self._notifications), key=lambda s: s.rank)

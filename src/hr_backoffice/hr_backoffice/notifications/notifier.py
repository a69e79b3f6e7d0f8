from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    to: Sequence[str]
    subject: str
    text: str


class Notifier(Protocol):
    def send(self, notification: Notification) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Default notifier: writes each message to the log instead of delivering it."""

    def send(self, notification: Notification) -> None:
        logger.info("Notification to=%s subject=%r\n%s", ", ".join(notification.to), notification.subject, notification.text)

from __future__ import annotations

import sys
from typing import TextIO

from domain.models import NotificationLevel

_PREFIX = {
    NotificationLevel.SUCCESS: "ok",
    NotificationLevel.ERROR: "error",
    NotificationLevel.INFO: "info",
}


class ConsoleNotifier:
    """Prints notifications to stderr so they never mix with command output."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        prefix = _PREFIX[NotificationLevel(level)]
        print(f"[{prefix}] {message}", file=self._stream or sys.stderr)

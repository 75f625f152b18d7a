from __future__ import annotations

from datetime import timedelta

from domain.models import Notification, NotificationLevel
from domain.ports import ClockPort, IdGeneratorPort

DEFAULT_TTL = timedelta(seconds=4)


class NotificationCenter:
    """In-memory toast queue; entries expire on their own or when dismissed."""

    def __init__(
        self,
        *,
        clock: ClockPort,
        id_generator: IdGeneratorPort,
        ttl: timedelta = DEFAULT_TTL,
    ) -> None:
        self._clock = clock
        self._ids = id_generator
        self._ttl = ttl
        self._items: list[Notification] = []

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        self._items.append(
            Notification(
                id=self._ids.new_message_id(),
                message=message,
                level=NotificationLevel(level),
                created_at=self._clock.now(),
            )
        )

    def active(self) -> list[Notification]:
        cutoff = self._clock.now() - self._ttl
        self._items = [n for n in self._items if n.created_at > cutoff]
        return list(self._items)

    def dismiss(self, notification_id: str) -> None:
        self._items = [n for n in self._items if n.id != notification_id]

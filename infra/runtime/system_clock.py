from __future__ import annotations

from datetime import datetime, timezone


class SystemClock:
    """UTC wall clock; "today" for the tracker is the UTC calendar day."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

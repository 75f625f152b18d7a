from __future__ import annotations

from datetime import date, datetime


def split_csv(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def parse_key_values(raw: str) -> dict[str, str]:
    """Parse ``"a=1, b=2"`` into ``{"a": "1", "b": "2"}``; items without ``=`` are ignored."""
    pairs: dict[str, str] = {}
    for item in split_csv(raw):
        key, sep, value = item.partition("=")
        if sep and key.strip():
            pairs[key.strip()] = value.strip()
    return pairs


def day_of(moment: datetime | date) -> str:
    """ISO ``YYYY-MM-DD`` for a timestamp, in the timestamp's own timezone."""
    if isinstance(moment, datetime):
        moment = moment.date()
    return moment.isoformat()


def parse_day(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def days_between(earlier: str | None, later: str | None) -> int | None:
    """Whole days from ``earlier`` to ``later``; ``None`` if either is unparseable."""
    start = parse_day(earlier)
    end = parse_day(later)
    if start is None or end is None:
        return None
    return (end - start).days

"""Pure, stateless queries over a job collection.

Nothing here mutates or caches; every view recomputes from the current
collection.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Sequence

from domain.codec import normalize_field_name
from domain.models import (
    SETTLED_STATUSES,
    JobApplication,
    JobStatus,
    SortConfig,
    SortDirection,
)
from domain.utils import days_between, parse_day

STALE_AFTER_DAYS = 14


def filter_jobs(
    jobs: Iterable[JobApplication],
    search: str = "",
    status: JobStatus | None = None,
) -> list[JobApplication]:
    needle = search.lower()
    return [
        job
        for job in jobs
        if (needle in job.company.lower() or needle in job.role.lower())
        and (status is None or job.status is status)
    ]


def sort_jobs(jobs: Sequence[JobApplication], config: SortConfig) -> list[JobApplication]:
    """Order by one field using plain string comparison.

    ``sorted`` is stable, so equal keys keep their collection order.
    """
    if config.direction is None:
        return list(jobs)
    attr = normalize_field_name(config.key)
    return sorted(
        jobs,
        key=lambda job: _sort_value(job, attr),
        reverse=config.direction is SortDirection.DESC,
    )


def next_sort_config(current: SortConfig, key: str) -> SortConfig:
    """Header-click cycle: unsorted -> asc -> desc -> unsorted."""
    key = normalize_field_name(key)
    same_key = normalize_field_name(current.key) == key
    if same_key and current.direction is SortDirection.ASC:
        return SortConfig(key=key, direction=SortDirection.DESC)
    if same_key and current.direction is SortDirection.DESC:
        return SortConfig(key=key, direction=None)
    return SortConfig(key=key, direction=SortDirection.ASC)


def is_stale(job: JobApplication, today: str) -> bool:
    if job.status in SETTLED_STATUSES:
        return False
    elapsed = days_between(job.last_updated, today)
    if elapsed is None:
        return False
    return abs(elapsed) > STALE_AFTER_DAYS


def find_job_by_company(
    jobs: Iterable[JobApplication],
    name: str,
) -> JobApplication | None:
    """First job whose company contains ``name``, case-insensitively.

    No ranking: with several matches the earliest in collection order wins.
    """
    needle = name.strip().lower()
    if not needle:
        return None
    for job in jobs:
        if needle in job.company.lower():
            return job
    return None


def is_overdue(day: str | None, today: str) -> bool:
    if not day:
        return False
    return day < today


def upcoming_actions(jobs: Iterable[JobApplication], today: str) -> list[JobApplication]:
    pending = [
        job
        for job in jobs
        if job.next_action
        and job.next_action_date
        and job.next_action_date >= today
        and job.status not in (JobStatus.ARCHIVED, JobStatus.REJECTED)
    ]
    return sorted(pending, key=lambda job: job.next_action_date or "")


def recent_history(jobs: Iterable[JobApplication]) -> list[JobApplication]:
    return sorted(jobs, key=lambda job: job.last_updated, reverse=True)


def count_recent_applications(
    jobs: Iterable[JobApplication],
    today: str,
    days: int = 7,
) -> int:
    count = 0
    for job in jobs:
        elapsed = days_between(job.date_applied, today)
        if elapsed is not None and elapsed < days:
            count += 1
    return count


def weekly_velocity(
    jobs: Iterable[JobApplication],
    today: str,
    weeks: int = 6,
) -> list[tuple[str, int]]:
    """Applications per seven-day window, oldest window first.

    Each window is labelled with the date it ends on (``"Jan 5"``).
    """
    end = parse_day(today)
    if end is None:
        raise ValueError(f"Invalid date: {today!r}")
    counts = [0] * weeks
    for job in jobs:
        elapsed = days_between(job.date_applied, today)
        if elapsed is None:
            continue
        week_index = abs(elapsed) // 7
        if week_index < weeks:
            counts[weeks - 1 - week_index] += 1
    labels = [_short_label(end - timedelta(days=7 * i)) for i in range(weeks - 1, -1, -1)]
    return list(zip(labels, counts))


def group_by_status(
    jobs: Iterable[JobApplication],
    statuses: Sequence[JobStatus],
) -> dict[JobStatus, list[JobApplication]]:
    columns: dict[JobStatus, list[JobApplication]] = {status: [] for status in statuses}
    for job in jobs:
        if job.status in columns:
            columns[job.status].append(job)
    return columns


def _sort_value(job: JobApplication, attr: str) -> str:
    value = getattr(job, attr)
    if value is None:
        return ""
    if isinstance(value, JobStatus):
        return value.value
    return str(value)


def _short_label(day: date) -> str:
    return f"{day:%b} {day.day}"

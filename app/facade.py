from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Sequence

from domain.models import (
    CustomFieldDefinition,
    JobApplication,
    JobStats,
    JobStatus,
    Notification,
    SortConfig,
)
from domain.services import CustomFieldRegistry, JobStore, NotificationCenter, SettingsService
from domain.services.job_queries import (
    count_recent_applications,
    filter_jobs,
    group_by_status,
    is_overdue,
    is_stale,
    next_sort_config,
    recent_history,
    sort_jobs,
    upcoming_actions,
    weekly_velocity,
)

KANBAN_COLUMNS: tuple[tuple[JobStatus, str], ...] = (
    (JobStatus.APPLIED, "Applied"),
    (JobStatus.INTERVIEW, "Interviewing"),
    (JobStatus.OFFER, "Offers"),
    (JobStatus.REJECTED, "Rejected"),
)


@dataclass(frozen=True)
class TableState:
    """Search box, status dropdown and sort header of the table view."""

    search: str = ""
    status: JobStatus | None = None
    sort: SortConfig = field(default_factory=SortConfig)


@dataclass(frozen=True)
class TableRow:
    job: JobApplication
    stale: bool
    action_overdue: bool


@dataclass(frozen=True)
class KanbanColumn:
    status: JobStatus
    label: str
    jobs: Sequence[JobApplication]


@dataclass(frozen=True)
class DashboardView:
    stats: JobStats
    applied: int
    recent_applications: int
    velocity: Sequence[tuple[str, int]]


@dataclass(frozen=True)
class TimelineView:
    upcoming: Sequence[JobApplication]
    history: Sequence[JobApplication]


class JobOpsFacade:
    """
    UI-facing facade over the store for the tracker views.

    Embedding UIs that show toasts pass the ``NotificationCenter`` they also
    gave the ``SyncAdapter`` as its notifier.
    """

    def __init__(
        self,
        *,
        store: JobStore,
        custom_fields: CustomFieldRegistry,
        settings: SettingsService,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self._store = store
        self._custom_fields = custom_fields
        self._settings = settings
        self._notifications = notifications

    def table(self, state: TableState = TableState()) -> list[TableRow]:
        today = self._store.today()
        jobs = sort_jobs(filter_jobs(self._store.jobs, state.search, state.status), state.sort)
        return [
            TableRow(
                job=job,
                stale=is_stale(job, today),
                action_overdue=is_overdue(job.next_action_date, today),
            )
            for job in jobs
        ]

    @staticmethod
    def click_sort(state: TableState, key: str) -> TableState:
        return replace(state, sort=next_sort_config(state.sort, key))

    def kanban(self) -> list[KanbanColumn]:
        columns = group_by_status(self._store.jobs, [status for status, _ in KANBAN_COLUMNS])
        return [
            KanbanColumn(status=status, label=label, jobs=columns[status])
            for status, label in KANBAN_COLUMNS
        ]

    def move_card(self, job_id: str, status: JobStatus) -> JobApplication | None:
        return self._store.update(job_id, {"status": status})

    def dashboard(self) -> DashboardView:
        stats = self._store.stats()
        today = self._store.today()
        return DashboardView(
            stats=stats,
            applied=stats.total - stats.interview - stats.offer - stats.rejected,
            recent_applications=count_recent_applications(self._store.jobs, today),
            velocity=weekly_velocity(self._store.jobs, today),
        )

    def timeline(self) -> TimelineView:
        jobs = self._store.jobs
        return TimelineView(
            upcoming=upcoming_actions(jobs, self._store.today()),
            history=recent_history(jobs),
        )

    def stale_jobs(self) -> list[JobApplication]:
        today = self._store.today()
        return [job for job in self._store.jobs if is_stale(job, today)]

    def get_custom_fields(self) -> list[CustomFieldDefinition]:
        return self._custom_fields.list_all()

    def get_backend_url(self) -> str | None:
        return self._settings.get_backend_url()

    def update_backend_url(self, url: str | None) -> None:
        self._settings.set_backend_url(url)

    def notifications(self) -> list[Notification]:
        if self._notifications is None:
            return []
        return self._notifications.active()

    def dismiss_notification(self, notification_id: str) -> None:
        if self._notifications is not None:
            self._notifications.dismiss(notification_id)

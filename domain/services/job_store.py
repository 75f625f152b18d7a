from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

from domain.codec import job_to_payload, normalize_field_name
from domain.errors import StoreNotReadyError
from domain.models import (
    ACTIVE_STATUSES,
    JobApplication,
    JobStats,
    JobStatus,
    StoreState,
    SyncAction,
)
from domain.ports import ClockPort, IdGeneratorPort, LoggerPort
from domain.services.sync import SyncAdapter
from domain.utils import day_of

# Assigned by the store, never taken from callers.
_MANAGED_FIELDS = ("id", "last_updated")


class JobStore:
    """
    Canonical, newest-first collection of job applications.

    Mutations apply to memory immediately and synchronously; persistence
    and remote mirroring are delegated to the ``SyncAdapter`` and can never
    fail a mutation after the fact.
    """

    def __init__(
        self,
        *,
        sync: SyncAdapter,
        clock: ClockPort,
        id_generator: IdGeneratorPort,
        logger: LoggerPort,
    ) -> None:
        self._sync = sync
        self._clock = clock
        self._ids = id_generator
        self._logger = logger
        self._jobs: list[JobApplication] = []
        self._state = StoreState.UNINITIALIZED

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def jobs(self) -> tuple[JobApplication, ...]:
        return tuple(self._jobs)

    def today(self) -> str:
        return day_of(self._clock.now())

    async def load(self) -> None:
        """Run the initial load once; later calls are no-ops.

        A load that raises leaves the store UNINITIALIZED so it can be retried.
        """
        if self._state is not StoreState.UNINITIALIZED:
            return
        self._state = StoreState.LOADING
        try:
            jobs = list(await self._sync.load_initial())
        except BaseException as exc:
            self._state = StoreState.UNINITIALIZED
            self._logger.error("store_load_failed", error=repr(exc))
            raise
        self._jobs = jobs
        self._state = StoreState.READY
        self._logger.info("store_ready", count=len(self._jobs), remote=self._sync.remote_enabled)

    def get(self, job_id: str) -> JobApplication | None:
        for job in self._jobs:
            if job.id == job_id:
                return job
        return None

    def create(self, fields: Mapping[str, Any]) -> JobApplication | None:
        """Add a record at the front; declines quietly without company and role."""
        self._require_ready("create")
        values = self._normalize(fields)
        company = str(values.get("company") or "").strip()
        role = str(values.get("role") or "").strip()
        if not company or not role:
            self._logger.info("job_create_declined", reason="company and role are required")
            return None

        today = self.today()
        values.update(company=company, role=role)
        values["status"] = JobStatus(values.get("status") or JobStatus.APPLIED)
        values["date_applied"] = values.get("date_applied") or today
        values["custom_fields"] = values.get("custom_fields") or {}

        job = JobApplication(id=self._new_id(), last_updated=today, **values)
        self._jobs.insert(0, job)
        self._logger.info("job_created", job_id=job.id, company=job.company)
        self._after_mutation(SyncAction.CREATE, job_to_payload(job))
        return job

    def update(self, job_id: str, partial: Mapping[str, Any]) -> JobApplication | None:
        """Shallow-merge ``partial`` into the record; unknown ids are ignored."""
        self._require_ready("update")
        index = self._index_of(job_id)
        if index is None:
            self._logger.info("job_update_not_found", job_id=job_id)
            return None

        changes = self._normalize(partial)
        if "status" in changes:
            changes["status"] = JobStatus(changes["status"])
        if "custom_fields" in changes and changes["custom_fields"] is None:
            changes["custom_fields"] = {}

        updated = replace(self._jobs[index], **changes, last_updated=self.today())
        self._jobs[index] = updated
        self._logger.info("job_updated", job_id=job_id, fields=sorted(changes))
        self._after_mutation(SyncAction.UPDATE, job_to_payload(updated))
        return updated

    def delete(self, job_id: str) -> bool:
        self._require_ready("delete")
        index = self._index_of(job_id)
        if index is None:
            return False
        del self._jobs[index]
        self._logger.info("job_deleted", job_id=job_id)
        self._after_mutation(SyncAction.DELETE, {"id": job_id})
        return True

    def stats(self) -> JobStats:
        statuses = [job.status for job in self._jobs]
        return JobStats(
            total=len(statuses),
            interview=statuses.count(JobStatus.INTERVIEW),
            offer=statuses.count(JobStatus.OFFER),
            rejected=statuses.count(JobStatus.REJECTED),
            active=sum(1 for status in statuses if status in ACTIVE_STATUSES),
        )

    # -- internal helpers ---------------------------------------------------

    def _after_mutation(self, action: SyncAction, data: Mapping[str, Any]) -> None:
        self._sync.persist(self._jobs)
        self._sync.relay(action, data)

    def _require_ready(self, operation: str) -> None:
        if self._state is not StoreState.READY:
            raise StoreNotReadyError(
                f"Cannot {operation} while the store is {self._state.value}",
            )

    def _index_of(self, job_id: str) -> int | None:
        for index, job in enumerate(self._jobs):
            if job.id == job_id:
                return index
        return None

    def _new_id(self) -> str:
        taken = {job.id for job in self._jobs}
        job_id = self._ids.new_job_id()
        while job_id in taken:
            job_id = self._ids.new_job_id()
        return job_id

    @staticmethod
    def _normalize(fields: Mapping[str, Any]) -> dict[str, Any]:
        values = {normalize_field_name(key): value for key, value in fields.items()}
        for key in _MANAGED_FIELDS:
            values.pop(key, None)
        return values

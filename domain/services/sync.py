from __future__ import annotations

import asyncio
from typing import Any, Iterable, Mapping, Sequence

from domain.codec import jobs_from_json, jobs_to_json
from domain.errors import RemoteMirrorError, StorageError
from domain.models import JobApplication, NotificationLevel, SyncAction
from domain.ports import KeyValueStoragePort, LoggerPort, NotifierPort, RemoteMirrorPort
from domain.seed import DEFAULT_SEED
from domain.storage_keys import JOBS_KEY


class SyncAdapter:
    """
    Two-tier persistence for the job store.

    Tier 1 rewrites the whole collection to local storage after every
    change and is the data source of last resort. Tier 2 relays each
    mutation to the optional remote mirror as a detached task: it is not
    retried, never rolls anything back, and in-flight relays may land in
    any order. Failures only surface through the notifier and the log.
    """

    def __init__(
        self,
        *,
        storage: KeyValueStoragePort,
        notifier: NotifierPort,
        logger: LoggerPort,
        remote: RemoteMirrorPort | None = None,
        seed: Sequence[JobApplication] = DEFAULT_SEED,
    ) -> None:
        self._storage = storage
        self._notifier = notifier
        self._logger = logger
        self._remote = remote
        self._seed = tuple(seed)
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def remote_enabled(self) -> bool:
        return self._remote is not None

    @property
    def pending_relays(self) -> int:
        return len(self._pending)

    async def load_initial(self) -> list[JobApplication]:
        if self._remote is None:
            return self._read_local_or_seed()

        try:
            jobs = list(await self._remote.fetch_all())
        except RemoteMirrorError as exc:
            self._logger.warning("remote_load_failed", error=str(exc))
            return self._fall_back_to_local()
        except Exception as exc:
            # Adapters are expected to raise RemoteMirrorError only.
            self._logger.error("remote_load_crashed", error=repr(exc))
            return self._fall_back_to_local()

        self._logger.info("remote_load_succeeded", count=len(jobs))
        self.persist(jobs)
        return jobs

    def persist(self, jobs: Iterable[JobApplication]) -> None:
        try:
            self._storage.set_item(JOBS_KEY, jobs_to_json(jobs))
        except StorageError as exc:
            self._logger.error("local_persist_failed", error=str(exc))
            self._notifier.notify(
                "Could not save applications locally.",
                NotificationLevel.ERROR,
            )

    def relay(self, action: SyncAction, data: Mapping[str, Any]) -> None:
        """Fire-and-forget push of one mutation to the remote mirror."""
        if self._remote is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._report_relay_failure(action, data, "no running event loop")
            return
        task = loop.create_task(self._push(self._remote, action, dict(data)))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait until every relay issued so far has settled."""
        while self._pending:
            results = await asyncio.gather(*list(self._pending), return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    self._logger.error("remote_relay_crashed", error=repr(result))

    # -- internal helpers ---------------------------------------------------

    async def _push(
        self,
        remote: RemoteMirrorPort,
        action: SyncAction,
        data: dict[str, Any],
    ) -> None:
        try:
            await remote.push(action, data)
        except RemoteMirrorError as exc:
            self._report_relay_failure(action, data, str(exc))
            return
        self._logger.info("remote_relay_succeeded", action=action.value, job_id=data.get("id"))

    def _report_relay_failure(
        self,
        action: SyncAction,
        data: Mapping[str, Any],
        reason: str,
    ) -> None:
        self._logger.error(
            "remote_relay_failed",
            action=action.value,
            job_id=data.get("id"),
            error=reason,
        )
        self._notifier.notify(
            f"Sync failed ({action.value}): {reason}. Your change is kept locally.",
            NotificationLevel.ERROR,
        )

    def _fall_back_to_local(self) -> list[JobApplication]:
        self._notifier.notify(
            "Remote backend unavailable, showing locally saved applications.",
            NotificationLevel.INFO,
        )
        return self._read_local_or_seed()

    def _read_local_or_seed(self) -> list[JobApplication]:
        try:
            raw = self._storage.get_item(JOBS_KEY)
        except StorageError as exc:
            self._logger.error("local_load_failed", error=str(exc))
            raw = None
        if raw is None:
            self._logger.info("local_snapshot_missing", seed_count=len(self._seed))
            return list(self._seed)
        try:
            jobs = jobs_from_json(raw)
        except (ValueError, KeyError, TypeError) as exc:
            self._logger.warning("local_snapshot_corrupt", error=str(exc))
            return list(self._seed)
        self._logger.info("local_snapshot_loaded", count=len(jobs))
        return jobs

"""Shared fixtures and steps for the tracker BDD scenarios."""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

import pytest
from pytest_bdd import given, parsers, then, when

from domain import RemoteMirrorPort
from domain.services import JobStore, SyncAdapter
from domain.services.job_queries import find_job_by_company
from infra.persistence import SQLiteKeyValueStorage
from tests.mocks import FixedClock, InMemoryLogger, RecordingNotifier, SequentialIdGenerator


class TrackerWorld:
    """One tracker process backed by a real SQLite file, restartable in place."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.clock = FixedClock(datetime(2024, 1, 20, 9, 30, tzinfo=timezone.utc))
        self.notifier = RecordingNotifier()
        self.loop = asyncio.new_event_loop()
        self.storage: SQLiteKeyValueStorage | None = None
        self.remote: RemoteMirrorPort | None = None
        self.store: JobStore | None = None
        self.sync: SyncAdapter | None = None
        self.backend: Any = None
        self.remote_url: str | None = None
        self.last_deleted: str | None = None

    def open_storage(self) -> SQLiteKeyValueStorage:
        if self.storage is None:
            self.storage = SQLiteKeyValueStorage(db_path=str(self.db_path))
        return self.storage

    def start(self, remote: RemoteMirrorPort | None = None) -> None:
        self.remote = remote
        logger = InMemoryLogger()
        self.sync = SyncAdapter(
            storage=self.open_storage(),
            notifier=self.notifier,
            logger=logger,
            remote=remote,
            seed=(),
        )
        self.store = JobStore(
            sync=self.sync,
            clock=self.clock,
            id_generator=SequentialIdGenerator(),
            logger=logger,
        )
        self.loop.run_until_complete(self.store.load())

    def restart(self) -> None:
        self.settle()
        self.storage.close()
        self.storage = None
        self.start(self.remote)

    def run(self, action: Callable[[], Any]) -> Any:
        """Run a store call inside the event loop so relays can be scheduled."""

        async def _call() -> Any:
            return action()

        return self.loop.run_until_complete(_call())

    def settle(self) -> None:
        if self.sync is not None:
            self.loop.run_until_complete(self.sync.drain())

    def job(self, company: str):
        job = find_job_by_company(self.store.jobs, company)
        assert job is not None, f"No application for {company!r}"
        return job

    def close(self) -> None:
        self.settle()
        self.loop.close()
        if self.storage is not None:
            self.storage.close()


@pytest.fixture()
def world(tmp_path: Path):
    w = TrackerWorld(tmp_path / "jobops.db")
    yield w
    w.close()


# -- shared steps -----------------------------------------------------------


@given("a tracker without a backend URL")
def given_local_tracker(world: TrackerWorld) -> None:
    world.start()


@when(parsers.parse('I add an application for "{company}" as "{role}"'))
def when_add(world: TrackerWorld, company: str, role: str) -> None:
    job = world.run(lambda: world.store.create({"company": company, "role": role}))
    assert job is not None


@when(parsers.parse('I change the status of "{company}" to "{status}"'))
def when_change_status(world: TrackerWorld, company: str, status: str) -> None:
    job_id = world.job(company).id
    world.run(lambda: world.store.update(job_id, {"status": status}))


@when(parsers.parse('I delete the application for "{company}"'))
def when_delete(world: TrackerWorld, company: str) -> None:
    job_id = world.job(company).id
    assert world.run(lambda: world.store.delete(job_id)) is True
    world.last_deleted = job_id


@then(parsers.parse('the tracker shows exactly "{company}" with status "{status}"'))
def then_shows_exactly(world: TrackerWorld, company: str, status: str) -> None:
    assert [(j.company, j.status.value) for j in world.store.jobs] == [(company, status)]


@then(parsers.parse("the tracker holds {count:d} applications"))
def then_holds(world: TrackerWorld, count: int) -> None:
    assert len(world.store.jobs) == count

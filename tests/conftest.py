"""Shared fixtures: a store wired to in-memory fakes."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

import pytest

from domain.models import JobApplication
from domain.services import JobStore, SyncAdapter
from tests.mocks import (
    FakeRemoteMirror,
    FixedClock,
    InMemoryKeyValueStorage,
    InMemoryLogger,
    RecordingNotifier,
    SequentialIdGenerator,
)



@dataclass
class StoreContext:
    store: JobStore
    sync: SyncAdapter
    storage: InMemoryKeyValueStorage
    notifier: RecordingNotifier
    logger: InMemoryLogger
    clock: FixedClock
    ids: SequentialIdGenerator
    remote: FakeRemoteMirror | None


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 1, 20, 9, 30, tzinfo=timezone.utc))


@pytest.fixture()
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture()
def make_context(
    clock: FixedClock,
    storage: InMemoryKeyValueStorage,
) -> Callable[..., StoreContext]:
    def _make(
        *,
        remote: FakeRemoteMirror | None = None,
        seed: tuple[JobApplication, ...] = (),
        load: bool = True,
    ) -> StoreContext:
        notifier = RecordingNotifier()
        logger = InMemoryLogger()
        ids = SequentialIdGenerator()
        sync = SyncAdapter(
            storage=storage,
            notifier=notifier,
            logger=logger,
            remote=remote,
            seed=seed,
        )
        store = JobStore(sync=sync, clock=clock, id_generator=ids, logger=logger)
        if load:
            asyncio.run(store.load())
        return StoreContext(
            store=store,
            sync=sync,
            storage=storage,
            notifier=notifier,
            logger=logger,
            clock=clock,
            ids=ids,
            remote=remote,
        )

    return _make


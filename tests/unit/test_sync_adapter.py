from __future__ import annotations

import asyncio

from domain import (
    JobStatus,
    MalformedResponseError,
    NotificationLevel,
    RemoteMirrorError,
    SyncAction,
)
from domain.codec import jobs_from_json, jobs_to_json
from domain.seed import DEFAULT_SEED
from domain.services import SyncAdapter
from domain.storage_keys import JOBS_KEY
from tests.mocks import (
    FakeRemoteMirror,
    InMemoryKeyValueStorage,
    InMemoryLogger,
    RecordingNotifier,
    make_job,
)


def _adapter(storage, remote=None, seed=DEFAULT_SEED):
    notifier = RecordingNotifier()
    logger = InMemoryLogger()
    sync = SyncAdapter(storage=storage, notifier=notifier, logger=logger, remote=remote, seed=seed)
    return sync, notifier, logger


# -- initial load -----------------------------------------------------------

def test_first_run_without_remote_uses_seed_data() -> None:
    sync, _, _ = _adapter(InMemoryKeyValueStorage())
    jobs = asyncio.run(sync.load_initial())
    assert [j.id for j in jobs] == ["demo-1", "demo-2", "demo-3"]


def test_local_snapshot_wins_over_seed() -> None:
    storage = InMemoryKeyValueStorage({JOBS_KEY: jobs_to_json([make_job()])})
    sync, _, _ = _adapter(storage)
    jobs = asyncio.run(sync.load_initial())
    assert [j.id for j in jobs] == ["job-a"]


def test_empty_local_snapshot_is_respected() -> None:
    storage = InMemoryKeyValueStorage({JOBS_KEY: "[]"})
    sync, _, _ = _adapter(storage)
    assert asyncio.run(sync.load_initial()) == []


def test_corrupt_local_snapshot_falls_back_to_seed() -> None:
    storage = InMemoryKeyValueStorage({JOBS_KEY: "{not json"})
    sync, _, logger = _adapter(storage)
    jobs = asyncio.run(sync.load_initial())
    assert len(jobs) == len(DEFAULT_SEED)
    assert "local_snapshot_corrupt" in logger.messages("warning")


def test_remote_load_replaces_and_persists_local_snapshot() -> None:
    storage = InMemoryKeyValueStorage({JOBS_KEY: jobs_to_json([make_job()])})
    remote = FakeRemoteMirror([make_job(id="remote-1", company="Globex")])
    sync, notifier, _ = _adapter(storage, remote)

    jobs = asyncio.run(sync.load_initial())

    assert [j.id for j in jobs] == ["remote-1"]
    assert [j.id for j in jobs_from_json(storage.items[JOBS_KEY])] == ["remote-1"]
    assert notifier.notifications == []


def test_unreachable_remote_falls_back_to_local_snapshot() -> None:
    storage = InMemoryKeyValueStorage({JOBS_KEY: jobs_to_json([make_job()])})
    remote = FakeRemoteMirror()
    remote.fetch_error = RemoteMirrorError("connection refused")
    sync, notifier, logger = _adapter(storage, remote)

    jobs = asyncio.run(sync.load_initial())

    assert [j.id for j in jobs] == ["job-a"]
    assert notifier.levels() == [NotificationLevel.INFO]
    assert "remote_load_failed" in logger.messages("warning")


def test_malformed_remote_response_falls_back_to_seed() -> None:
    remote = FakeRemoteMirror()
    remote.fetch_error = MalformedResponseError("expected a list")
    sync, notifier, _ = _adapter(InMemoryKeyValueStorage(), remote, seed=(make_job(id="seeded"),))

    jobs = asyncio.run(sync.load_initial())

    assert [j.id for j in jobs] == ["seeded"]
    assert len(notifier.notifications) == 1


def test_remote_load_crash_falls_back_to_local_snapshot() -> None:
    storage = InMemoryKeyValueStorage({JOBS_KEY: jobs_to_json([make_job(company="Acme")])})
    remote = FakeRemoteMirror()
    remote.fetch_error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
    sync, notifier, logger = _adapter(storage, remote)

    jobs = asyncio.run(sync.load_initial())

    assert [j.company for j in jobs] == ["Acme"]
    assert notifier.levels() == [NotificationLevel.INFO]
    assert "remote_load_crashed" in logger.messages("error")


# -- local persistence ------------------------------------------------------

def test_persist_failure_is_reported_not_raised() -> None:
    storage = InMemoryKeyValueStorage()
    storage.fail_writes = True
    sync, notifier, logger = _adapter(storage)

    sync.persist([make_job()])

    assert notifier.levels() == [NotificationLevel.ERROR]
    assert "local_persist_failed" in logger.messages("error")


def test_store_mutation_survives_local_write_failure(make_context) -> None:
    ctx = make_context()
    ctx.storage.fail_writes = True

    job = ctx.store.create({"company": "Acme", "role": "Engineer"})

    assert ctx.store.jobs == (job,)
    assert ctx.notifier.levels() == [NotificationLevel.ERROR]


# -- remote relay -----------------------------------------------------------

def test_relay_is_fire_and_forget(make_context) -> None:
    remote = FakeRemoteMirror()
    ctx = make_context(remote=remote, load=False)

    async def scenario() -> None:
        await ctx.store.load()
        job = ctx.store.create({"company": "Acme", "role": "Engineer"})
        # Mutation already visible; the push has not run yet.
        assert ctx.store.get(job.id) == job
        assert remote.pushes == []
        assert ctx.sync.pending_relays == 1
        await ctx.sync.drain()

    asyncio.run(scenario())

    assert ctx.sync.pending_relays == 0
    action, data = remote.pushes[0]
    assert action is SyncAction.CREATE
    assert data["company"] == "Acme"
    assert data["status"] == "Applied"
    assert data["lastUpdated"] == "2024-01-20"


def test_relay_payloads_per_action(make_context) -> None:
    remote = FakeRemoteMirror()
    ctx = make_context(remote=remote, load=False)

    async def scenario() -> None:
        await ctx.store.load()
        job = ctx.store.create({"company": "Acme", "role": "Engineer", "notes": "first"})
        ctx.store.update(job.id, {"status": JobStatus.INTERVIEW})
        ctx.store.delete(job.id)
        await ctx.sync.drain()

    asyncio.run(scenario())

    assert [action for action, _ in remote.pushes] == [
        SyncAction.CREATE,
        SyncAction.UPDATE,
        SyncAction.DELETE,
    ]
    updated = remote.pushes[1][1]
    # Full post-merge record, not just the changed field.
    assert updated["status"] == "Interview"
    assert updated["notes"] == "first"
    assert updated["company"] == "Acme"
    assert remote.pushes[2][1] == {"id": "job-1"}


def test_declined_and_missing_mutations_are_not_relayed(make_context) -> None:
    remote = FakeRemoteMirror()
    ctx = make_context(remote=remote, load=False)

    async def scenario() -> None:
        await ctx.store.load()
        ctx.store.create({"company": "", "role": "Engineer"})
        ctx.store.update("missing", {"notes": "x"})
        ctx.store.delete("missing")
        await ctx.sync.drain()

    asyncio.run(scenario())
    assert remote.pushes == []


def test_relay_failure_keeps_local_change_and_notifies(make_context) -> None:
    remote = FakeRemoteMirror()
    remote.push_error = RemoteMirrorError("HTTP 500")
    ctx = make_context(remote=remote, load=False)

    async def scenario():
        await ctx.store.load()
        job = ctx.store.create({"company": "Acme", "role": "Engineer"})
        await ctx.sync.drain()
        return job

    job = asyncio.run(scenario())

    assert ctx.store.jobs == (job,)
    assert [j.id for j in jobs_from_json(ctx.storage.items[JOBS_KEY])] == [job.id]
    assert ctx.notifier.levels() == [NotificationLevel.ERROR]
    assert "HTTP 500" in ctx.notifier.notifications[0][1]
    assert "remote_relay_failed" in ctx.logger.messages("error")


def test_relay_outside_event_loop_is_reported(make_context) -> None:
    remote = FakeRemoteMirror()
    ctx = make_context(remote=remote)

    job = ctx.store.create({"company": "Acme", "role": "Engineer"})

    assert ctx.store.jobs == (job,)
    assert remote.pushes == []
    assert ctx.notifier.levels() == [NotificationLevel.ERROR]


def test_later_edit_can_land_before_earlier_one(make_context) -> None:
    remote = FakeRemoteMirror()
    ctx = make_context(remote=remote, load=False)
    release = asyncio.Event()
    original_push = remote.push

    async def slow_for_held_back(action, data):
        if data.get("notes") == "held back":
            await release.wait()
        await original_push(action, data)

    remote.push = slow_for_held_back  # type: ignore[method-assign]

    async def scenario() -> None:
        await ctx.store.load()
        job = ctx.store.create({"company": "Acme", "role": "Engineer"})
        ctx.store.update(job.id, {"notes": "held back"})
        ctx.store.update(job.id, {"notes": "fast"})
        await asyncio.sleep(0)
        assert [d.get("notes") for _, d in remote.pushes] == [None, "fast"]
        release.set()
        await ctx.sync.drain()

    asyncio.run(scenario())

    assert [d.get("notes") for _, d in remote.pushes] == [None, "fast", "held back"]
    # Local state follows call order whatever the arrival order.
    assert ctx.store.jobs[0].notes == "fast"

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass
from typing import Any, Sequence

from app import JobOpsFacade, TableState
from domain.errors import SettingsValidationError
from domain.models import CustomFieldType, JobApplication, JobStatus, SortConfig, SortDirection
from domain.services import (
    AssistantService,
    CustomFieldRegistry,
    DailyBriefingService,
    JobStore,
    SettingsService,
    SyncAdapter,
)
from domain.utils import parse_key_values
from infra.config import FileSystemConfigProvider
from infra.interaction import ConsoleNotifier
from infra.llm import OpenAIToolCallingClient
from infra.persistence import SQLiteKeyValueStorage
from infra.remote import HttpRemoteMirror
from infra.runtime import StructuredLogger, SystemClock, UuidIdGenerator

# CLI flag -> job field, shared by ``add`` and ``update``.
_OPTIONAL_FIELD_FLAGS = (
    ("date_applied", "--date-applied"),
    ("link", "--link"),
    ("notes", "--notes"),
    ("next_action", "--next-action"),
    ("next_action_date", "--next-action-date"),
    ("salary", "--salary"),
    ("location", "--location"),
    ("contacts", "--contacts"),
)
_STATUS_CHOICES = [status.value for status in JobStatus]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobops")
    parser.add_argument("--db-path", default="jobops.db", help="Local storage database file")
    parser.add_argument("--config-dir", default="./config", help="Folder holding config.json")
    parser.add_argument("--log-level", choices=["info", "warning", "error"], default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    list_p = sub.add_parser("list", help="List applications")
    list_p.add_argument("--search", default="")
    list_p.add_argument("--status", choices=_STATUS_CHOICES)
    list_p.add_argument("--sort", help="Field to sort by, e.g. company or lastUpdated")
    list_p.add_argument("--desc", action="store_true")

    add_p = sub.add_parser("add", help="Track a new application")
    add_p.add_argument("company")
    add_p.add_argument("role")
    add_p.add_argument("--status", choices=_STATUS_CHOICES)
    _add_field_flags(add_p)

    update_p = sub.add_parser("update", help="Change fields of an application")
    update_p.add_argument("job_id")
    update_p.add_argument("--company")
    update_p.add_argument("--role")
    update_p.add_argument("--status", choices=_STATUS_CHOICES)
    _add_field_flags(update_p)

    delete_p = sub.add_parser("delete", help="Remove an application")
    delete_p.add_argument("job_id")

    sub.add_parser("stats")
    sub.add_parser("stale")
    sub.add_parser("timeline")
    sub.add_parser("kanban")

    config_p = sub.add_parser("config")
    config_p.add_argument("action", choices=["get", "set"])
    config_p.add_argument("key", choices=["backend-url"])
    config_p.add_argument("value", nargs="?")

    fields_p = sub.add_parser("fields", help="Manage custom field definitions")
    fields_p.add_argument("action", choices=["list", "add", "remove"])
    fields_p.add_argument("name", nargs="?", help="Label (add) or id (remove)")
    fields_p.add_argument("--type", choices=[t.value for t in CustomFieldType], default="text")

    chat_p = sub.add_parser("chat", help="Talk to the assistant")
    chat_p.add_argument("message", nargs="+")
    sub.add_parser("clear-chat")
    sub.add_parser("briefing")
    return parser


def _add_field_flags(parser: argparse.ArgumentParser) -> None:
    for _, flag in _OPTIONAL_FIELD_FLAGS:
        parser.add_argument(flag)
    parser.add_argument(
        "--fields",
        help="Custom field values as 'id=value, id2=value2'",
    )


@dataclass
class Session:
    storage: SQLiteKeyValueStorage
    store: JobStore
    sync: SyncAdapter
    facade: JobOpsFacade
    settings: SettingsService
    custom_fields: CustomFieldRegistry
    config_provider: FileSystemConfigProvider
    logger: StructuredLogger
    clock: SystemClock
    ids: UuidIdGenerator


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(_run(args))


async def _run(args: argparse.Namespace) -> int:
    session = _open_session(args)
    try:
        return await _dispatch(args, session)
    finally:
        await session.sync.drain()
        session.storage.close()


def _open_session(args: argparse.Namespace) -> Session:
    config_provider = FileSystemConfigProvider(args.config_dir)
    log_level = args.log_level
    if log_level is None:
        log_level = "warning"
        if config_provider.exists() and not config_provider.validate():
            log_level = config_provider.get_config().log_level
    logger = StructuredLogger(level=log_level)

    storage = SQLiteKeyValueStorage(db_path=args.db_path)
    settings = SettingsService(storage)
    clock = SystemClock()
    ids = UuidIdGenerator()

    remote = None
    backend_url = settings.get_backend_url()
    if backend_url:
        timeout = 30.0
        if config_provider.exists() and not config_provider.validate():
            timeout = config_provider.get_config().remote_timeout
        remote = HttpRemoteMirror(backend_url, timeout=timeout)

    sync = SyncAdapter(storage=storage, notifier=ConsoleNotifier(), logger=logger, remote=remote)
    store = JobStore(sync=sync, clock=clock, id_generator=ids, logger=logger)
    custom_fields = CustomFieldRegistry(storage, logger)
    facade = JobOpsFacade(store=store, custom_fields=custom_fields, settings=settings)
    return Session(
        storage=storage,
        store=store,
        sync=sync,
        facade=facade,
        settings=settings,
        custom_fields=custom_fields,
        config_provider=config_provider,
        logger=logger,
        clock=clock,
        ids=ids,
    )


async def _dispatch(args: argparse.Namespace, session: Session) -> int:
    if args.command == "config":
        return _handle_config(args, session)
    if args.command == "fields":
        return _handle_fields(args, session)

    await session.store.load()
    facade = session.facade

    if args.command == "list":
        sort = SortConfig()
        if args.sort:
            direction = SortDirection.DESC if args.desc else SortDirection.ASC
            sort = SortConfig(key=args.sort, direction=direction)
        state = TableState(
            search=args.search,
            status=JobStatus(args.status) if args.status else None,
            sort=sort,
        )
        try:
            rows = facade.table(state)
        except ValueError as exc:
            print(str(exc))
            return 1
        for row in rows:
            flags = " [stale]" if row.stale else ""
            flags += " [overdue]" if row.action_overdue else ""
            print(_format_job(row.job) + flags)
        return 0

    if args.command == "add":
        fields = _collect_fields(args)
        fields.update(company=args.company, role=args.role)
        job = session.store.create(fields)
        if job is None:
            print("company and role are required")
            return 1
        print(f"created {job.id}")
        return 0

    if args.command == "update":
        fields = _collect_fields(args)
        for name in ("company", "role"):
            if getattr(args, name) is not None:
                fields[name] = getattr(args, name)
        if not fields:
            print("nothing to update")
            return 1
        current = session.store.get(args.job_id)
        if current is not None and "custom_fields" in fields:
            fields["custom_fields"] = {**current.custom_fields, **fields["custom_fields"]}
        job = session.store.update(args.job_id, fields)
        if job is None:
            print(f"no application with id {args.job_id}")
            return 1
        print(f"updated {job.id}")
        return 0

    if args.command == "delete":
        removed = session.store.delete(args.job_id)
        print(f"deleted {args.job_id}" if removed else f"no application with id {args.job_id}")
        return 0

    if args.command == "stats":
        view = facade.dashboard()
        stats = view.stats
        print(f"total={stats.total} active={stats.active} applied={view.applied} "
              f"interview={stats.interview} offer={stats.offer} rejected={stats.rejected}")
        print(f"applications in the last 7 days: {view.recent_applications}")
        for label, count in view.velocity:
            print(f"{label:>7} {'#' * count}")
        return 0

    if args.command == "stale":
        for job in facade.stale_jobs():
            print(_format_job(job))
        return 0

    if args.command == "timeline":
        view = facade.timeline()
        print("Upcoming:")
        for job in view.upcoming:
            print(f"  {job.next_action_date} | {job.company} | {job.next_action}")
        print("History:")
        for job in view.history:
            print(f"  {job.last_updated} | {job.company} | {job.status.value}")
        return 0

    if args.command == "kanban":
        for column in facade.kanban():
            print(f"{column.label} ({len(column.jobs)})")
            for job in column.jobs:
                print(f"  {job.company} - {job.role}")
        return 0

    if args.command in ("chat", "clear-chat", "briefing"):
        return await _handle_assistant(args, session)

    raise SystemExit(f"Unsupported command: {args.command}")


def _handle_config(args: argparse.Namespace, session: Session) -> int:
    if args.action == "get":
        print(session.settings.get_backend_url() or "")
        return 0
    try:
        session.settings.set_backend_url(args.value)
    except SettingsValidationError as exc:
        print(str(exc))
        return 1
    print("updated backend-url" if args.value else "cleared backend-url")
    return 0


def _handle_fields(args: argparse.Namespace, session: Session) -> int:
    registry = session.custom_fields
    if args.action == "list":
        for definition in registry.list_all():
            print(f"{definition.id} | {definition.label} | {definition.type.value}")
        return 0
    if not args.name:
        raise SystemExit(f"fields {args.action} requires a name")
    if args.action == "add":
        try:
            definition = registry.add(args.name, args.type)
        except ValueError as exc:
            print(str(exc))
            return 1
        print(f"added {definition.id}")
        return 0
    removed = registry.remove(args.name)
    print(f"removed {args.name}" if removed else f"no field with id {args.name}")
    return 0


async def _handle_assistant(args: argparse.Namespace, session: Session) -> int:
    llm = None
    provider = session.config_provider
    if provider.exists():
        errors = provider.validate()
        if errors:
            print("Config validation failed:")
            for err in errors:
                print(f"  - {err}")
            return 1
        if args.command != "clear-chat":
            connectivity = await provider.validate_connectivity()
            if not connectivity.ok:
                print("Connectivity check failed:")
                for err in connectivity.errors:
                    print(f"  - {err}")
                return 1
        cfg = provider.get_config()
        llm = OpenAIToolCallingClient(
            api_key=cfg.openai_key,
            base_url=cfg.openai_base_url,
            model=cfg.openai_model,
        )

    if args.command == "briefing":
        briefing = DailyBriefingService(
            store=session.store,
            llm=llm,
            storage=session.storage,
            logger=session.logger,
        )
        text = await briefing.get_briefing()
        print(text or "No briefing available.")
        return 0

    assistant = AssistantService(
        store=session.store,
        llm=llm,
        storage=session.storage,
        clock=session.clock,
        id_generator=session.ids,
        logger=session.logger,
    )
    if args.command == "clear-chat":
        assistant.clear()
        print("chat history cleared")
        return 0

    for reply in await assistant.send(" ".join(args.message)):
        print(reply.content)
    return 0


def _collect_fields(args: argparse.Namespace) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if args.status:
        fields["status"] = JobStatus(args.status)
    for name, _ in _OPTIONAL_FIELD_FLAGS:
        value = getattr(args, name)
        if value is not None:
            fields[name] = value
    if args.fields:
        fields["custom_fields"] = parse_key_values(args.fields)
    return fields


def _format_job(job: JobApplication) -> str:
    return (
        f"{job.id} | {job.company} | {job.role} | {job.status.value} | "
        f"applied {job.date_applied or '-'} | updated {job.last_updated or '-'}"
    )


if __name__ == "__main__":
    raise SystemExit(main())

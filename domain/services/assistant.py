from __future__ import annotations

import json
from typing import Any

from domain.codec import messages_from_json, messages_to_json
from domain.models import ChatMessage, ChatRole, JobStatus, ToolCall, ToolDefinition
from domain.ports import ClockPort, IdGeneratorPort, KeyValueStoragePort, LLMClientPort, LoggerPort
from domain.prompts import (
    build_chat_system_prompt,
    build_daily_briefing_prompt,
    format_jobs_for_context,
)
from domain.services.job_queries import find_job_by_company
from domain.services.job_store import JobStore
from domain.storage_keys import CHAT_HISTORY_KEY, DAILY_BRIEFING_KEY

GREETING = "I'm the JobOps assistant. How can I help with your search today?"
CLEARED = "Memory cleared. Ready for new instructions."
DEFAULT_NOTE = "Added via assistant"
NOT_CONFIGURED = "The assistant is not configured. Add OPENAI_KEY to config.json."

# Transport and payload failures of an LLM client.
LLM_ERRORS = (OSError, ValueError, KeyError, IndexError)

_STATUS_VALUES = ", ".join(status.value for status in JobStatus)

ASSISTANT_TOOLS: list[ToolDefinition] = [
    ToolDefinition(
        name="addJob",
        description="Add a new job application to the tracker.",
        parameters={
            "company": {"type": "string", "description": "Company name"},
            "role": {"type": "string", "description": "Job role or title"},
            "status": {
                "type": "string",
                "description": f"Current status ({_STATUS_VALUES})",
                "default": JobStatus.APPLIED.value,
            },
            "link": {"type": "string", "description": "Link to the job posting", "default": ""},
            "notes": {"type": "string", "description": "Initial notes", "default": ""},
        },
    ),
    ToolDefinition(
        name="updateStatus",
        description="Change the status of an existing job application.",
        parameters={
            "companyName": {
                "type": "string",
                "description": "Company to update (partial names are fine)",
            },
            "newStatus": {"type": "string", "description": f"New status ({_STATUS_VALUES})"},
            "notes": {
                "type": "string",
                "description": "Optional note to append about the update",
                "default": "",
            },
        },
    ),
]


class AssistantService:
    """
    Natural-language front end for the job store.

    The model only ever sees a snapshot of the pipeline and can ask for two
    actions; both go through the ordinary ``JobStore`` operations, so they
    are persisted and mirrored like any other edit.
    """

    def __init__(
        self,
        *,
        store: JobStore,
        llm: LLMClientPort | None,
        storage: KeyValueStoragePort,
        clock: ClockPort,
        id_generator: IdGeneratorPort,
        logger: LoggerPort,
    ) -> None:
        self._store = store
        self._llm = llm
        self._storage = storage
        self._clock = clock
        self._ids = id_generator
        self._logger = logger
        self._messages = self._load_history()

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    async def send(self, text: str) -> list[ChatMessage]:
        """Handle one user turn and return the replies it produced."""
        if not text.strip():
            return []

        history = [
            {"role": "assistant" if m.role is ChatRole.MODEL else "user", "content": m.content}
            for m in self._messages
            if m.role is not ChatRole.SYSTEM
        ]
        self._append(ChatRole.USER, text)
        system_prompt = build_chat_system_prompt(
            jobs_context=format_jobs_for_context(self._store.jobs),
            today=self._store.today(),
        )
        llm_messages: list[dict[str, Any]] = [
            {"role": "system", "content": system_prompt},
            *history,
            {"role": "user", "content": text},
        ]

        if self._llm is None:
            return [self._append(ChatRole.MODEL, NOT_CONFIGURED)]

        try:
            response = await self._llm.complete_with_tools(
                llm_messages,
                ASSISTANT_TOOLS,
                temperature=0.7,
            )
        except LLM_ERRORS as exc:
            self._logger.error("assistant_request_failed", error=str(exc))
            return [self._append(ChatRole.MODEL, "Sorry, I couldn't reach the assistant service.")]

        if response.tool_calls:
            return [self._append(ChatRole.MODEL, self._execute(call)) for call in response.tool_calls]
        return [self._append(ChatRole.MODEL, response.text or "I didn't understand that.")]

    def clear(self) -> None:
        self._messages = [self._message(ChatRole.MODEL, CLEARED)]
        self._save_history()

    # -- tool execution -----------------------------------------------------

    def _execute(self, call: ToolCall) -> str:
        if call.name == "addJob":
            return self._add_job(call.arguments)
        if call.name == "updateStatus":
            return self._update_status(call.arguments)
        self._logger.warning("assistant_unknown_tool", tool=call.name)
        return f"I can't perform '{call.name}' from here."

    def _add_job(self, args: dict[str, Any]) -> str:
        company = str(args.get("company") or "").strip()
        role = str(args.get("role") or "").strip()
        status = _parse_status(args.get("status")) or JobStatus.APPLIED
        job = self._store.create(
            {
                "company": company,
                "role": role,
                "status": status,
                "link": args.get("link") or None,
                "notes": args.get("notes") or DEFAULT_NOTE,
                "date_applied": self._store.today(),
            }
        )
        if job is None:
            return "I need both a company and a role to add an application."
        self._logger.info("assistant_job_added", job_id=job.id)
        return f"Created the application for **{job.company}** as {job.role}."

    def _update_status(self, args: dict[str, Any]) -> str:
        name = str(args.get("companyName") or "")
        job = find_job_by_company(self._store.jobs, name)
        if job is None:
            return f'I couldn\'t find a job matching "{name}".'
        status = _parse_status(args.get("newStatus"))
        if status is None:
            return f"'{args.get('newStatus')}' is not a valid status. Use one of: {_STATUS_VALUES}."

        changes: dict[str, Any] = {"status": status}
        note = str(args.get("notes") or "").strip()
        if note:
            changes["notes"] = f"{job.notes or ''}\n\n**Update:** {note}"
        self._store.update(job.id, changes)
        self._logger.info("assistant_status_updated", job_id=job.id, status=status.value)
        return f"Status updated for **{job.company}** to {status.value}."

    # -- history ------------------------------------------------------------

    def _append(self, role: ChatRole, content: str) -> ChatMessage:
        message = self._message(role, content)
        self._messages.append(message)
        self._save_history()
        return message

    def _message(self, role: ChatRole, content: str) -> ChatMessage:
        return ChatMessage(
            id=self._ids.new_message_id(),
            role=role,
            content=content,
            timestamp=int(self._clock.now().timestamp() * 1000),
        )

    def _load_history(self) -> list[ChatMessage]:
        raw = self._storage.get_item(CHAT_HISTORY_KEY)
        if raw is not None:
            try:
                return messages_from_json(raw)
            except (ValueError, KeyError, TypeError) as exc:
                self._logger.warning("chat_history_corrupt", error=str(exc))
        return [self._message(ChatRole.MODEL, GREETING)]

    def _save_history(self) -> None:
        self._storage.set_item(CHAT_HISTORY_KEY, messages_to_json(self._messages))


class DailyBriefingService:
    """One-line focus suggestion, cached until the number of records changes."""

    def __init__(
        self,
        *,
        store: JobStore,
        llm: LLMClientPort | None,
        storage: KeyValueStoragePort,
        logger: LoggerPort,
    ) -> None:
        self._store = store
        self._llm = llm
        self._storage = storage
        self._logger = logger

    async def get_briefing(self) -> str | None:
        jobs = self._store.jobs
        if self._llm is None or not jobs:
            return None
        cached = self._read_cache()
        if cached is not None and cached[0] == len(jobs):
            return cached[1]

        prompt = build_daily_briefing_prompt(
            jobs_context=format_jobs_for_context(jobs),
            today=self._store.today(),
        )
        try:
            text = (await self._llm.complete(prompt, max_tokens=120)).strip()
        except LLM_ERRORS as exc:
            self._logger.warning("daily_briefing_unavailable", error=str(exc))
            return None
        if not text:
            return None
        self._storage.set_item(DAILY_BRIEFING_KEY, json.dumps({"count": len(jobs), "text": text}))
        return text

    def _read_cache(self) -> tuple[int, str] | None:
        raw = self._storage.get_item(DAILY_BRIEFING_KEY)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            return int(data["count"]), str(data["text"])
        except (ValueError, KeyError, TypeError) as exc:
            self._logger.warning("daily_briefing_cache_corrupt", error=str(exc))
            return None


def _parse_status(value: Any) -> JobStatus | None:
    if isinstance(value, JobStatus):
        return value
    text = str(value or "").strip().lower()
    for status in JobStatus:
        if status.value.lower() == text:
            return status
    return None

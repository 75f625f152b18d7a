from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from domain.models import (
    JobApplication,
    LLMToolResponse,
    NotificationLevel,
    SyncAction,
    ToolDefinition,
)


@runtime_checkable
class KeyValueStoragePort(Protocol):
    """
    String-valued durable key/value storage.

    Mirrors the browser ``localStorage`` contract: values are opaque
    strings and a missing key reads as ``None``.
    """

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...


@runtime_checkable
class RemoteMirrorPort(Protocol):
    """
    Optional remote copy of the job collection.

    Implementations raise ``RemoteMirrorError`` (or a subclass) for every
    failure; callers never need to know about transport exceptions.
    """

    async def fetch_all(self) -> Sequence[JobApplication]:
        ...

    async def push(self, action: SyncAction, data: Mapping[str, Any]) -> None:
        ...


@runtime_checkable
class NotifierPort(Protocol):
    """Transient, non-blocking user notifications (toasts)."""

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        ...


@runtime_checkable
class LLMClientPort(Protocol):
    """Thin abstraction over a chat completion API with tool calling."""

    async def complete(
        self,
        prompt: str,
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        ...

    async def complete_with_tools(
        self,
        messages: list[dict[str, Any]],
        tools: list[ToolDefinition],
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMToolResponse:
        ...


@runtime_checkable
class ClockPort(Protocol):
    """Time source for deterministic and easily testable code."""

    def now(self) -> datetime:
        ...


@runtime_checkable
class IdGeneratorPort(Protocol):
    """Generation of unique identifiers for records and messages."""

    def new_job_id(self) -> str:
        ...

    def new_message_id(self) -> str:
        ...


@runtime_checkable
class LoggerPort(Protocol):
    """Structured, testable logging abstraction."""

    def info(self, message: str, **fields: Any) -> None:
        ...

    def warning(self, message: str, **fields: Any) -> None:
        ...

    def error(self, message: str, **fields: Any) -> None:
        ...


__all__ = [
    "KeyValueStoragePort",
    "RemoteMirrorPort",
    "NotifierPort",
    "LLMClientPort",
    "ClockPort",
    "IdGeneratorPort",
    "LoggerPort",
]

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class JobStatus(str, Enum):
    """Lifecycle states for a job application."""

    APPLIED = "Applied"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"
    ARCHIVED = "Archived"


# Statuses that never go stale.
SETTLED_STATUSES = frozenset({JobStatus.REJECTED, JobStatus.ARCHIVED, JobStatus.OFFER})
ACTIVE_STATUSES = frozenset({JobStatus.APPLIED, JobStatus.INTERVIEW})


@dataclass(frozen=True)
class JobApplication:
    """
    A single tracked job application.

    Dates are ISO ``YYYY-MM-DD`` strings; day granularity is all the
    tracker needs and it keeps the wire format identical to storage.
    """

    id: str
    company: str
    role: str
    status: JobStatus
    date_applied: str
    last_updated: str
    link: str | None = None
    notes: str | None = None
    next_action: str | None = None
    next_action_date: str | None = None
    salary: str | None = None
    location: str | None = None
    contacts: str | None = None
    custom_fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", JobStatus(self.status))
        object.__setattr__(
            self,
            "custom_fields",
            MappingProxyType({str(k): str(v) for k, v in dict(self.custom_fields).items()}),
        )


class CustomFieldType(str, Enum):
    TEXT = "text"
    DATE = "date"
    URL = "url"
    NUMBER = "number"


@dataclass(frozen=True)
class CustomFieldDefinition:
    """User-defined extra column; values live in ``JobApplication.custom_fields``."""

    id: str
    label: str
    type: CustomFieldType = CustomFieldType.TEXT


@dataclass(frozen=True)
class JobStats:
    total: int
    interview: int
    offer: int
    rejected: int
    active: int


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class SyncAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortConfig:
    """Table sort state; ``direction=None`` means insertion order."""

    key: str = "last_updated"
    direction: SortDirection | None = None


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    id: str
    message: str
    level: NotificationLevel
    created_at: datetime


class ChatRole(str, Enum):
    USER = "user"
    MODEL = "model"
    SYSTEM = "system"


@dataclass(frozen=True)
class ChatMessage:
    """One entry of the assistant conversation; ``timestamp`` is epoch millis."""

    id: str
    role: ChatRole
    content: str
    timestamp: int


@dataclass(frozen=True)
class AppConfig:
    """Application-level configuration loaded from config.json."""

    openai_key: str
    openai_base_url: str
    openai_model: str = "gpt-4o-mini"
    remote_timeout: float = 30.0
    log_level: str = "info"


@dataclass(frozen=True)
class ToolDefinition:
    """Schema for a tool the assistant model can call."""

    name: str
    description: str
    parameters: dict[str, Any]


@dataclass(frozen=True)
class ToolCall:
    """A single tool invocation decided by the LLM."""

    name: str
    arguments: dict[str, Any]


@dataclass(frozen=True)
class LLMToolResponse:
    """Parsed response from an LLM that supports tool/function calling."""

    tool_calls: list[ToolCall] | None = None
    text: str | None = None
    finish_reason: str | None = None


__all__ = [
    "JobStatus",
    "SETTLED_STATUSES",
    "ACTIVE_STATUSES",
    "JobApplication",
    "CustomFieldType",
    "CustomFieldDefinition",
    "JobStats",
    "StoreState",
    "SyncAction",
    "SortDirection",
    "SortConfig",
    "NotificationLevel",
    "Notification",
    "ChatRole",
    "ChatMessage",
    "AppConfig",
    "ToolDefinition",
    "ToolCall",
    "LLMToolResponse",
]

"""
Domain layer package.

This package contains the tracker's models, ports and pure business logic,
independent of any specific storage, transport or LLM provider.
"""

from .errors import (  # noqa: F401
    JobOpsError,
    MalformedResponseError,
    RemoteMirrorError,
    SettingsValidationError,
    StorageError,
    StoreNotReadyError,
)
from .models import (  # noqa: F401
    ChatMessage,
    ChatRole,
    CustomFieldDefinition,
    CustomFieldType,
    JobApplication,
    JobStats,
    JobStatus,
    Notification,
    NotificationLevel,
    SortConfig,
    SortDirection,
    StoreState,
    SyncAction,
)
from .ports import (  # noqa: F401
    ClockPort,
    IdGeneratorPort,
    KeyValueStoragePort,
    LLMClientPort,
    LoggerPort,
    NotifierPort,
    RemoteMirrorPort,
)

__all__ = [
    # Errors
    "JobOpsError",
    "StoreNotReadyError",
    "StorageError",
    "RemoteMirrorError",
    "MalformedResponseError",
    "SettingsValidationError",
    # Models
    "JobStatus",
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
    # Ports
    "KeyValueStoragePort",
    "RemoteMirrorPort",
    "NotifierPort",
    "LLMClientPort",
    "ClockPort",
    "IdGeneratorPort",
    "LoggerPort",
]

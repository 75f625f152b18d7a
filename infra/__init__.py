"""Infrastructure adapters – concrete implementations of domain ports."""

from .config import FileSystemConfigProvider
from .interaction import ConsoleNotifier
from .llm import OpenAIToolCallingClient
from .persistence import SQLiteKeyValueStorage
from .remote import HttpRemoteMirror
from .runtime import StructuredLogger, SystemClock, UuidIdGenerator

__all__ = [
    "FileSystemConfigProvider",
    "ConsoleNotifier",
    "OpenAIToolCallingClient",
    "SQLiteKeyValueStorage",
    "HttpRemoteMirror",
    "SystemClock",
    "UuidIdGenerator",
    "StructuredLogger",
]

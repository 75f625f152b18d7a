"""
Reusable fakes and in-memory implementations for tests.
"""

from .fake_notifier import RecordingNotifier
from .fake_remote_mirror import FakeRemoteMirror
from .fake_runtime import FixedClock, InMemoryLogger, SequentialIdGenerator
from .fake_storage import InMemoryKeyValueStorage
from .factories import make_job
from .scripted_llm_client import ScriptedLLMClient

__all__ = [
    "RecordingNotifier",
    "FakeRemoteMirror",
    "FixedClock",
    "SequentialIdGenerator",
    "InMemoryLogger",
    "InMemoryKeyValueStorage",
    "ScriptedLLMClient",
    "make_job",
]

"""
Domain services.

These services hold the tracker's behaviour while depending only on
domain models and ports so that infrastructure and UI layers can remain thin.
"""

from .assistant import ASSISTANT_TOOLS, AssistantService, DailyBriefingService
from .custom_fields import CustomFieldRegistry
from .job_store import JobStore
from .notifications import NotificationCenter
from .settings import SettingsService
from .sync import SyncAdapter

__all__ = [
    "ASSISTANT_TOOLS",
    "AssistantService",
    "DailyBriefingService",
    "CustomFieldRegistry",
    "JobStore",
    "NotificationCenter",
    "SettingsService",
    "SyncAdapter",
]

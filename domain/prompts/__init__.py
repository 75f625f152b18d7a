"""Prompt templates for the tracker assistant."""

from .system_prompt import SYSTEM_PROMPT  # noqa: F401
from .task_prompts import (  # noqa: F401
    build_chat_system_prompt,
    build_daily_briefing_prompt,
    format_jobs_for_context,
)

__all__ = [
    "SYSTEM_PROMPT",
    "build_chat_system_prompt",
    "build_daily_briefing_prompt",
    "format_jobs_for_context",
]

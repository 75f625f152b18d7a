"""Prompt builders that inject the live pipeline into the assistant."""

from __future__ import annotations

import json
from typing import Iterable

from domain.models import JobApplication
from domain.prompts.system_prompt import SYSTEM_PROMPT


def format_jobs_for_context(jobs: Iterable[JobApplication]) -> str:
    """Compact JSON snapshot of the pipeline for the model."""
    return json.dumps(
        [
            {
                "id": job.id,
                "company": job.company,
                "role": job.role,
                "status": job.status.value,
                "dateApplied": job.date_applied,
                "lastUpdated": job.last_updated,
                "notes": job.notes,
                "nextAction": job.next_action,
            }
            for job in jobs
        ]
    )


def build_chat_system_prompt(*, jobs_context: str, today: str) -> str:
    return (
        f"{SYSTEM_PROMPT}\n"
        f"## OPERATIONAL CONTEXT\n"
        f"\n"
        f"Current date: {today}\n"
        f"\n"
        f"Current job pipeline (JSON):\n"
        f"{jobs_context}\n"
    )


def build_daily_briefing_prompt(*, jobs_context: str, today: str) -> str:
    return (
        f"Today is {today}. Here is my job-application pipeline as JSON:\n"
        f"\n"
        f"{jobs_context}\n"
        f"\n"
        f"Give me ONE short, specific sentence telling me what to focus on "
        f"today (follow-ups, interviews to prepare for, stale applications). "
        f"No preamble."
    )

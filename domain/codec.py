"""Conversion between domain models and their JSON wire form.

The same camelCase shape is used for the local storage blob, the remote
mirror and the assistant context, so there is exactly one codec.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping

from domain.models import (
    ChatMessage,
    ChatRole,
    CustomFieldDefinition,
    CustomFieldType,
    JobApplication,
    JobStatus,
)

# attribute name -> wire name
JOB_WIRE_NAMES: dict[str, str] = {
    "id": "id",
    "company": "company",
    "role": "role",
    "status": "status",
    "date_applied": "dateApplied",
    "last_updated": "lastUpdated",
    "link": "link",
    "notes": "notes",
    "next_action": "nextAction",
    "next_action_date": "nextActionDate",
    "salary": "salary",
    "location": "location",
    "contacts": "contacts",
    "custom_fields": "customFields",
}
WIRE_TO_ATTR: dict[str, str] = {wire: attr for attr, wire in JOB_WIRE_NAMES.items()}

_REQUIRED_TEXT = ("id", "company", "role")
_OPTIONAL_TEXT = (
    "link",
    "notes",
    "next_action",
    "next_action_date",
    "salary",
    "location",
    "contacts",
)


def normalize_field_name(name: str) -> str:
    """Accept either the attribute or the wire spelling of a job field."""
    if name in JOB_WIRE_NAMES:
        return name
    if name in WIRE_TO_ATTR:
        return WIRE_TO_ATTR[name]
    raise ValueError(f"Unknown job field: {name!r}")


def job_to_payload(job: JobApplication) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": job.id,
        "company": job.company,
        "role": job.role,
        "status": job.status.value,
        "dateApplied": job.date_applied,
        "lastUpdated": job.last_updated,
    }
    for attr in _OPTIONAL_TEXT:
        value = getattr(job, attr)
        if value is not None:
            payload[JOB_WIRE_NAMES[attr]] = value
    payload["customFields"] = dict(job.custom_fields)
    return payload


def job_from_payload(data: Any) -> JobApplication:
    """Build a ``JobApplication`` from its wire form.

    Raises ``ValueError`` when the object is not job-shaped.
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"Job payload must be an object, got {type(data).__name__}")
    for key in _REQUIRED_TEXT:
        if not isinstance(data.get(key), str):
            raise ValueError(f"Job payload field {key!r} must be a string")
    status = data.get("status")
    if not isinstance(status, str):
        raise ValueError("Job payload field 'status' must be a string")
    custom = data.get("customFields") or {}
    if not isinstance(custom, Mapping):
        raise ValueError("Job payload field 'customFields' must be an object")

    optional: dict[str, str | None] = {}
    for attr in _OPTIONAL_TEXT:
        value = data.get(JOB_WIRE_NAMES[attr])
        optional[attr] = None if value is None else str(value)
    if optional["next_action_date"]:
        optional["next_action_date"] = _day(optional["next_action_date"])

    return JobApplication(
        id=data["id"],
        company=data["company"],
        role=data["role"],
        status=JobStatus(status),
        date_applied=_day(data.get("dateApplied")),
        last_updated=_day(data.get("lastUpdated")),
        custom_fields={str(k): str(v) for k, v in custom.items()},
        **optional,
    )


def jobs_to_json(jobs: Iterable[JobApplication]) -> str:
    return json.dumps([job_to_payload(j) for j in jobs])


def jobs_from_json(raw: str) -> list[JobApplication]:
    """Parse a stored blob; raises ``ValueError`` if it is not a job list."""
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("Stored jobs blob is not a list")
    return [job_from_payload(item) for item in data]


def custom_fields_to_json(definitions: Iterable[CustomFieldDefinition]) -> str:
    return json.dumps(
        [{"id": d.id, "label": d.label, "type": d.type.value} for d in definitions]
    )


def custom_fields_from_json(raw: str) -> list[CustomFieldDefinition]:
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("Stored custom fields blob is not a list")
    return [
        CustomFieldDefinition(
            id=str(item["id"]),
            label=str(item["label"]),
            type=CustomFieldType(item.get("type", "text")),
        )
        for item in data
    ]


def messages_to_json(messages: Iterable[ChatMessage]) -> str:
    return json.dumps(
        [
            {"id": m.id, "role": m.role.value, "content": m.content, "timestamp": m.timestamp}
            for m in messages
        ]
    )


def messages_from_json(raw: str) -> list[ChatMessage]:
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("Stored chat history is not a list")
    return [
        ChatMessage(
            id=str(item["id"]),
            role=ChatRole(item["role"]),
            content=str(item["content"]),
            timestamp=int(item["timestamp"]),
        )
        for item in data
    ]


def _day(value: Any) -> str:
    # Spreadsheet backends return full ISO timestamps for date cells. The day
    # is read in UTC: a sheet east of UTC stores local midnight as the previous
    # UTC day, so such cells come back one day early.
    if value is None:
        return ""
    text = str(value)
    return text[:10] if len(text) > 10 and text[10] in "T " else text

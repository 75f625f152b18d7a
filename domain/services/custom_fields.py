from __future__ import annotations

import re

from domain.codec import custom_fields_from_json, custom_fields_to_json
from domain.models import CustomFieldDefinition, CustomFieldType
from domain.ports import KeyValueStoragePort, LoggerPort
from domain.storage_keys import CUSTOM_FIELDS_KEY

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


class CustomFieldRegistry:
    """
    Definitions of user-defined job columns.

    Definitions are stored apart from the jobs; a job keeps values for
    fields that were later removed, they are simply no longer shown.
    """

    def __init__(self, storage: KeyValueStoragePort, logger: LoggerPort) -> None:
        self._storage = storage
        self._logger = logger

    def list_all(self) -> list[CustomFieldDefinition]:
        raw = self._storage.get_item(CUSTOM_FIELDS_KEY)
        if raw is None:
            return []
        try:
            return custom_fields_from_json(raw)
        except (ValueError, KeyError, TypeError) as exc:
            self._logger.warning("custom_fields_corrupt", error=str(exc))
            return []

    def add(
        self,
        label: str,
        field_type: CustomFieldType | str = CustomFieldType.TEXT,
    ) -> CustomFieldDefinition:
        label = label.strip()
        if not label:
            raise ValueError("Custom field label must not be empty")
        definitions = self.list_all()
        taken = {d.id for d in definitions}
        base = _SLUG_PATTERN.sub("_", label.lower()).strip("_") or "field"
        field_id = base
        suffix = 2
        while field_id in taken:
            field_id = f"{base}_{suffix}"
            suffix += 1

        definition = CustomFieldDefinition(
            id=field_id,
            label=label,
            type=CustomFieldType(field_type),
        )
        definitions.append(definition)
        self._storage.set_item(CUSTOM_FIELDS_KEY, custom_fields_to_json(definitions))
        return definition

    def remove(self, field_id: str) -> bool:
        definitions = self.list_all()
        remaining = [d for d in definitions if d.id != field_id]
        if len(remaining) == len(definitions):
            return False
        self._storage.set_item(CUSTOM_FIELDS_KEY, custom_fields_to_json(remaining))
        return True

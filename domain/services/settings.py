from __future__ import annotations

from urllib.parse import urlparse

from domain.errors import SettingsValidationError
from domain.ports import KeyValueStoragePort
from domain.storage_keys import BACKEND_URL_KEY


class SettingsService:
    """User-editable settings kept in local storage."""

    def __init__(self, storage: KeyValueStoragePort) -> None:
        self._storage = storage

    def get_backend_url(self) -> str | None:
        value = self._storage.get_item(BACKEND_URL_KEY)
        return value.strip() if value and value.strip() else None

    def set_backend_url(self, url: str | None) -> None:
        """Store the remote endpoint; an empty value switches to local-only mode."""
        if url is None or not url.strip():
            self._storage.remove_item(BACKEND_URL_KEY)
            return
        url = url.strip()
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise SettingsValidationError(
                f"Backend URL must be an http(s) URL, got {url!r}",
            )
        self._storage.set_item(BACKEND_URL_KEY, url)

from __future__ import annotations

import asyncio
import json
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path

from domain.models import AppConfig

_REQUIRED_CONFIG_KEYS = {"OPENAI_KEY", "OPENAI_BASE_URL"}
_LOG_LEVELS = ("info", "warning", "error")


@dataclass(frozen=True)
class ConnectivityResult:
    """Outcome of validate_connectivity(): an empty error list means success."""

    errors: list[str]

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0


class FileSystemConfigProvider:
    """Reads config.json from a config directory.

    Every public method re-reads from disk so that edits
    to the JSON file take effect without restarting the app.
    """

    def __init__(self, config_dir: str) -> None:
        self._config_dir = Path(config_dir)

    @property
    def config_path(self) -> Path:
        return self._config_dir / "config.json"

    def exists(self) -> bool:
        return self.config_path.is_file()

    def validate(self) -> list[str]:
        errors: list[str] = []
        data = self._validate_json_file(self.config_path, _REQUIRED_CONFIG_KEYS, errors)
        if data is not None:
            errors.extend(self._validate_config_formats(data))
        return errors

    @staticmethod
    def _validate_config_formats(data: dict) -> list[str]:
        errors: list[str] = []
        openai_key = str(data.get("OPENAI_KEY", ""))
        if not openai_key or "YOUR" in openai_key.upper():
            errors.append("OPENAI_KEY is a placeholder. Set your real API key.")

        base_url = str(data.get("OPENAI_BASE_URL", ""))
        if not base_url.startswith(("https://", "http://")):
            errors.append("OPENAI_BASE_URL must start with 'https://' or 'http://'.")

        model = data.get("OPENAI_MODEL")
        if model is not None and (not isinstance(model, str) or not model.strip()):
            errors.append("OPENAI_MODEL must be a non-empty string.")

        timeout = data.get("REMOTE_TIMEOUT")
        if timeout is not None and (
            isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0
        ):
            errors.append("REMOTE_TIMEOUT must be a positive number of seconds.")

        log_level = data.get("LOG_LEVEL")
        if log_level is not None and log_level not in _LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of: {', '.join(_LOG_LEVELS)}.")

        return errors

    async def validate_connectivity(self) -> ConnectivityResult:
        """Verify the LLM API key works over the network."""
        config = self.get_config()
        err = await asyncio.to_thread(self._check_openai, config.openai_key, config.openai_base_url)
        return ConnectivityResult(errors=[err] if err else [])

    @staticmethod
    def _check_openai(api_key: str, base_url: str) -> str | None:
        url = f"{base_url.rstrip('/')}/models"
        try:
            req = urllib.request.Request(url, method="GET")
            req.add_header("Authorization", f"Bearer {api_key}")
            with urllib.request.urlopen(req, timeout=15) as resp:
                resp.read()
            return None
        except urllib.error.HTTPError as exc:
            if exc.code == 401:
                return (
                    "API key rejected: 401 Unauthorized. "
                    "Check OPENAI_KEY in config.json."
                )
            return f"LLM API error: {exc.code} {exc.reason}."
        except OSError as exc:
            return f"LLM connectivity failed: {exc}"

    def get_config(self) -> AppConfig:
        data = self._read_json("config.json")
        return AppConfig(
            openai_key=data["OPENAI_KEY"],
            openai_base_url=data["OPENAI_BASE_URL"],
            openai_model=data.get("OPENAI_MODEL") or AppConfig.openai_model,
            remote_timeout=float(data.get("REMOTE_TIMEOUT", AppConfig.remote_timeout)),
            log_level=data.get("LOG_LEVEL", AppConfig.log_level),
        )

    # -- internal helpers ---------------------------------------------------

    def _read_json(self, filename: str) -> dict:
        path = self._config_dir / filename
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def _validate_json_file(
        path: Path,
        required_keys: set[str],
        errors: list[str],
    ) -> dict | None:
        """Validate a JSON file exists and has required keys.

        Returns the parsed dict on success, or None if the file
        is missing or unparseable.
        """
        if not path.is_file():
            errors.append(f"Missing file: {path}")
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            errors.append(f"Cannot read {path}: {exc}")
            return None
        if not isinstance(data, dict):
            errors.append(f"{path.name} must contain a JSON object")
            return None
        missing = required_keys - set(data.keys())
        if missing:
            errors.append(f"{path.name} missing keys: {', '.join(sorted(missing))}")
            return None
        return data

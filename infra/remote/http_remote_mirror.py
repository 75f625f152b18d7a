"""HTTP adapter for the spreadsheet-backed remote mirror.

Uses ``urllib.request`` off-loaded to a worker thread, like the LLM client.
"""

from __future__ import annotations

import asyncio
import http.client
import json
import urllib.error
import urllib.request
from typing import Any, Mapping

from domain.codec import job_from_payload
from domain.errors import MalformedResponseError, RemoteMirrorError
from domain.models import JobApplication, SyncAction

# text/plain keeps the POST a CORS "simple request" (no preflight), which is
# what spreadsheet web-app endpoints accept.
_POST_CONTENT_TYPE = "text/plain;charset=utf-8"


class HttpRemoteMirror:
    """Implements ``RemoteMirrorPort`` against a single read/write endpoint."""

    def __init__(self, endpoint: str, *, timeout: float = 30.0) -> None:
        self._endpoint = endpoint
        self._timeout = timeout

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def fetch_all(self) -> list[JobApplication]:
        data = await asyncio.to_thread(self._request, "GET", None)
        return self._parse_jobs(data)

    async def push(self, action: SyncAction, data: Mapping[str, Any]) -> None:
        action = SyncAction(action)
        payload = {"action": action.value, "data": dict(data)}
        result = await asyncio.to_thread(self._request, "POST", payload)
        if isinstance(result, dict) and result.get("status") == "error":
            raise RemoteMirrorError(
                f"Remote rejected {action.value}: {result.get('message', 'unknown error')}",
            )

    # -- internal helpers ---------------------------------------------------

    def _request(self, method: str, payload: dict[str, Any] | None) -> Any:
        body = json.dumps(payload).encode("utf-8") if payload is not None else None
        req = urllib.request.Request(self._endpoint, data=body, method=method)
        if body is not None:
            req.add_header("Content-Type", _POST_CONTENT_TYPE)
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            raise RemoteMirrorError(
                f"{method} {self._endpoint} failed: {exc.code} {exc.reason}",
            ) from exc
        except UnicodeDecodeError as exc:
            raise MalformedResponseError(
                f"{method} {self._endpoint} returned a non-UTF-8 body: {exc}",
            ) from exc
        except (OSError, http.client.HTTPException) as exc:
            raise RemoteMirrorError(f"{method} {self._endpoint} failed: {exc}") from exc

        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            if method == "GET":
                raise MalformedResponseError(f"Remote returned invalid JSON: {exc}") from exc
            # Only success/failure matters for writes.
            return None

    @staticmethod
    def _parse_jobs(data: Any) -> list[JobApplication]:
        if not isinstance(data, list):
            raise MalformedResponseError(
                f"Expected a list of jobs, got {type(data).__name__}",
            )
        jobs: list[JobApplication] = []
        for index, item in enumerate(data):
            try:
                jobs.append(job_from_payload(item))
            except ValueError as exc:
                raise MalformedResponseError(f"Item {index} is not a job: {exc}") from exc
        return jobs

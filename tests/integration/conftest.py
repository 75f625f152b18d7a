from __future__ import annotations

import http.server
import json
import threading
from typing import Any, Generator

import pytest


class FakeSheetBackend:
    """State behind the fake endpoint; tests inspect and tweak it directly."""

    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.posts: list[dict[str, Any]] = []
        self.content_types: list[str] = []
        self.get_status = 200
        self.get_body: str | None = None
        self.post_reply: dict[str, Any] = {"status": "success"}
        # Raw reply bytes for both methods, sent as is.
        self.raw_reply: bytes | None = None
        # Advertise more bytes than are sent, then hang up.
        self.truncate_replies = False
        self.lock = threading.Lock()

    def apply(self, message: dict[str, Any]) -> None:
        action, data = message["action"], message["data"]
        if action == "create":
            self.rows.insert(0, data)
        elif action == "update":
            self.rows = [data if r["id"] == data["id"] else r for r in self.rows]
        elif action == "delete":
            self.rows = [r for r in self.rows if r["id"] != data["id"]]


def _handler_for(backend: FakeSheetBackend) -> type[http.server.BaseHTTPRequestHandler]:
    class _Handler(http.server.BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802
            with backend.lock:
                status = backend.get_status
                body = backend.get_body if backend.get_body is not None else json.dumps(backend.rows)
            self._reply(status, body.encode("utf-8"))

        def do_POST(self) -> None:  # noqa: N802
            length = int(self.headers.get("Content-Length", 0))
            message = json.loads(self.rfile.read(length).decode("utf-8"))
            with backend.lock:
                backend.posts.append(message)
                backend.content_types.append(self.headers.get("Content-Type", ""))
                reply = backend.post_reply
                if reply.get("status") != "error":
                    backend.apply(message)
            self._reply(200, json.dumps(reply).encode("utf-8"))

        def _reply(self, status: int, raw: bytes) -> None:
            with backend.lock:
                if backend.raw_reply is not None:
                    raw = backend.raw_reply
                declared = len(raw) + 64 if backend.truncate_replies else len(raw)
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(declared))
            self.end_headers()
            self.wfile.write(raw)

        def log_message(self, *_args: object) -> None:
            pass

    return _Handler


@pytest.fixture()
def sheet_backend() -> Generator[tuple[str, FakeSheetBackend], None, None]:
    """Start a local HTTP server that behaves like the spreadsheet web app."""
    backend = FakeSheetBackend()
    server = http.server.ThreadingHTTPServer(("127.0.0.1", 0), _handler_for(backend))
    port = server.server_address[1]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{port}/exec", backend
    server.shutdown()
    server.server_close()


@pytest.fixture()
def unused_endpoint() -> str:
    """URL of a port nothing listens on."""
    server = http.server.HTTPServer(("127.0.0.1", 0), http.server.BaseHTTPRequestHandler)
    port = server.server_address[1]
    server.server_close()
    return f"http://127.0.0.1:{port}/exec"

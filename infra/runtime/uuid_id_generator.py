from __future__ import annotations

import uuid


class UuidIdGenerator:
    def new_job_id(self) -> str:
        return str(uuid.uuid4())

    def new_message_id(self) -> str:
        return f"msg-{uuid.uuid4().hex[:12]}"

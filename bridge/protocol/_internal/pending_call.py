# bridge/protocol/_internal/pending_call.py
from __future__ import annotations

import time
from concurrent.futures import Future
from typing import Any, Optional


class PendingCall:
    """Holds a Future for a request awaiting its reply envelope."""

    def __init__(self, msg_id: int, channel: str, method: str, timeout_s: float):
        self.msg_id = int(msg_id)
        self.channel = str(channel)
        self.method = str(method)
        self.timeout_s = float(timeout_s)
        self.created_at = time.perf_counter()
        self.future: Future = Future()

    def set_result(self, payload: Any, status: str) -> None:
        """Resolve with the reply payload (status 'ok') or a local failure status."""
        if self.future.done():
            return

        if status == "ok":
            self.future.set_result({"status": "ok", "payload": payload})
            return

        self.future.set_result({"status": status})

    def wait(self, timeout: Optional[float] = None) -> dict:
        """Blocking wait for the reply."""
        try:
            return self.future.result(timeout=timeout)
        except Exception:
            return {"status": "pending"}

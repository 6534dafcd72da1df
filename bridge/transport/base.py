# bridge/transport/base.py
from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, List

from .errors import TransportIOError

MAX_LINE_BYTES = 64 * 1024

_log = logging.getLogger(__name__)


class Transport(ABC):
    """
    Newline-delimited message link between the host application and the
    platform side.

    Drivers only move raw bytes (`_read_chunk` / `_write_bytes`); this base
    class turns them into whole lines:

      - read_lines() waits for at most one chunk and returns every line it
        completed, without the trailing newline. A partial line stays buffered
        for the next call; an empty list means nothing finished in time.
      - write_line(line) sends one line. Lines must not contain a newline.

    A buffered partial line larger than `max_line` is discarded so a peer that
    never sends a newline cannot grow memory without bound.
    """

    def __init__(self, *, max_line: int = MAX_LINE_BYTES):
        self.max_line = int(max_line)
        self._rx_buffer = bytearray()
        self._write_lock = threading.Lock()

    # ---------------- Driver hooks ----------------
    @abstractmethod
    def open(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    @abstractmethod
    def is_open(self) -> bool: ...

    @property
    @abstractmethod
    def link_name(self) -> str: ...

    @abstractmethod
    def _read_chunk(self) -> bytes:
        """Block up to the driver timeout; b"" when nothing arrived."""

    @abstractmethod
    def _write_bytes(self, data: bytes) -> None:
        """Write and flush all of `data`."""

    # ---------------- Line API ----------------
    def read_lines(self) -> List[bytes]:
        if not self.is_open():
            raise TransportIOError("read while transport not open", link=self.link_name)

        chunk = self._read_chunk()
        if chunk:
            self._rx_buffer.extend(chunk)

        lines: List[bytes] = []
        while True:
            idx = self._rx_buffer.find(b"\n")
            if idx < 0:
                break
            line = bytes(self._rx_buffer[:idx]).strip()
            del self._rx_buffer[: idx + 1]
            if line:
                lines.append(line)

        if len(self._rx_buffer) > self.max_line:
            _log.warning("LINE_TOO_LONG link=%s len=%d, dropping buffer", self.link_name, len(self._rx_buffer))
            self._rx_buffer.clear()

        return lines

    def write_line(self, line: bytes) -> None:
        if b"\n" in line:
            raise ValueError("line must not contain a newline")
        if not self.is_open():
            raise TransportIOError("write while transport not open", link=self.link_name)

        # one line per write so concurrent senders never interleave
        with self._write_lock:
            self._write_bytes(bytes(line) + b"\n")

    def discard_input(self) -> None:
        self._rx_buffer.clear()

    def __enter__(self) -> "Transport":
        self.open()
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        self.close()

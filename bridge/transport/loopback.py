# bridge/transport/loopback.py
from __future__ import annotations

import queue
import threading
from typing import Optional, Tuple

from .base import Transport
from .errors import PeerClosedError, TransportOpenError


class LoopbackTransport(Transport):
    """
    In-process link. Two instances created by pair() are cross-wired:
    lines written on one end are read on the other.

    Reads wait up to `timeout` seconds for the peer.
    """

    def __init__(self, timeout: float = 0.05, name: str = "loopback", **kwargs):
        super().__init__(**kwargs)
        self.timeout = float(timeout)
        self.name = name

        self._inbox: "queue.Queue[bytes]" = queue.Queue()
        self._peer: Optional["LoopbackTransport"] = None

        self._state_lock = threading.Lock()
        self._open = False

    @classmethod
    def pair(cls, timeout: float = 0.05) -> Tuple["LoopbackTransport", "LoopbackTransport"]:
        a = cls(timeout=timeout, name="loopback-a")
        b = cls(timeout=timeout, name="loopback-b")
        a._peer, b._peer = b, a
        return a, b

    @property
    def link_name(self) -> str:
        return self.name

    def open(self) -> None:
        if self._peer is None:
            raise TransportOpenError("no peer (use LoopbackTransport.pair())", link=self.name)
        self.discard_input()
        with self._state_lock:
            self._open = True

    def close(self) -> None:
        with self._state_lock:
            self._open = False

    def is_open(self) -> bool:
        with self._state_lock:
            return self._open

    def _read_chunk(self) -> bytes:
        try:
            first = self._inbox.get(timeout=self.timeout)
        except queue.Empty:
            return b""

        # whatever else already arrived rides along
        parts = [first]
        while True:
            try:
                parts.append(self._inbox.get_nowait())
            except queue.Empty:
                return b"".join(parts)

    def _write_bytes(self, data: bytes) -> None:
        peer = self._peer
        if peer is None or not peer.is_open():
            raise PeerClosedError("peer is closed", link=self.name)
        peer._inbox.put(data)

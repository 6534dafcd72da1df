# bridge/transport/uart.py
from __future__ import annotations

from typing import Optional

import serial
from serial import SerialException

from .base import Transport
from .errors import TransportIOError, TransportOpenError


class UARTTransport(Transport):
    """
    Serial link for a host application running on another machine or process.

    `port` is anything pyserial's serial_for_url() accepts: a device
    ("/dev/ttyUSB0", "COM3") or a URL such as "socket://127.0.0.1:7000"
    or "loop://" for a local echo link. Any serial error closes the port;
    the bridge does not reconnect on its own.
    """

    def __init__(self, port: str, baudrate: int = 115200, timeout: float = 0.05, **kwargs):
        super().__init__(**kwargs)
        self.port = port
        self.baudrate = int(baudrate)
        self.timeout = float(timeout)
        self.ser: Optional[serial.SerialBase] = None

    @property
    def link_name(self) -> str:
        return self.port

    def open(self) -> None:
        try:
            ser = serial.serial_for_url(
                self.port,
                baudrate=self.baudrate,
                timeout=self.timeout,
                write_timeout=self.timeout,
            )
        except (SerialException, ValueError) as e:
            raise TransportOpenError(str(e), link=self.port) from None

        # bytes queued before we attached belong to nobody
        ser.reset_input_buffer()
        self.discard_input()
        self.ser = ser

    def close(self) -> None:
        ser, self.ser = self.ser, None
        if ser is not None:
            ser.close()

    def is_open(self) -> bool:
        return self.ser is not None and self.ser.is_open

    def _fail(self, what: str, err: Exception) -> TransportIOError:
        self.close()
        return TransportIOError(f"{what} failed: {err}", link=self.port)

    def _read_chunk(self) -> bytes:
        ser = self.ser
        try:
            # block for the first byte only, then take the rest of what is buffered
            head = ser.read(1)
            if not head:
                return b""
            waiting = ser.in_waiting
            return head + ser.read(waiting) if waiting else head
        except (SerialException, OSError) as e:
            raise self._fail("read", e) from None

    def _write_bytes(self, data: bytes) -> None:
        ser = self.ser
        try:
            ser.write(data)
            ser.flush()
        except (SerialException, OSError) as e:
            raise self._fail("write", e) from None

# bridge/cli/commands.py
from __future__ import annotations

import argparse
import logging
import math
import threading
import time
from typing import Any

from bridge.core.context import Context
from bridge.dispatch.handlers import GET_BATTERY_LEVEL, GET_DEVICE_INFO, SHOW_NOTIFICATION
from bridge.model.config import BridgeConfig
from bridge.platform.sensors import InMemorySensorSource
from bridge.protocol.client import BridgeClient
from bridge.protocol.engine import ChannelEngine
from bridge.protocol.errors import ProtocolError
from bridge.runtime.host import BridgeHost
from bridge.runtime.state import HostStatus
from bridge.transport.base import Transport
from bridge.transport.loopback import LoopbackTransport

from bridge.cli.args import parse_call_args


# ---------------- Virtual sensor ----------------

class VirtualAccelerometerFeed:
    """Pushes a slow wobble around 1 g into an InMemorySensorSource from its own thread."""

    def __init__(self, source: InMemorySensorSource, *, interval_s: float = 0.2):
        self._source = source
        self._interval_s = float(interval_s)
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True, name="virtual-accelerometer")

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        self._thread.join(timeout=1.0)

    def _run(self) -> None:
        t0 = time.monotonic()
        while not self._stop_event.wait(self._interval_s):
            t = time.monotonic() - t0
            self._source.push((0.3 * math.sin(t), 0.3 * math.cos(t), 9.81 + 0.05 * math.sin(3 * t)))


# ---------------- Printing ----------------

def print_status(st: HostStatus) -> None:
    link = st.link
    print(f"Link:      connected={link.connected} driver={link.driver}")
    if link.last_error:
        print(f"Link err:  {link.last_error}")
    print(f"Stream:    state={st.stream.state} producer={st.stream.producer or '-'} delivered={st.stream.delivered}")
    print(f"Methods:   {', '.join(st.methods)}")
    print(f"Channels:  {', '.join(st.notification_channels) or '(none)'}")


def _print_call(client: BridgeClient, method: str, arguments: Any = None) -> bool:
    try:
        value = client.invoke_method(method, arguments)
    except ProtocolError as e:
        print(f"{method}: {e}")
        return False
    print(f"{method}: {value!r}")
    return True


# ---------------- Helpers ----------------

def _make_client(transport: Transport, config: BridgeConfig) -> tuple[ChannelEngine, BridgeClient]:
    engine = ChannelEngine(transport, call_timeout_s=config.call_timeout_s, logger=logging.getLogger("client"))
    client = BridgeClient(
        engine,
        method_channel=config.channels.method,
        event_channel=config.channels.event,
    )
    return engine, client


# ---------------- Commands ----------------

def cmd_demo(args: argparse.Namespace, ctx: Context) -> int:
    config = ctx.config
    host_side, app_side = LoopbackTransport.pair()

    source = InMemorySensorSource() if args.virtual_sensor else None
    feed = VirtualAccelerometerFeed(source) if source is not None else None

    host = BridgeHost(config, host_side, sensor_source=source)
    engine, client = _make_client(app_side, config)

    try:
        host.start()
        app_side.open()
        engine.start_rx_thread()
        if feed is not None:
            feed.start()

        _print_call(client, GET_BATTERY_LEVEL)
        _print_call(client, GET_DEVICE_INFO, {"includeModel": True, "includeVersion": True})
        _print_call(client, SHOW_NOTIFICATION, {"title": "channel-bridge", "message": "Hello from the demo"})
        _print_call(client, "getUnknownThing")

        client.listen(lambda event: print(f"STREAM {event}"))
        time.sleep(max(0.0, float(args.secs)))
        client.cancel()

        print_status(host.status())
        return 0
    finally:
        if feed is not None:
            feed.stop()
        engine.stop_rx_thread()
        app_side.close()
        host.stop()


def cmd_serve(args: argparse.Namespace, ctx: Context) -> int:
    ctx = ctx.with_transport("uart", {"port": args.port, "baudrate": args.baudrate})
    transport = ctx.create_transport()

    source = InMemorySensorSource() if args.virtual_sensor else None
    feed = VirtualAccelerometerFeed(source) if source is not None else None

    host = BridgeHost(ctx.config, transport, sensor_source=source)
    host.start()
    if feed is not None:
        feed.start()
    print(f"Serving on {args.port} @ {args.baudrate}. Press Ctrl+C to quit")

    try:
        while True:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        if feed is not None:
            feed.stop()
        host.stop()
        print_status(host.status())
    return 0


def _open_uart_client(args: argparse.Namespace, ctx: Context) -> tuple[Transport, ChannelEngine, BridgeClient]:
    ctx = ctx.with_transport("uart", {"port": args.port, "baudrate": args.baudrate})
    transport = ctx.create_transport()
    transport.open()
    engine, client = _make_client(transport, ctx.config)
    engine.start_rx_thread()
    return transport, engine, client


def cmd_call(args: argparse.Namespace, ctx: Context) -> int:
    arguments = parse_call_args(args.arg)
    transport, engine, client = _open_uart_client(args, ctx)
    try:
        return 0 if _print_call(client, args.method, arguments) else 1
    finally:
        engine.stop_rx_thread()
        transport.close()


def cmd_listen(args: argparse.Namespace, ctx: Context) -> int:
    transport, engine, client = _open_uart_client(args, ctx)
    try:
        client.listen(lambda event: print(f"STREAM {event}"))
        try:
            time.sleep(max(0.0, float(args.secs)))
        except KeyboardInterrupt:
            pass
        client.cancel()
        return 0
    except ProtocolError as e:
        print(f"listen: {e}")
        return 1
    finally:
        engine.stop_rx_thread()
        transport.close()

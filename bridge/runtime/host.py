# bridge/runtime/host.py
from __future__ import annotations

import logging
import random
import threading
from typing import Optional

from bridge.core.errors import ChannelConnectError
from bridge.dispatch.dispatcher import CommandDispatcher
from bridge.dispatch.handlers import default_handlers
from bridge.interfaces.platform import BatteryAccessor, DeviceInfoAccessor
from bridge.interfaces.sensor_source import SensorSource
from bridge.model.config import BridgeConfig
from bridge.platform.battery import PsutilBattery
from bridge.platform.device import PlatformDeviceInfo
from bridge.platform.notifications import LoggingPresenter, NotificationCenter, NotificationPresenter
from bridge.platform.sensors import NullSensorSource, SensorDelay
from bridge.protocol.engine import ChannelEngine
from bridge.runtime.channels import EventChannelBinding, MethodChannelBinding
from bridge.runtime.state import HostStatus, LinkState, StreamState
from bridge.stream.delivery import DeliveryContext
from bridge.stream.producers import AccelerometerProducer, Producer, SimulatedProducer
from bridge.stream.session import StreamSessionManager
from bridge.transport.base import Transport
from bridge.transport.errors import TransportError


class BridgeHost:
    """
    Platform side of the bridge.

    Responsibilities:
      - open/close the transport and run the channel engine
      - serve the method channel through the command dispatcher
      - serve the event channel through the stream session manager
      - run every incoming request and every sample delivery on one delivery context
    """

    def __init__(
        self,
        config: BridgeConfig,
        transport: Transport,
        *,
        battery: Optional[BatteryAccessor] = None,
        device: Optional[DeviceInfoAccessor] = None,
        sensor_source: Optional[SensorSource] = None,
        presenter: Optional[NotificationPresenter] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._transport = transport
        self._log = logger or logging.getLogger(__name__)
        self._rng = rng

        self._lock = threading.RLock()
        self._started = False
        self._last_error: Optional[str] = None

        self._context = DeliveryContext(name="bridge-main", logger=self._log)
        self._engine = ChannelEngine(
            transport,
            call_timeout_s=config.call_timeout_s,
            executor=self._context.post,
            logger=self._log,
        )

        self._sensor_source: SensorSource = sensor_source or NullSensorSource()
        self._sensor_delay = SensorDelay.parse(config.stream.sensor_delay)

        self.notifications = NotificationCenter(
            presenter or LoggingPresenter(logger=self._log),
            default_channel_id=config.notification_channel.id,
            rng=rng,
            logger=self._log,
        )

        self.dispatcher = CommandDispatcher(
            default_handlers(
                battery=battery or PsutilBattery(logger=self._log),
                device=device or PlatformDeviceInfo(),
                notifier=self.notifications,
                logger=self._log,
            ),
            logger=self._log,
        )

        self.sessions = StreamSessionManager(
            self._context,
            real_factory=self._make_real_producer,
            simulated_factory=self._make_simulated_producer,
            logger=self._log,
        )

        self._method_binding = MethodChannelBinding(
            self._engine, config.channels.method, self.dispatcher, logger=self._log
        )
        self._event_binding = EventChannelBinding(
            self._engine, config.channels.event, self.sessions, logger=self._log
        )

    @property
    def config(self) -> BridgeConfig:
        return self._config

    @property
    def context(self) -> DeliveryContext:
        return self._context

    @property
    def is_started(self) -> bool:
        with self._lock:
            return self._started

    # ---------------- Producers ----------------
    def _make_real_producer(self) -> Optional[Producer]:
        return AccelerometerProducer(self._sensor_source, delay=self._sensor_delay, logger=self._log)

    def _make_simulated_producer(self) -> Producer:
        stream = self._config.stream
        return SimulatedProducer(
            self._context,
            period_s=stream.simulated_period_s,
            value_range=stream.simulated_range,
            rng=self._rng,
            logger=self._log,
        )

    # ---------------- Lifecycle ----------------
    def start(self) -> None:
        with self._lock:
            if self._started:
                return
            self._last_error = None

            try:
                self._transport.open()
            except TransportError as e:
                self._last_error = str(e)
                self._log.exception("TRANSPORT_OPEN_FAILED")
                raise ChannelConnectError(
                    "Could not open bridge transport.",
                    hint=str(e),
                    details={"driver": type(self._transport).__name__},
                ) from None

            self.notifications.register_channel(self._config.notification_channel)

            self._context.start()
            self._method_binding.attach()
            self._event_binding.attach()
            self._engine.start_rx_thread()
            self._started = True

        self._log.info(
            "HOST_STARTED method_channel=%s event_channel=%s",
            self._config.channels.method,
            self._config.channels.event,
        )

    def stop(self) -> None:
        """Host shutdown: tears the stream down unconditionally. Safe to call repeatedly."""
        # the session is driven from the delivery context; stop it there when it is still running
        if not self._context.run_sync(self.sessions.teardown, timeout=1.0):
            self.sessions.teardown()

        with self._lock:
            if not self._started:
                return
            self._started = False

            self._event_binding.detach()
            self._method_binding.detach()

            try:
                self._engine.stop_rx_thread()
            except Exception:
                self._log.exception("Failed to stop RX thread")

            self._context.stop()

            try:
                self._transport.close()
            except Exception:
                self._log.exception("Failed to close transport")

        self._log.info("HOST_STOPPED")

    def status(self) -> HostStatus:
        with self._lock:
            link = LinkState(
                connected=self._started,
                driver=type(self._transport).__name__,
                last_error=self._last_error,
            )

        origin = self.sessions.active_origin
        stream = StreamState(
            state=self.sessions.state.value,
            producer=origin.name.lower() if origin is not None else None,
            delivered=self.sessions.delivered_count,
        )

        return HostStatus(
            link=link,
            stream=stream,
            methods=self.dispatcher.names(),
            notification_channels=sorted(self.notifications.channels()),
        )

    def __enter__(self) -> "BridgeHost":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

# bridge/platform/notifications.py
from __future__ import annotations

import logging
import random
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, Dict, List, Optional, Protocol

from bridge.model.config import NotificationChannelSpec


@dataclass(frozen=True)
class Notification:
    id: int
    channel_id: str
    title: str
    message: str
    icon: str = "info"
    auto_cancel: bool = True
    posted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationPresenter(Protocol):
    def present(self, notification: Notification) -> None: ...


class LoggingPresenter:
    """Shows notifications by logging them; keeps the most recent ones for inspection."""

    def __init__(self, *, history: int = 100, logger: Optional[logging.Logger] = None):
        self._log = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._history: Deque[Notification] = deque(maxlen=int(history))

    def present(self, notification: Notification) -> None:
        with self._lock:
            self._history.append(notification)
        self._log.info(
            "NOTIFICATION id=%d channel=%s title=%r message=%r",
            notification.id,
            notification.channel_id,
            notification.title,
            notification.message,
        )

    @property
    def history(self) -> List[Notification]:
        with self._lock:
            return list(self._history)


class NotificationCenter:
    """
    Registers notification channels and posts notifications to them.

    Posting to a channel that was never registered raises LookupError.
    """

    def __init__(
        self,
        presenter: NotificationPresenter,
        *,
        default_channel_id: str,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._presenter = presenter
        self.default_channel_id = default_channel_id
        self._rng = rng or random.Random()
        self._log = logger or logging.getLogger(__name__)

        self._lock = threading.Lock()
        self._channels: Dict[str, NotificationChannelSpec] = {}

    def register_channel(self, spec: NotificationChannelSpec) -> None:
        with self._lock:
            self._channels[spec.id] = spec
        self._log.info("NOTIFICATION_CHANNEL_REGISTERED id=%s importance=%s", spec.id, spec.importance)

    def channels(self) -> Dict[str, NotificationChannelSpec]:
        with self._lock:
            return dict(self._channels)

    def show(self, title: str, message: str, *, channel_id: Optional[str] = None) -> int:
        cid = channel_id or self.default_channel_id
        with self._lock:
            if cid not in self._channels:
                raise LookupError(f"notification channel '{cid}' is not registered")

        notification = Notification(
            id=self._rng.randrange(1000),
            channel_id=cid,
            title=str(title),
            message=str(message),
        )
        self._presenter.present(notification)
        return notification.id

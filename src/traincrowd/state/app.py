"""Application state owned by the dashboard driver."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from traincrowd.models.telemetry import DeviceTelemetry, default_telemetry
from traincrowd.state.store import RecordTable

_logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything the poller, simulator and renderer share.

    One instance per dashboard; nothing here is module-global, so tests can
    build as many isolated states as they need.
    """

    records: RecordTable = field(default_factory=RecordTable)
    device_address: str | None = None
    target_url: str | None = None
    connected: bool = False
    last_telemetry: DeviceTelemetry = field(default_factory=default_telemetry)
    last_sync: datetime | None = None

    @property
    def configured(self) -> bool:
        return self.target_url is not None


def update_connection_status(state: AppState, is_connected: bool) -> None:
    """Record the device connection state, logging transitions loudly."""
    changed = state.connected != is_connected
    state.connected = is_connected
    if is_connected:
        _logger.log(logging.INFO if changed else logging.DEBUG, "Connected to ESP32")
    else:
        _logger.log(logging.WARNING if changed else logging.DEBUG, "Connection lost - reconnecting...")

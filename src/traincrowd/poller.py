"""Live telemetry polling.

This module owns the fixed-interval poll loop for the live compartment.
The HTTP details live in :mod:`traincrowd._transport`; this module turns
device payloads into :class:`CompartmentRecord` objects and writes them to
the shared record table.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import ValidationError

from traincrowd._constants import LIVE_COMPARTMENT, POLL_INTERVAL
from traincrowd._transport import Transport
from traincrowd.exceptions import DeviceTransportError
from traincrowd.models.compartment import CompartmentRecord
from traincrowd.models.telemetry import DeviceTelemetry
from traincrowd.state.app import AppState, update_connection_status

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def map_telemetry(telemetry: DeviceTelemetry, now: datetime | None = None) -> CompartmentRecord:
    """Build the live compartment's record from a device payload.

    The status is copied verbatim (empty when the device omitted it); it is
    only validated when rendered.
    """
    return CompartmentRecord(
        crowd_status=telemetry.status if telemetry.status is not None else "",
        sensors=telemetry.sensors.to_flags(),
        last_updated=telemetry.reported_at or now or _utcnow(),
        is_live=True,
    )


class TelemetryPoller:
    """Polls the device status endpoint and updates the live compartment.

    Usage::

        poller = TelemetryPoller(state, transport, on_update=dashboard.refresh)
        await poller.run()  # runs until cancelled
    """

    def __init__(
        self,
        state: AppState,
        transport: Transport,
        *,
        interval: float = POLL_INTERVAL,
        single_flight: bool = True,
        on_update: Callable[[], None] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._state = state
        self._transport = transport
        self._interval = interval
        self._single_flight = single_flight
        self._on_update = on_update
        self._clock = clock
        self._inflight: asyncio.Task[bool] | None = None
        self._tasks: set[asyncio.Task[bool]] = set()
        self.skipped_ticks = 0

    @property
    def busy(self) -> bool:
        """Whether a request is still outstanding."""
        return self._inflight is not None and not self._inflight.done()

    async def poll_once(self) -> bool:
        """Run one poll cycle. Returns ``True`` when the live record was updated.

        Failures never touch the stored record; they only flip the
        connection state to disconnected.
        """
        url = self._state.target_url
        if url is None:
            raise RuntimeError("Poller started without a configured device URL")

        try:
            body = await self._transport.get_json(url)
            telemetry = DeviceTelemetry.model_validate(body)
        except DeviceTransportError as exc:
            _logger.warning("ESP32 connection error: %s", exc)
            update_connection_status(self._state, False)
            return False
        except ValidationError as exc:
            _logger.warning("ESP32 sent an unusable payload: %s", exc.errors(include_url=False))
            update_connection_status(self._state, False)
            return False

        _logger.debug("Received ESP32 data: %s", telemetry.raw)
        now = self._clock()
        record = map_telemetry(telemetry, now)

        update_connection_status(self._state, True)
        self._state.last_telemetry = telemetry
        self._state.records.replace(LIVE_COMPARTMENT, record)
        self._state.last_sync = now
        _logger.info(
            "Updated %s with ESP32 data: %s (%d active sensors)",
            LIVE_COMPARTMENT,
            telemetry.status,
            telemetry.sensors.active_count,
        )

        if self._on_update is not None:
            self._on_update()
        return True

    def tick(self) -> asyncio.Task[bool] | None:
        """Start a poll cycle in the background.

        With single-flight enabled, returns ``None`` without issuing a
        request while the previous one is still outstanding.
        """
        if self._single_flight and self.busy:
            self.skipped_ticks += 1
            _logger.debug("Previous poll still in flight, skipping tick")
            return None

        task = asyncio.create_task(self.poll_once())
        self._inflight = task
        self._tasks.add(task)
        task.add_done_callback(self._finish)
        return task

    def _finish(self, task: asyncio.Task[bool]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.error("Poll cycle failed: %r", exc, exc_info=exc)
            update_connection_status(self._state, False)

    async def run(self) -> None:
        """Poll immediately, then every ``interval`` seconds until cancelled."""
        _logger.info("Connecting to ESP32 at: %s", self._state.target_url)
        update_connection_status(self._state, False)
        try:
            while True:
                self.tick()
                await asyncio.sleep(self._interval)
        finally:
            for task in list(self._tasks):
                task.cancel()

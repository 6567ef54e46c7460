"""Dashboard driver tying configuration, polling, simulation and rendering together."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import random
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import aiohttp

from traincrowd._constants import CROWD_THRESHOLDS
from traincrowd._transport import HttpTransport, Transport
from traincrowd.config import MonitorConfig
from traincrowd.configurator import apply_address, blocking_notice, configure_connection, reset_address
from traincrowd.exceptions import TrainCrowdError
from traincrowd.models._base import CrowdStatus, get_crowd_level, normalize_status
from traincrowd.models.compartment import CompartmentRecord
from traincrowd.poller import TelemetryPoller
from traincrowd.render.engine import refresh_time_labels, render_compartment, render_dashboard
from traincrowd.render.surface import DisplaySurface, build_dashboard_surface
from traincrowd.render.timefmt import format_time_ago
from traincrowd.simulator import SIMULATION_PROBABILITY, CompartmentSimulator
from traincrowd.state.app import AppState, update_connection_status
from traincrowd.state.store import RecordTable, initial_records
from traincrowd.storage import KeyValueStorage, LocalStorage

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class MonitorHandle:
    """Inspection handle over a running dashboard.

    Exposes the render and status helpers bound to the dashboard's own
    state and surface, plus the live record table and constants.
    """

    render_compartment: Callable[[str, CompartmentRecord], bool]
    update_connection_status: Callable[[bool], None]
    normalize_status: Callable[[Any], CrowdStatus]
    get_crowd_level: Callable[[Any], str]
    format_time_ago: Callable[..., str]
    records: RecordTable
    crowd_thresholds: Mapping[str, int]
    simulation_probability: Mapping[CrowdStatus, float]


class CrowdDashboard:
    """Owns the application state and its periodic tasks.

    Usage::

        async with CrowdDashboard(MonitorConfig.from_env()) as dashboard:
            dashboard.configure()
            dashboard.start()
            ...
    """

    def __init__(
        self,
        config: MonitorConfig,
        *,
        transport: Transport | None = None,
        session: aiohttp.ClientSession | None = None,
        storage: KeyValueStorage | None = None,
        prompt: Callable[[str], str] = input,
        notify: Callable[[str], None] = blocking_notice,
        rng: random.Random | None = None,
        surface: DisplaySurface | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._transport = transport
        self._external_session = session is not None
        self._http_session = session
        self._storage = storage if storage is not None else LocalStorage(config.storage_path)
        self._prompt = prompt
        self._notify = notify
        self._clock = clock
        self.state = AppState()
        self.surface = surface if surface is not None else build_dashboard_surface()
        self.simulator = CompartmentSimulator(
            self.state,
            rng=rng or random.Random(config.seed),
            interval=config.simulation_interval,
            on_update=self.refresh,
            clock=clock,
        )
        self.poller: TelemetryPoller | None = None
        self._tasks: list[asyncio.Task[None]] = []
        self._poller_task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CrowdDashboard:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._http_session, timeout=self._config.request_timeout)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> MonitorConfig:
        return self._config

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    def configure(self) -> str:
        """Resolve the device URL from config or by prompting the user.

        Raises :class:`ConfigurationError` when no address is supplied.
        """
        if self._config.address:
            return apply_address(self.state, self._storage, self._config.address)
        return configure_connection(self.state, self._storage, prompt=self._prompt, notify=self._notify)

    async def forget_address(self) -> None:
        """Stop polling, clear the stored address and return to a fresh page."""
        await self._stop_poller()
        reset_address(self._storage)
        for compartment_id, record in initial_records(self._clock()).items():
            self.state.records.replace(compartment_id, record)
        self.state.device_address = None
        self.state.target_url = None
        self.state.connected = False
        self.refresh()

    async def reset_address(self) -> str:
        """Forget the stored address and prompt again.

        A running dashboard resumes polling the new address. Raises
        :class:`ConfigurationError` when the new answer is blank, leaving
        the dashboard running without a poller.
        """
        await self.forget_address()
        url = configure_connection(self.state, self._storage, prompt=self._prompt, notify=self._notify)
        if self._tasks:
            self._start_poller()
        return url

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Re-render every compartment from the record table."""
        render_dashboard(self.surface, self.state.records)
        _logger.debug("Data synced at: %s", self._clock().strftime("%H:%M:%S"))

    def refresh_time_labels(self) -> None:
        refresh_time_labels(self.surface, self.state.records, self._clock())

    def update_connection_status(self, is_connected: bool) -> None:
        update_connection_status(self.state, is_connected)

    def render_html(self) -> str:
        return self.surface.to_html(refresh_seconds=self._config.poll_interval)

    def handle(self) -> MonitorHandle:
        return MonitorHandle(
            render_compartment=lambda cid, record: render_compartment(self.surface, cid, record),
            update_connection_status=self.update_connection_status,
            normalize_status=normalize_status,
            get_crowd_level=get_crowd_level,
            format_time_ago=format_time_ago,
            records=self.state.records,
            crowd_thresholds=CROWD_THRESHOLDS,
            simulation_probability=SIMULATION_PROBABILITY,
        )

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    async def _time_label_loop(self) -> None:
        while True:
            self.refresh_time_labels()
            await asyncio.sleep(self._config.time_refresh_interval)

    def start(self) -> None:
        """Start the simulator and time-label tasks, plus the poller once configured."""
        if self._tasks:
            raise TrainCrowdError("Dashboard already started")

        self.refresh()
        self._tasks.append(asyncio.create_task(self.simulator.run(), name="traincrowd-simulator"))
        self._tasks.append(asyncio.create_task(self._time_label_loop(), name="traincrowd-time-labels"))

        if not self.state.configured:
            _logger.warning("No device configured; live compartment will not update")
            return
        self._start_poller()

    def _start_poller(self) -> None:
        if self._transport is None:
            raise TrainCrowdError("Dashboard not initialized. Use 'async with CrowdDashboard(...) as dashboard:'")

        self.poller = TelemetryPoller(
            self.state,
            self._transport,
            interval=self._config.poll_interval,
            single_flight=self._config.single_flight,
            on_update=self.refresh,
            clock=self._clock,
        )
        self._poller_task = asyncio.create_task(self.poller.run(), name="traincrowd-poller")

    async def _stop_poller(self) -> None:
        task, self._poller_task = self._poller_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def stop(self) -> None:
        """Cancel all running tasks."""
        await self._stop_poller()
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

"""Weighted random telemetry for the simulated compartments.

Each update draws a crowd status from fixed cumulative weights and then
draws every sensor flag independently, with activation probabilities that
rise with the chosen severity. This correlates sensors with crowd level;
it is not sensor fusion.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable, Mapping
from datetime import UTC, datetime

from traincrowd._constants import SIMULATED_COMPARTMENTS, SIMULATED_SENSORS, SIMULATION_INTERVAL
from traincrowd.models._base import CrowdStatus
from traincrowd.models.compartment import CompartmentRecord
from traincrowd.state.app import AppState

_logger = logging.getLogger(__name__)

SIMULATION_PROBABILITY: dict[CrowdStatus, float] = {
    CrowdStatus.GREEN: 0.35,
    CrowdStatus.YELLOW: 0.50,
    CrowdStatus.RED: 0.15,
}

# Chance that each sensor reports a crowd, given the drawn status.
SENSOR_ACTIVATION: dict[CrowdStatus, dict[str, float]] = {
    CrowdStatus.GREEN: {"ir1": 0.20, "ir2": 0.10, "ultrasonic": 0.15},
    CrowdStatus.YELLOW: {"ir1": 0.60, "ir2": 0.40, "ultrasonic": 0.50},
    CrowdStatus.RED: {"ir1": 0.80, "ir2": 0.70, "ultrasonic": 0.80},
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


def status_for_draw(value: float, weights: Mapping[CrowdStatus, float] = SIMULATION_PROBABILITY) -> CrowdStatus:
    """Map a uniform draw in ``[0, 1)`` onto a status via cumulative weights.

    With the default weights: ``[0, 0.35)`` GREEN, ``[0.35, 0.85)`` YELLOW,
    ``[0.85, 1)`` RED.
    """
    cumulative = 0.0
    for status in CrowdStatus:
        # Rounded so 0.35 + 0.50 lands exactly on the 0.85 boundary.
        cumulative = round(cumulative + weights[status], 12)
        if value < cumulative:
            return status
    return CrowdStatus.RED


def expected_active(activation: Mapping[str, float]) -> float:
    return sum(activation.values())


def _validate_activation(activation: Mapping[CrowdStatus, Mapping[str, float]]) -> None:
    for status in CrowdStatus:
        probs = activation.get(status)
        if probs is None:
            raise ValueError(f"missing sensor activation for {status}")
        if set(probs) != set(SIMULATED_SENSORS):
            raise ValueError(f"{status} activation must cover {SIMULATED_SENSORS}, got {tuple(probs)}")
        for name, p in probs.items():
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"{status}.{name} probability {p} outside [0, 1]")

    green, yellow, red = (expected_active(activation[s]) for s in CrowdStatus)
    if not green < yellow < red:
        raise ValueError(
            f"expected active sensors must rise with severity, got GREEN={green} YELLOW={yellow} RED={red}"
        )


class CompartmentSimulator:
    """Fabricates records for the simulated compartments."""

    def __init__(
        self,
        state: AppState,
        *,
        rng: random.Random | None = None,
        interval: float = SIMULATION_INTERVAL,
        weights: Mapping[CrowdStatus, float] = SIMULATION_PROBABILITY,
        activation: Mapping[CrowdStatus, Mapping[str, float]] = SENSOR_ACTIVATION,
        on_update: Callable[[], None] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        total = sum(weights[s] for s in CrowdStatus)
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"status weights must sum to 1, got {total}")
        _validate_activation(activation)

        self._state = state
        self._rng = rng or random.Random()
        self._interval = interval
        self._weights = dict(weights)
        self._activation = {status: dict(probs) for status, probs in activation.items()}
        self._on_update = on_update
        self._clock = clock

    def draw_status(self) -> CrowdStatus:
        return status_for_draw(self._rng.random(), self._weights)

    def draw_sensors(self, status: CrowdStatus) -> dict[str, bool]:
        probs = self._activation[status]
        return {name: self._rng.random() < probs[name] for name in SIMULATED_SENSORS}

    def simulate_record(self, now: datetime | None = None) -> CompartmentRecord:
        status = self.draw_status()
        return CompartmentRecord(
            crowd_status=status.value,
            sensors=self.draw_sensors(status),
            last_updated=now or self._clock(),
            is_live=False,
        )

    def step(self) -> None:
        """Replace every simulated compartment, then trigger one re-render."""
        now = self._clock()
        for compartment_id in SIMULATED_COMPARTMENTS:
            record = self.simulate_record(now)
            self._state.records.replace(compartment_id, record)
            _logger.debug("Simulated %s: %s", compartment_id, record.crowd_status)

        if self._on_update is not None:
            self._on_update()

    async def run(self) -> None:
        """Update immediately, then every ``interval`` seconds until cancelled."""
        _logger.info("Started simulation for %s", ", ".join(SIMULATED_COMPARTMENTS))
        while True:
            self.step()
            await asyncio.sleep(self._interval)

"""Device telemetry wire model (``GET /api/status``)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from traincrowd._constants import DEFAULT_DEVICE_ID, DEVICE_SENSOR_MAP
from traincrowd.models._base import CrowdBaseModel, parse_epoch_millis


class DeviceSensors(CrowdBaseModel):
    """Per-detector crowd flags reported by the device.

    Absent or ``null`` flags default to ``False``; any other value is read
    by truthiness (``2`` and ``"yes"`` are active).
    """

    ir1_crowd: bool = False
    ir2_crowd: bool = False
    ir3_crowd: bool = False
    ultrasonic_crowd: bool = False

    @field_validator("ir1_crowd", "ir2_crowd", "ir3_crowd", "ultrasonic_crowd", mode="before")
    @classmethod
    def _flag_truthiness(cls, value: Any) -> bool:
        return bool(value)

    @property
    def active_count(self) -> int:
        """Number of detectors currently reporting a crowd."""
        return sum(bool(getattr(self, name)) for name in DEVICE_SENSOR_MAP)

    def to_flags(self) -> dict[str, bool]:
        """Map device flag names onto the live compartment's flag names."""
        return {flag: bool(getattr(self, name)) for name, flag in DEVICE_SENSOR_MAP.items()}


class DeviceTelemetry(CrowdBaseModel):
    """Status payload served by the crowd detector.

    Parameters
    ----------
    status : str or None
        Crowd status as reported (normally ``GREEN``/``YELLOW``/``RED``).
        Kept verbatim; validation happens at render time.
    timestamp : int or None
        Epoch milliseconds of the reading, if the device sent one.
    sensors : DeviceSensors
        Detector flags; all ``False`` when the field is absent.
    device_id : str or None
        Identifier of the reporting device.
    raw : dict
        Full payload dict.
    """

    status: str | None = None
    timestamp: int | None = None
    sensors: DeviceSensors = Field(default_factory=DeviceSensors)
    device_id: str | None = None

    @field_validator("status", "device_id", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("sensors", mode="before")
    @classmethod
    def _sensors_object(cls, value: Any) -> Any:
        if isinstance(value, dict | DeviceSensors):
            return value
        return {}

    @field_validator("timestamp", mode="before")
    @classmethod
    def _timestamp_as_int(cls, value: Any) -> Any:
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return None

    @property
    def reported_at(self) -> datetime | None:
        """Device timestamp as a UTC datetime, or ``None`` if absent/zero."""
        return parse_epoch_millis(self.timestamp)


def default_telemetry() -> DeviceTelemetry:
    """Last-known-value placeholder used before the first successful poll."""
    return DeviceTelemetry(status="GREEN", timestamp=0, device_id=DEFAULT_DEVICE_ID)

"""Compartment record model."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CompartmentRecord(BaseModel):
    """Current crowd picture for one compartment.

    Records are replaced wholesale on every update and never mutated.
    ``crowd_status`` is stored exactly as received so an unrecognized
    value survives until rendering, where it falls back to GREEN.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    crowd_status: str
    sensors: dict[str, bool] = Field(default_factory=dict)
    last_updated: datetime = Field(default_factory=_utcnow)
    is_live: bool = False

    @field_validator("last_updated")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def active_sensors(self) -> int:
        return sum(self.sensors.values())

    @property
    def source_label(self) -> str:
        return "(ESP32)" if self.is_live else "(Simulated)"

"""Base model and crowd-status enum.

Every wire model inherits from :class:`CrowdBaseModel` which provides:

* A ``model_validator(mode="before")`` that drops ``null`` values so the
  field default is used instead.
* A ``raw`` dict that captures the original payload.

:class:`CrowdStatus` is a closed enumeration. :data:`CROWD_LEVELS` maps
every member to its display metadata, and :func:`normalize_status` is the
single place where an unrecognized status string falls back to GREEN.
"""

from __future__ import annotations

import enum
import logging
import math
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

_logger = logging.getLogger(__name__)


def parse_epoch_millis(value: Any) -> datetime | None:
    """Convert an epoch timestamp in milliseconds to a UTC datetime.

    Returns ``None`` for ``None``, zero, non-numeric, non-finite or
    out-of-range values so callers can fall back to the current time.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    try:
        ms = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(ms) or ms <= 0:
        return None
    try:
        return datetime.fromtimestamp(ms / 1000.0, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


class CrowdStatus(enum.StrEnum):
    """Ordinal crowd severity reported for a compartment."""

    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"

    @classmethod
    def _missing_(cls, value: object) -> CrowdStatus | None:
        if isinstance(value, str):
            key = value.strip().upper()
            for member in cls:
                if member.value == key:
                    return member
        return None

    @property
    def level(self) -> str:
        """Lowercase key used for styling (``"green"``, ``"yellow"``, ``"red"``)."""
        return self.value.lower()


class CrowdLevelInfo(BaseModel):
    """Display metadata for one crowd status."""

    model_config = ConfigDict(frozen=True)

    css_class: str
    text: str
    description: str


CROWD_LEVELS: dict[CrowdStatus, CrowdLevelInfo] = {
    CrowdStatus.GREEN: CrowdLevelInfo(
        css_class="green",
        text="LOW CROWD",
        description="Comfortable seating available",
    ),
    CrowdStatus.YELLOW: CrowdLevelInfo(
        css_class="yellow",
        text="MODERATE CROWD",
        description="Limited seating available",
    ),
    CrowdStatus.RED: CrowdLevelInfo(
        css_class="red",
        text="HIGH CROWD",
        description="Standing room only",
    ),
}


def normalize_status(raw: Any) -> CrowdStatus:
    """Map a raw status value to a :class:`CrowdStatus`.

    Matching is case-insensitive and ignores surrounding whitespace.
    Anything else (``None``, empty, unknown strings, non-strings) falls
    back to :attr:`CrowdStatus.GREEN`.
    """
    if isinstance(raw, CrowdStatus):
        return raw
    if isinstance(raw, str):
        try:
            return CrowdStatus(raw)
        except ValueError:
            pass
    _logger.debug("Unrecognized crowd status %r, falling back to GREEN", raw)
    return CrowdStatus.GREEN


def get_crowd_level(raw: Any) -> str:
    """Return the lowercase styling key for a raw status value."""
    return normalize_status(raw).level


def get_crowd_info(raw: Any) -> CrowdLevelInfo:
    """Return display metadata for a raw status value."""
    return CROWD_LEVELS[normalize_status(raw)]


class CrowdBaseModel(BaseModel):
    """Base for models parsed from device payloads.

    Handles:
    * ``null`` values → dropped so the field default is used instead
    * Stashes the original payload dict in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original payload dict."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        """Strip ``null`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = {key: value for key, value in original.items() if value is not None}
        # Only auto-stash raw when parsing a payload; keep an explicit raw= kwarg.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned

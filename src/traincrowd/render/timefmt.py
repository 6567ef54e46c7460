"""Relative time labels."""

from __future__ import annotations

import math
from datetime import UTC, datetime


def format_time_ago(then: datetime, now: datetime | None = None) -> str:
    """Describe how long ago *then* was, e.g. ``"5 sec ago"`` or ``"2 hours ago"``.

    Naive datetimes are taken as UTC. Timestamps in the future read as
    ``"0 sec ago"``.
    """
    if then.tzinfo is None:
        then = then.replace(tzinfo=UTC)
    current = now or datetime.now(UTC)
    if current.tzinfo is None:
        current = current.replace(tzinfo=UTC)

    seconds = max(0, math.floor((current - then).total_seconds()))
    if seconds < 60:
        return f"{seconds} sec ago"
    if seconds < 3600:
        return f"{seconds // 60} min ago"
    hours = seconds // 3600
    return f"{hours} hour{'s' if hours > 1 else ''} ago"

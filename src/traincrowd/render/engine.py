"""Projection of compartment records onto the display surface.

Rendering is stateless: every call rewrites the card's class, label and
sensor indicators from the record alone, so rendering the same record
twice yields the same surface.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime

from traincrowd._constants import compartment_number
from traincrowd.exceptions import RenderLookupError
from traincrowd.models._base import CROWD_LEVELS, normalize_status
from traincrowd.models.compartment import CompartmentRecord
from traincrowd.render.surface import DisplaySurface, Element
from traincrowd.render.timefmt import format_time_ago

_logger = logging.getLogger(__name__)


def _card_elements(surface: DisplaySurface, compartment_id: str) -> tuple[Element, Element]:
    level_id = f"level{compartment_number(compartment_id)}"
    card = surface.get_element_by_id(compartment_id)
    if card is None:
        raise RenderLookupError(compartment_id, compartment_id)
    level = surface.get_element_by_id(level_id)
    if level is None:
        raise RenderLookupError(compartment_id, level_id)
    return card, level


def sensor_title(flag: str, active: bool) -> str:
    state = "detecting crowd" if active else "clear"
    return f"{flag.upper()} sensor {state}"


def update_sensor_indicators(surface: DisplaySurface, compartment_id: str, sensors: Mapping[str, bool]) -> None:
    """Toggle the ``active`` class and tooltip of each indicator.

    Indicators missing from the surface are skipped.
    """
    n = compartment_number(compartment_id)
    for flag, active in sensors.items():
        indicator = surface.get_element_by_id(f"sensor{n}-{flag}")
        if indicator is None:
            continue
        if active:
            indicator.add_class("active")
        else:
            indicator.remove_class("active")
        indicator.title = sensor_title(flag, bool(active))


def render_compartment(surface: DisplaySurface, compartment_id: str, record: CompartmentRecord) -> bool:
    """Render one compartment card. Returns ``False`` if its elements are missing."""
    try:
        card, level = _card_elements(surface, compartment_id)
    except RenderLookupError as exc:
        _logger.error("%s", exc)
        return False

    info = CROWD_LEVELS[normalize_status(record.crowd_status)]
    card.class_name = f"compartment-card {info.css_class}"
    level.text = info.text
    level.title = info.description
    update_sensor_indicators(surface, compartment_id, record.sensors)

    _logger.debug("Updated %s: %s %s", compartment_id, record.crowd_status, record.source_label)
    return True


def render_dashboard(surface: DisplaySurface, records: Mapping[str, CompartmentRecord]) -> int:
    """Render every compartment; returns how many cards were drawn."""
    return sum(render_compartment(surface, cid, record) for cid, record in records.items())


def refresh_time_labels(
    surface: DisplaySurface,
    records: Mapping[str, CompartmentRecord],
    now: datetime | None = None,
) -> None:
    """Rewrite each ``time<N>`` label from its record's ``last_updated``."""
    for compartment_id, record in records.items():
        element = surface.get_element_by_id(f"time{compartment_number(compartment_id)}")
        if element is not None:
            element.text = format_time_ago(record.last_updated, now)

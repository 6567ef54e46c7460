"""Render layer: display surface, record projection and time labels."""

from traincrowd.render.engine import (
    refresh_time_labels,
    render_compartment,
    render_dashboard,
    update_sensor_indicators,
)
from traincrowd.render.surface import DisplaySurface, Element, build_dashboard_surface
from traincrowd.render.timefmt import format_time_ago

__all__ = [
    "DisplaySurface",
    "Element",
    "build_dashboard_surface",
    "format_time_ago",
    "refresh_time_labels",
    "render_compartment",
    "render_dashboard",
    "update_sensor_indicators",
]

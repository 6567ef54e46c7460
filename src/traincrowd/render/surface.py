"""DOM-like display surface.

Elements are addressed by id the same way a browser page is:

* ``compartment<N>``: the card container
* ``level<N>``: the crowd label inside the card
* ``time<N>``: the "updated N sec ago" label
* ``sensor<N>-<flag>``: one indicator per sensor flag

The surface holds only what was last written to it. It is rendered to a
standalone HTML page for the browser through a Jinja template with
autoescaping on.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field

import jinja2

from traincrowd._constants import (
    LIVE_COMPARTMENT,
    LIVE_SENSORS,
    SIMULATED_COMPARTMENTS,
    SIMULATED_SENSORS,
    compartment_number,
)

DEFAULT_SENSOR_LAYOUT: dict[str, tuple[str, ...]] = {
    LIVE_COMPARTMENT: LIVE_SENSORS,
    **{cid: SIMULATED_SENSORS for cid in SIMULATED_COMPARTMENTS},
}

_SENSOR_LABELS = {"ir1": "IR 1", "ir2": "IR 2", "ir3": "IR 3", "ultrasonic": "Ultrasonic"}

_STYLE = """
body { font-family: system-ui, sans-serif; background: #f4f6f8; margin: 0; padding: 24px; }
h1 { font-size: 22px; margin: 0 0 16px; }
.compartments { display: flex; gap: 16px; flex-wrap: wrap; }
.compartment-card { border-radius: 12px; padding: 16px; min-width: 220px; color: #fff;
  box-shadow: 0 4px 12px rgba(0,0,0,0.08); }
.compartment-card.green { background: #2e7d32; }
.compartment-card.yellow { background: #f9a825; color: #222; }
.compartment-card.red { background: #c62828; }
.card-title { font-weight: 700; font-size: 18px; }
.crowd-level { font-size: 24px; margin: 12px 0; font-weight: 700; }
.sensors { display: flex; gap: 6px; flex-wrap: wrap; }
.sensor { border: 1px solid rgba(255,255,255,0.6); border-radius: 6px; padding: 2px 8px; font-size: 12px;
  opacity: 0.55; }
.sensor.active { opacity: 1; background: rgba(0,0,0,0.25); font-weight: 700; }
.updated { margin-top: 10px; font-size: 12px; opacity: 0.85; }
"""

TEMPLATE = r"""
{%- macro element(el) -%}
<{{ el.tag }}{% if el.id %} id="{{ el.id }}"{% endif %}{% if el.classes %} class="{{ el.class_name }}"{% endif %}
{%- if el.title %} title="{{ el.title }}"{% endif %}>{{ el.text }}
{%- for child in el.children %}{{ element(child) }}{% endfor %}</{{ el.tag }}>
{%- endmacro -%}
<!DOCTYPE html>
<html><head><meta charset="utf-8"><title>{{ title }}</title><style>{{ style | safe }}</style>
{%- if refresh %}<meta http-equiv="refresh" content="{{ refresh }}">{% endif %}</head>
<body><h1>{{ title }}</h1>{{ element(root) }}</body></html>
"""

_ENV = jinja2.Environment(autoescape=True)
_PAGE = _ENV.from_string(TEMPLATE)


@dataclass
class Element:
    """A single addressable node."""

    id: str
    tag: str = "div"
    classes: list[str] = field(default_factory=list)
    text: str = ""
    title: str = ""
    children: list[Element] = field(default_factory=list)

    @property
    def class_name(self) -> str:
        return " ".join(self.classes)

    @class_name.setter
    def class_name(self, value: str) -> None:
        self.classes = []
        for name in value.split():
            if name not in self.classes:
                self.classes.append(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def add_class(self, name: str) -> None:
        if name not in self.classes:
            self.classes.append(name)

    def remove_class(self, name: str) -> None:
        if name in self.classes:
            self.classes.remove(name)

    def walk(self) -> Iterator[Element]:
        yield self
        for child in self.children:
            yield from child.walk()

    def to_html(self) -> str:
        return str(_PAGE.module.element(self))


class DisplaySurface:
    """Element tree with an id index, like a minimal document."""

    def __init__(self, title: str = "Train Crowd Monitor") -> None:
        self.title = title
        self.root = Element(id="", classes=["compartments"])
        self._index: dict[str, Element] = {}

    def append(self, element: Element, parent: Element | None = None) -> Element:
        """Attach *element* (and its subtree) under *parent* or the root."""
        for node in element.walk():
            if node.id:
                if node.id in self._index:
                    raise ValueError(f"duplicate element id {node.id!r}")
                self._index[node.id] = node
        (parent or self.root).children.append(element)
        return element

    def get_element_by_id(self, element_id: str) -> Element | None:
        return self._index.get(element_id)

    def remove(self, element_id: str) -> None:
        """Detach an element and its subtree; unknown ids are ignored."""
        target = self._index.get(element_id)
        if target is None:
            return
        for node in target.walk():
            self._index.pop(node.id, None)
        for parent in self.root.walk():
            for i, child in enumerate(parent.children):
                if child is target:
                    del parent.children[i]
                    return

    def to_html(self, *, refresh_seconds: float | None = None) -> str:
        refresh = max(1, int(refresh_seconds)) if refresh_seconds else None
        return _PAGE.render(title=self.title, style=_STYLE, refresh=refresh, root=self.root)


def build_compartment_card(compartment_id: str, sensors: Sequence[str]) -> Element:
    n = compartment_number(compartment_id)
    indicators = [
        Element(id=f"sensor{n}-{flag}", tag="span", classes=["sensor"], text=_SENSOR_LABELS.get(flag, flag))
        for flag in sensors
    ]
    return Element(
        id=compartment_id,
        classes=["compartment-card"],
        children=[
            Element(id="", classes=["card-title"], text=f"Compartment {n}"),
            Element(id=f"level{n}", classes=["crowd-level"]),
            Element(id="", classes=["sensors"], children=indicators),
            Element(id=f"time{n}", classes=["updated"]),
        ],
    )


def build_dashboard_surface(
    sensor_layout: Mapping[str, Sequence[str]] = DEFAULT_SENSOR_LAYOUT,
    *,
    title: str = "Train Crowd Monitor",
) -> DisplaySurface:
    """Create a surface with one card per compartment in *sensor_layout*."""
    surface = DisplaySurface(title)
    for compartment_id, sensors in sensor_layout.items():
        surface.append(build_compartment_card(compartment_id, sensors))
    return surface

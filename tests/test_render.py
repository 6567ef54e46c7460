"""Tests for the render engine, display surface and relative time labels."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import pytest

from traincrowd.models import CompartmentRecord
from traincrowd.render import (
    build_dashboard_surface,
    format_time_ago,
    refresh_time_labels,
    render_compartment,
    render_dashboard,
)
from traincrowd.render.surface import Element, build_compartment_card
from traincrowd.state import initial_records

NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


def _live(status: str, **sensors: bool) -> CompartmentRecord:
    flags = {"ir1": False, "ir2": False, "ir3": False, "ultrasonic": False}
    flags.update(sensors)
    return CompartmentRecord(crowd_status=status, sensors=flags, last_updated=NOW, is_live=True)


# ------------------------------------------------------------------
# Status label and styling
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    ("status", "css", "label"),
    [
        ("GREEN", "green", "LOW CROWD"),
        ("YELLOW", "yellow", "MODERATE CROWD"),
        ("RED", "red", "HIGH CROWD"),
        ("red", "red", "HIGH CROWD"),
        ("PURPLE", "green", "LOW CROWD"),
        ("", "green", "LOW CROWD"),
    ],
)
def test_status_label_and_class(status: str, css: str, label: str) -> None:
    surface = build_dashboard_surface()

    assert render_compartment(surface, "compartment1", _live(status)) is True

    card = surface.get_element_by_id("compartment1")
    level = surface.get_element_by_id("level1")
    assert card is not None and level is not None
    assert card.class_name == f"compartment-card {css}"
    assert level.text == label


def test_rerender_replaces_previous_status_class() -> None:
    surface = build_dashboard_surface()
    render_compartment(surface, "compartment1", _live("RED"))
    render_compartment(surface, "compartment1", _live("YELLOW"))

    card = surface.get_element_by_id("compartment1")
    assert card is not None
    assert card.classes == ["compartment-card", "yellow"]


# ------------------------------------------------------------------
# Sensor indicators
# ------------------------------------------------------------------


def test_sensor_indicators_follow_flags() -> None:
    surface = build_dashboard_surface()
    render_compartment(surface, "compartment1", _live("RED", ir1=True, ultrasonic=True))

    ir1 = surface.get_element_by_id("sensor1-ir1")
    ir3 = surface.get_element_by_id("sensor1-ir3")
    ultrasonic = surface.get_element_by_id("sensor1-ultrasonic")
    assert ir1 is not None and ir3 is not None and ultrasonic is not None
    assert ir1.has_class("active")
    assert ir1.title == "IR1 sensor detecting crowd"
    assert ultrasonic.has_class("active")
    assert ultrasonic.title == "ULTRASONIC sensor detecting crowd"
    assert not ir3.has_class("active")
    assert ir3.title == "IR3 sensor clear"


def test_sensor_indicator_cleared_on_next_render() -> None:
    surface = build_dashboard_surface()
    render_compartment(surface, "compartment1", _live("RED", ir2=True))
    render_compartment(surface, "compartment1", _live("GREEN"))

    ir2 = surface.get_element_by_id("sensor1-ir2")
    assert ir2 is not None
    assert not ir2.has_class("active")
    assert ir2.title == "IR2 sensor clear"


def test_simulated_cards_have_three_indicators() -> None:
    surface = build_dashboard_surface()

    assert surface.get_element_by_id("sensor2-ir1") is not None
    assert surface.get_element_by_id("sensor2-ultrasonic") is not None
    assert surface.get_element_by_id("sensor2-ir3") is None
    assert surface.get_element_by_id("sensor1-ir3") is not None


def test_missing_indicator_is_skipped() -> None:
    surface = build_dashboard_surface()
    surface.remove("sensor1-ir2")

    assert render_compartment(surface, "compartment1", _live("RED", ir2=True)) is True


# ------------------------------------------------------------------
# Missing elements and full passes
# ------------------------------------------------------------------


def test_missing_card_logged_and_skipped(caplog: pytest.LogCaptureFixture) -> None:
    surface = build_dashboard_surface()
    surface.remove("compartment2")

    with caplog.at_level(logging.ERROR, logger="traincrowd.render.engine"):
        rendered = render_dashboard(surface, initial_records(NOW))

    assert rendered == 2
    assert "Elements not found for compartment2" in caplog.text
    card3 = surface.get_element_by_id("compartment3")
    assert card3 is not None and card3.class_name == "compartment-card yellow"


def test_missing_level_element_skips_card() -> None:
    surface = build_dashboard_surface()
    surface.remove("level1")

    assert render_compartment(surface, "compartment1", _live("RED")) is False
    card = surface.get_element_by_id("compartment1")
    assert card is not None and card.class_name == "compartment-card"


def test_render_is_idempotent() -> None:
    surface = build_dashboard_surface()
    records = initial_records(NOW)

    render_dashboard(surface, records)
    first = surface.to_html()
    render_dashboard(surface, records)

    assert surface.to_html() == first


def test_html_contains_rendered_state() -> None:
    surface = build_dashboard_surface()
    render_compartment(surface, "compartment1", _live("RED", ir1=True))

    page = surface.to_html(refresh_seconds=2)
    assert 'id="compartment1" class="compartment-card red"' in page
    assert "HIGH CROWD" in page
    assert 'class="sensor active" title="IR1 sensor detecting crowd"' in page
    assert 'http-equiv="refresh" content="2"' in page


def test_duplicate_ids_rejected() -> None:
    surface = build_dashboard_surface()
    with pytest.raises(ValueError, match="duplicate"):
        surface.append(build_compartment_card("compartment1", ("ir1",)))


# ------------------------------------------------------------------
# Time labels
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "0 sec ago"),
        (5, "5 sec ago"),
        (59, "59 sec ago"),
        (60, "1 min ago"),
        (90, "1 min ago"),
        (3599, "59 min ago"),
        (3600, "1 hour ago"),
        (7200, "2 hours ago"),
    ],
)
def test_format_time_ago(seconds: int, expected: str) -> None:
    assert format_time_ago(NOW - timedelta(seconds=seconds), NOW) == expected


def test_format_time_ago_future_and_naive() -> None:
    assert format_time_ago(NOW + timedelta(seconds=30), NOW) == "0 sec ago"
    assert format_time_ago(datetime(2026, 1, 1, 11, 59, 55), NOW) == "5 sec ago"


def test_refresh_time_labels() -> None:
    surface = build_dashboard_surface()
    records = initial_records(NOW - timedelta(seconds=90))

    refresh_time_labels(surface, records, NOW)

    for n in (1, 2, 3):
        label = surface.get_element_by_id(f"time{n}")
        assert label is not None and label.text == "1 min ago"


# ------------------------------------------------------------------
# HTML output
# ------------------------------------------------------------------


def test_element_markup() -> None:
    element = Element(id="level1", classes=["crowd-level"], text="HIGH CROWD", title="Standing room only")

    assert element.to_html() == '<div id="level1" class="crowd-level" title="Standing room only">HIGH CROWD</div>'
    assert Element(id="", tag="span").to_html() == "<span></span>"


def test_text_and_attributes_are_escaped() -> None:
    surface = build_dashboard_surface(title="<b>Line & 5</b>")
    level = surface.get_element_by_id("level1")
    assert level is not None
    level.text = "<script>alert(1)</script>"
    level.title = 'say "hi"'

    page = surface.to_html()

    assert "<script>alert(1)</script>" not in page
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in page
    assert "&lt;b&gt;Line &amp; 5&lt;/b&gt;" in page
    assert 'title="say &#34;hi&#34;"' in page
    assert "http-equiv" not in page
    assert page.startswith("<!DOCTYPE html>")

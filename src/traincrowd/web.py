"""Browser surface for the dashboard.

Serves the rendered display surface as an auto-refreshing HTML page and a
JSON snapshot of the record table.
"""

from __future__ import annotations

import logging
from typing import Any

from aiohttp import web

from traincrowd.dashboard import CrowdDashboard
from traincrowd.models._base import normalize_status
from traincrowd.models.compartment import CompartmentRecord

_logger = logging.getLogger(__name__)

DASHBOARD_KEY = web.AppKey("dashboard", CrowdDashboard)


def _record_json(record: CompartmentRecord) -> dict[str, Any]:
    data = record.model_dump(mode="json")
    data["display_status"] = normalize_status(record.crowd_status).value
    data["active_sensors"] = record.active_sensors
    data["source"] = record.source_label
    return data


async def index(request: web.Request) -> web.Response:
    dashboard = request.app[DASHBOARD_KEY]
    return web.Response(text=dashboard.render_html(), content_type="text/html")


async def compartments(request: web.Request) -> web.Response:
    dashboard = request.app[DASHBOARD_KEY]
    state = dashboard.state
    return web.json_response(
        {
            "connected": state.connected,
            "device_address": state.device_address,
            "target_url": state.target_url,
            "device_id": state.last_telemetry.device_id,
            "last_sync": state.last_sync.isoformat() if state.last_sync else None,
            "compartments": {cid: _record_json(record) for cid, record in state.records.items()},
        }
    )


async def reset(request: web.Request) -> web.Response:
    dashboard = request.app[DASHBOARD_KEY]
    await dashboard.forget_address()
    _logger.info("Stored address cleared via HTTP; restart the dashboard to enter a new one")
    return web.json_response({"reset": True, "restart_required": True})


def create_app(dashboard: CrowdDashboard) -> web.Application:
    app = web.Application()
    app[DASHBOARD_KEY] = dashboard
    app.router.add_get("/", index)
    app.router.add_get("/api/compartments", compartments)
    app.router.add_post("/api/reset", reset)
    return app

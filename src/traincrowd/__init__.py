"""traincrowd - Crowd-level dashboard for an ESP32 detector plus simulated compartments."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("traincrowd")
except PackageNotFoundError:
    __version__ = "0+local"
from traincrowd._constants import CROWD_THRESHOLDS
from traincrowd.config import MonitorConfig
from traincrowd.dashboard import CrowdDashboard, MonitorHandle
from traincrowd.exceptions import (
    ConfigurationError,
    DeviceTransportError,
    RenderLookupError,
    StorageError,
    TrainCrowdError,
)
from traincrowd.models import (
    CROWD_LEVELS,
    CompartmentRecord,
    CrowdLevelInfo,
    CrowdStatus,
    DeviceSensors,
    DeviceTelemetry,
    get_crowd_level,
    normalize_status,
)
from traincrowd.poller import TelemetryPoller, map_telemetry
from traincrowd.render import DisplaySurface, build_dashboard_surface, format_time_ago, render_compartment
from traincrowd.simulator import SIMULATION_PROBABILITY, CompartmentSimulator
from traincrowd.state import AppState, RecordTable, update_connection_status

__all__ = [
    "__version__",
    "AppState",
    "CROWD_LEVELS",
    "CROWD_THRESHOLDS",
    "CompartmentRecord",
    "CompartmentSimulator",
    "ConfigurationError",
    "CrowdDashboard",
    "CrowdLevelInfo",
    "CrowdStatus",
    "DeviceSensors",
    "DeviceTelemetry",
    "DeviceTransportError",
    "DisplaySurface",
    "MonitorConfig",
    "MonitorHandle",
    "RecordTable",
    "RenderLookupError",
    "SIMULATION_PROBABILITY",
    "StorageError",
    "TelemetryPoller",
    "TrainCrowdError",
    "build_dashboard_surface",
    "format_time_ago",
    "get_crowd_level",
    "map_telemetry",
    "normalize_status",
    "render_compartment",
    "update_connection_status",
]

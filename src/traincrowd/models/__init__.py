"""Data models for crowd telemetry."""

from traincrowd.models._base import (
    CROWD_LEVELS,
    CrowdBaseModel,
    CrowdLevelInfo,
    CrowdStatus,
    get_crowd_info,
    get_crowd_level,
    normalize_status,
    parse_epoch_millis,
)
from traincrowd.models.compartment import CompartmentRecord
from traincrowd.models.telemetry import DeviceSensors, DeviceTelemetry, default_telemetry

__all__ = [
    "CROWD_LEVELS",
    "CompartmentRecord",
    "CrowdBaseModel",
    "CrowdLevelInfo",
    "CrowdStatus",
    "DeviceSensors",
    "DeviceTelemetry",
    "default_telemetry",
    "get_crowd_info",
    "get_crowd_level",
    "normalize_status",
    "parse_epoch_millis",
]

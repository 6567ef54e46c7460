"""Internal constants shared across the library."""

USER_AGENT = "traincrowd/1.0"
STATUS_PATH = "/api/status"
DEFAULT_ADDRESS = "192.168.1.100"
DEFAULT_DEVICE_ID = "ESP32_CrowdDetector_001"
STORAGE_KEY = "esp32_ip"

# ------------------------------------------------------------------
# Timers (seconds)
# ------------------------------------------------------------------

POLL_INTERVAL = 2.0
SIMULATION_INTERVAL = 10.0
TIME_REFRESH_INTERVAL = 30.0

# ------------------------------------------------------------------
# Compartments and their sensor flags
# ------------------------------------------------------------------

LIVE_COMPARTMENT = "compartment1"
SIMULATED_COMPARTMENTS: tuple[str, ...] = ("compartment2", "compartment3")
COMPARTMENT_IDS: tuple[str, ...] = (LIVE_COMPARTMENT, *SIMULATED_COMPARTMENTS)

LIVE_SENSORS: tuple[str, ...] = ("ir1", "ir2", "ir3", "ultrasonic")
SIMULATED_SENSORS: tuple[str, ...] = ("ir1", "ir2", "ultrasonic")

# Device flag name -> record flag name, in positional order.
DEVICE_SENSOR_MAP: dict[str, str] = {
    "ir1_crowd": "ir1",
    "ir2_crowd": "ir2",
    "ir3_crowd": "ir3",
    "ultrasonic_crowd": "ultrasonic",
}

# Passenger-count bands kept for external inspection; nothing derives status from them.
CROWD_THRESHOLDS: dict[str, int] = {"LOW": 30, "MODERATE": 45}


def compartment_number(compartment_id: str) -> str:
    """Return the numeric suffix of a ``compartment<N>`` identifier."""
    return compartment_id.removeprefix("compartment")

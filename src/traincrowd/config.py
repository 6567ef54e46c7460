"""Dashboard configuration for traincrowd."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from traincrowd._constants import POLL_INTERVAL, SIMULATION_INTERVAL, TIME_REFRESH_INTERVAL


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def default_storage_path() -> Path:
    return Path.home() / ".traincrowd" / "storage.json"


@dataclasses.dataclass(frozen=True)
class MonitorConfig:
    """Dashboard configuration.

    Parameters
    ----------
    address : str or None
        Device network address. When ``None`` the user is prompted at
        startup; when set the prompt is skipped.
    poll_interval : float
        Seconds between live polls of the device endpoint.
    simulation_interval : float
        Seconds between simulated compartment updates.
    time_refresh_interval : float
        Seconds between refreshes of the "N sec ago" labels.
    request_timeout : float
        Total timeout for a single device request, in seconds.
    single_flight : bool
        Skip a poll tick while the previous request is still outstanding.
        When ``False`` every tick fires a request and completions may
        overwrite each other in any order.
    storage_path : Path
        JSON file backing the durable key-value storage.
    http_host : str
        Interface the browser dashboard binds to.
    http_port : int
        Port the browser dashboard listens on.
    seed : int or None
        Seed for the simulator's random generator. ``None`` seeds from
        system entropy.
    """

    address: str | None = None
    poll_interval: float = POLL_INTERVAL
    simulation_interval: float = SIMULATION_INTERVAL
    time_refresh_interval: float = TIME_REFRESH_INTERVAL
    request_timeout: float = 5.0
    single_flight: bool = True
    storage_path: Path = dataclasses.field(default_factory=default_storage_path)
    http_host: str = "127.0.0.1"
    http_port: int = 8080
    seed: int | None = None

    @classmethod
    def from_env(cls, **overrides: Any) -> MonitorConfig:
        """Create configuration from environment variables.

        Reads optional ``TRAINCROWD_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        MonitorConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        address = env.get("TRAINCROWD_ADDRESS")
        if address is not None and address.strip():
            config_kwargs["address"] = address.strip()

        _ENV_FLOAT_MAP = {
            "TRAINCROWD_POLL_INTERVAL": "poll_interval",
            "TRAINCROWD_SIMULATION_INTERVAL": "simulation_interval",
            "TRAINCROWD_TIME_REFRESH_INTERVAL": "time_refresh_interval",
            "TRAINCROWD_REQUEST_TIMEOUT": "request_timeout",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = float(val)

        storage_env = env.get("TRAINCROWD_STORAGE_PATH")
        if storage_env:
            config_kwargs["storage_path"] = Path(storage_env).expanduser()

        host_env = env.get("TRAINCROWD_HTTP_HOST")
        if host_env:
            config_kwargs["http_host"] = host_env

        port_env = env.get("TRAINCROWD_HTTP_PORT")
        if port_env is not None and "http_port" not in overrides:
            config_kwargs["http_port"] = int(port_env)

        seed_env = env.get("TRAINCROWD_SEED")
        if seed_env is not None and "seed" not in overrides:
            config_kwargs["seed"] = int(seed_env)

        if "single_flight" not in overrides:
            config_kwargs["single_flight"] = _env_bool(env.get("TRAINCROWD_SINGLE_FLIGHT"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

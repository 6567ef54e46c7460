from __future__ import annotations

from pathlib import Path

from traincrowd.config import MonitorConfig


def test_defaults() -> None:
    config = MonitorConfig()

    assert config.address is None
    assert config.poll_interval == 2.0
    assert config.simulation_interval == 10.0
    assert config.time_refresh_interval == 30.0
    assert config.single_flight is True
    assert config.storage_path.name == "storage.json"


def test_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TRAINCROWD_ADDRESS", " 10.0.0.5 ")
    monkeypatch.setenv("TRAINCROWD_POLL_INTERVAL", "0.5")
    monkeypatch.setenv("TRAINCROWD_HTTP_PORT", "9000")
    monkeypatch.setenv("TRAINCROWD_SEED", "7")
    monkeypatch.setenv("TRAINCROWD_SINGLE_FLIGHT", "off")
    monkeypatch.setenv("TRAINCROWD_STORAGE_PATH", str(tmp_path / "s.json"))

    config = MonitorConfig.from_env()

    assert config.address == "10.0.0.5"
    assert config.poll_interval == 0.5
    assert config.http_port == 9000
    assert config.seed == 7
    assert config.single_flight is False
    assert config.storage_path == tmp_path / "s.json"


def test_overrides_win_over_env(monkeypatch) -> None:
    monkeypatch.setenv("TRAINCROWD_POLL_INTERVAL", "0.5")
    monkeypatch.setenv("TRAINCROWD_ADDRESS", "10.0.0.5")

    config = MonitorConfig.from_env(poll_interval=3.0, address="10.0.0.9")

    assert config.poll_interval == 3.0
    assert config.address == "10.0.0.9"


def test_blank_address_env_ignored(monkeypatch) -> None:
    monkeypatch.setenv("TRAINCROWD_ADDRESS", "   ")
    monkeypatch.delenv("TRAINCROWD_SINGLE_FLIGHT", raising=False)

    config = MonitorConfig.from_env()

    assert config.address is None
    assert config.single_flight is True

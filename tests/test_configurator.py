from __future__ import annotations

from pathlib import Path

import pytest

from traincrowd.configurator import (
    PROMPT_TEXT,
    build_status_url,
    configure_connection,
    reset_address,
)
from traincrowd.exceptions import ConfigurationError, StorageError
from traincrowd.state import AppState
from traincrowd.storage import LocalStorage, MemoryStorage


def test_build_status_url() -> None:
    assert build_status_url("10.0.0.5") == "http://10.0.0.5/api/status"


def test_prompt_answer_configures_state_and_persists() -> None:
    state = AppState()
    storage = MemoryStorage()
    prompts: list[str] = []

    def prompt(text: str) -> str:
        prompts.append(text)
        return "  10.0.0.5  "

    url = configure_connection(state, storage, prompt=prompt)

    assert url == "http://10.0.0.5/api/status"
    assert state.device_address == "10.0.0.5"
    assert state.target_url == url
    assert storage.get_item("esp32_ip") == "10.0.0.5"
    assert prompts == [PROMPT_TEXT]
    assert "192.168.1.100" in PROMPT_TEXT


def test_stored_address_is_not_reused_automatically() -> None:
    state = AppState()
    storage = MemoryStorage({"esp32_ip": "192.168.1.50"})
    calls: list[str] = []

    def prompt(text: str) -> str:
        calls.append(text)
        return "10.0.0.9"

    configure_connection(state, storage, prompt=prompt)

    assert len(calls) == 1
    assert state.device_address == "10.0.0.9"


@pytest.mark.parametrize("answer", ["", "   "])
def test_blank_answer_is_configuration_error(answer: str) -> None:
    state = AppState()
    storage = MemoryStorage()
    notices: list[str] = []

    with pytest.raises(ConfigurationError):
        configure_connection(state, storage, prompt=lambda _: answer, notify=notices.append)

    assert state.configured is False
    assert storage.items == {}
    assert len(notices) == 1
    assert "No IP address entered" in notices[0]


def test_cancelled_prompt_is_configuration_error() -> None:
    def cancelled(_: str) -> str:
        raise EOFError

    notices: list[str] = []
    with pytest.raises(ConfigurationError):
        configure_connection(AppState(), MemoryStorage(), prompt=cancelled, notify=notices.append)
    assert notices


def test_reset_address_clears_key() -> None:
    storage = MemoryStorage({"esp32_ip": "10.0.0.5", "other": "x"})

    reset_address(storage)

    assert storage.items == {"other": "x"}


# ------------------------------------------------------------------
# LocalStorage
# ------------------------------------------------------------------


def test_local_storage_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    storage = LocalStorage(path)

    assert storage.get_item("esp32_ip") is None
    storage.set_item("esp32_ip", "10.0.0.5")

    assert path.exists()
    assert LocalStorage(path).get_item("esp32_ip") == "10.0.0.5"

    storage.remove_item("esp32_ip")
    assert LocalStorage(path).get_item("esp32_ip") is None


def test_local_storage_rejects_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[1, 2", encoding="utf-8")

    with pytest.raises(StorageError):
        LocalStorage(path).get_item("esp32_ip")


def test_persist_failure_does_not_block_configuration(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("not json", encoding="utf-8")
    state = AppState()

    url = configure_connection(state, LocalStorage(path), prompt=lambda _: "10.0.0.5")

    assert url == "http://10.0.0.5/api/status"

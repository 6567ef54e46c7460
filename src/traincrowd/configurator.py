"""Device address prompt and polling target construction."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable

from traincrowd._constants import DEFAULT_ADDRESS, STATUS_PATH, STORAGE_KEY
from traincrowd.exceptions import ConfigurationError, StorageError
from traincrowd.state.app import AppState
from traincrowd.storage import KeyValueStorage

_logger = logging.getLogger(__name__)

PROMPT_TEXT = (
    "Enter ESP32 IP Address\n"
    "(Check the Arduino Serial Monitor for an IP like: 192.168.43.105)\n"
    f"Example: {DEFAULT_ADDRESS}\n"
    "> "
)
MISSING_ADDRESS_TEXT = "No IP address entered!\nPlease restart the dashboard and enter your ESP32 IP address."


def build_status_url(address: str) -> str:
    """Return the status endpoint URL for a device address."""
    return f"http://{address}{STATUS_PATH}"


def blocking_notice(message: str) -> None:
    print(f"\n{message}\n", file=sys.stderr, flush=True)


def apply_address(state: AppState, storage: KeyValueStorage, address: str) -> str:
    """Validate *address*, store it on *state* and persist it.

    Returns the polling URL. Raises :class:`ConfigurationError` when the
    address is blank.
    """
    cleaned = address.strip()
    if not cleaned:
        raise ConfigurationError("No device address entered")

    state.device_address = cleaned
    state.target_url = build_status_url(cleaned)
    try:
        storage.set_item(STORAGE_KEY, cleaned)
    except StorageError as exc:
        _logger.warning("Could not persist device address: %s", exc)
    _logger.info("IP address set to: %s", cleaned)
    return state.target_url


def configure_connection(
    state: AppState,
    storage: KeyValueStorage,
    *,
    prompt: Callable[[str], str] = input,
    notify: Callable[[str], None] = blocking_notice,
) -> str:
    """Ask the user for the device address and return the polling URL.

    Always prompts; a previously stored address is never reused
    automatically. Blank or cancelled input shows *notify* and raises
    :class:`ConfigurationError`, leaving *state* unconfigured.
    """
    _logger.debug("Showing IP input prompt")
    try:
        answer = prompt(PROMPT_TEXT)
    except (EOFError, KeyboardInterrupt):
        answer = ""

    try:
        return apply_address(state, storage, answer or "")
    except ConfigurationError:
        _logger.error("No IP address entered")
        notify(MISSING_ADDRESS_TEXT)
        raise


def reset_address(storage: KeyValueStorage) -> None:
    """Forget the stored device address."""
    storage.remove_item(STORAGE_KEY)
    _logger.info("Stored device address cleared")

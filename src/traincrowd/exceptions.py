"""Custom exception hierarchy for traincrowd."""

from __future__ import annotations


class TrainCrowdError(Exception):
    """Base exception for all traincrowd errors."""


class ConfigurationError(TrainCrowdError):
    """No device address was supplied.

    Fatal for the session: the poller is never started and the user has
    to restart the dashboard to try again.
    """


class DeviceTransportError(TrainCrowdError):
    """HTTP-level failure talking to the device (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class RenderLookupError(TrainCrowdError):
    """An expected display element does not exist on the surface."""

    def __init__(self, compartment_id: str, element_id: str) -> None:
        self.compartment_id = compartment_id
        self.element_id = element_id
        super().__init__(f"Elements not found for {compartment_id} (missing {element_id!r})")


class StorageError(TrainCrowdError):
    """Local key-value storage could not be read or written."""

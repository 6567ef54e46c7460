"""HTTP transport for the device status endpoint."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from traincrowd._constants import USER_AGENT
from traincrowd.exceptions import DeviceTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the poller.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str) -> dict[str, Any]:
        ...


class HttpTransport:
    """aiohttp-based GET transport returning decoded JSON objects."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float = 5.0) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str) -> dict[str, Any]:
        """GET *url* and return the JSON object body.

        Raises :class:`DeviceTransportError` on network failure, timeout,
        non-2xx status, or a body that is not a UTF-8 JSON object.
        """
        headers = {"accept": "application/json", "user-agent": USER_AGENT}

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                payload = await resp.read()
                if not 200 <= resp.status < 300:
                    raise DeviceTransportError(
                        f"HTTP {resp.status}: {resp.reason or ''}".strip(),
                        status_code=resp.status,
                        url=url,
                    )
        except DeviceTransportError:
            raise
        except TimeoutError as exc:
            raise DeviceTransportError(f"Request to {url} timed out", url=url) from exc
        except aiohttp.ClientError as exc:
            raise DeviceTransportError(f"Request to {url} failed: {exc}", url=url) from exc

        try:
            body: Any = json.loads(payload)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DeviceTransportError(f"Invalid JSON from {url}: {payload[:200]!r}", url=url) from exc

        if not isinstance(body, dict):
            raise DeviceTransportError(f"Expected a JSON object from {url}", url=url)
        return body

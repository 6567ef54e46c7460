"""Command-line entry point: prompt for the device, then serve the dashboard."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Any

from aiohttp import web

from traincrowd.config import MonitorConfig
from traincrowd.configurator import reset_address
from traincrowd.dashboard import CrowdDashboard
from traincrowd.exceptions import ConfigurationError
from traincrowd.storage import LocalStorage
from traincrowd.web import create_app

_logger = logging.getLogger("traincrowd")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Train crowd monitor dashboard")
    parser.add_argument(
        "--address",
        default=None,
        help="ESP32 address. If omitted, you are prompted for it at startup.",
    )
    parser.add_argument("--host", default=None, help="Interface for the browser dashboard")
    parser.add_argument("--port", type=int, default=None, help="Port for the browser dashboard")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the simulated compartments")
    parser.add_argument("--storage", type=Path, default=None, help="Path of the local storage file")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Forget the stored ESP32 address before starting.",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def _config_from_args(args: argparse.Namespace) -> MonitorConfig:
    overrides: dict[str, Any] = {}
    if args.address is not None:
        overrides["address"] = args.address
    if args.host is not None:
        overrides["http_host"] = args.host
    if args.port is not None:
        overrides["http_port"] = args.port
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.storage is not None:
        overrides["storage_path"] = args.storage
    return MonitorConfig.from_env(**overrides)


async def _run(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    storage = LocalStorage(config.storage_path)
    if args.reset:
        reset_address(storage)

    async with CrowdDashboard(config, storage=storage) as dashboard:
        try:
            dashboard.configure()
        except ConfigurationError:
            _logger.error("No ESP32 address configured; only simulated compartments will update")

        runner = web.AppRunner(create_app(dashboard))
        await runner.setup()
        site = web.TCPSite(runner, config.http_host, config.http_port)
        await site.start()
        try:
            dashboard.start()
            _logger.info("Train Crowd Monitor running at http://%s:%d/", config.http_host, config.http_port)
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())

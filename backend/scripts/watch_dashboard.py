"""Terminal dashboard polling the argdash API."""

from __future__ import annotations

import argparse
import asyncio
import sys

import httpx
from rich.console import Console
from rich.live import Live

from argdash.config import get_settings
from argdash.core.logging import setup_logging
from argdash.dashboard.render import render_dashboard
from argdash.dashboard.state import DashboardController, wait_for_line


async def _run(base_url: str, interval: float, once: bool) -> None:
    console = Console()
    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        if once:
            controller = DashboardController(client, refresh_seconds=interval)
            console.print(render_dashboard(await controller.refresh()))
            return

        with Live(console=console, refresh_per_second=4, screen=False) as live:
            controller = DashboardController(
                client,
                refresh_seconds=interval,
                on_change=lambda state: live.update(render_dashboard(state)),
            )
            await controller.start()
            try:
                while True:
                    await wait_for_line(sys.stdin)
                    await controller.retry()
            finally:
                await controller.stop()


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Watch the Argentina economic dashboard in the terminal")
    parser.add_argument("--base-url", default=settings.dashboard_base_url)
    parser.add_argument("--interval", type=float, default=settings.dashboard_refresh_seconds,
                        help="Seconds between automatic refreshes")
    parser.add_argument("--once", action="store_true", help="Render a single snapshot and exit")
    args = parser.parse_args()
    setup_logging()
    try:
        asyncio.run(_run(args.base_url, args.interval, args.once))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()

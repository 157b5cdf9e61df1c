"""Polling controller behind the terminal dashboard."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, TextIO

import httpx
from pydantic import ValidationError

from argdash.schemas.indicators import utcnow
from argdash.schemas.responses import DashboardResponse, HistoricalResponse

from .synthetic import ChartHistory, fabricate_history

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/api/argentstats"
HISTORICAL_PATH = "/api/argentstats/historical"
DEFAULT_ERROR = "Error al cargar los datos económicos"


class LoadStatus(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class DashboardState:
    status: LoadStatus = LoadStatus.LOADING
    data: Optional[DashboardResponse] = None
    history: ChartHistory = field(default_factory=ChartHistory)
    error: Optional[str] = None
    last_updated: Optional[datetime] = None

    def live_indicators(self) -> set[str]:
        """Indicators whose value came from the live API in the last successful fetch."""

        if self.data is None:
            return set()
        return {name for name, status in self.data.metadata.api_status.items() if status == "success"}


class DashboardController:
    """Fetch the dashboard on start and on a fixed interval.

    ``loading`` is entered before every fetch; a failed route call moves to
    ``error`` and keeps the last good data, a successful one to ``success``.
    Upstream failures hidden behind fallback values are not errors here.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        refresh_seconds: float = 300.0,
        history_days: int = 30,
        history_months: int = 12,
        on_change: Optional[Callable[[DashboardState], None]] = None,
    ) -> None:
        self._client = client
        self._refresh_seconds = refresh_seconds
        self._history_days = history_days
        self._history_months = history_months
        self._on_change = on_change
        self._task: Optional[asyncio.Task[None]] = None
        self._lock = asyncio.Lock()
        self.state = DashboardState()

    def _set(self, **changes) -> DashboardState:
        self.state = replace(self.state, **changes)
        if self._on_change is not None:
            self._on_change(self.state)
        return self.state

    async def _fetch_dashboard(self) -> DashboardResponse:
        response = await self._client.get(DASHBOARD_PATH)
        response.raise_for_status()
        return DashboardResponse.model_validate(response.json())

    async def _fetch_history(self, base_rate: Optional[float]) -> ChartHistory:
        try:
            response = await self._client.get(
                HISTORICAL_PATH,
                params={"type": "all", "days": self._history_days, "months": self._history_months},
            )
            response.raise_for_status()
            return ChartHistory.from_response(HistoricalResponse.model_validate(response.json()))
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            logger.info("Historical data unavailable, fabricating chart series: %s", exc)
            return fabricate_history(self._history_days, self._history_months, base_rate=base_rate)

    async def refresh(self) -> DashboardState:
        """Fetch once; concurrent callers (poll and retry) run one after the other."""

        async with self._lock:
            self._set(status=LoadStatus.LOADING, error=None)
            try:
                data = await self._fetch_dashboard()
            except (httpx.HTTPError, ValueError, ValidationError) as exc:
                logger.warning("Dashboard fetch failed: %s", exc)
                return self._set(status=LoadStatus.ERROR, error=str(exc) or DEFAULT_ERROR)
            history = await self._fetch_history(data.exchange_rates.oficial)
            return self._set(status=LoadStatus.SUCCESS, data=data, history=history, last_updated=utcnow())

    async def retry(self) -> DashboardState:
        return await self.refresh()

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self._refresh_seconds)
            await self.refresh()

    async def start(self) -> DashboardState:
        """Fetch once, then keep refreshing in the background until :meth:`stop`."""

        state = await self.refresh()
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._poll())
        return state

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()


async def wait_for_line(stream: TextIO) -> str:
    """Read one line from ``stream`` once it is readable, via the event loop's reader."""

    loop = asyncio.get_running_loop()
    ready = loop.create_future()
    fd = stream.fileno()
    loop.add_reader(fd, lambda: ready.done() or ready.set_result(None))
    try:
        await ready
    finally:
        loop.remove_reader(fd)
    return stream.readline()


__all__ = ["DashboardController", "DashboardState", "LoadStatus", "wait_for_line"]

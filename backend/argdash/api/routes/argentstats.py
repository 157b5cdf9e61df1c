"""ArgenStats dashboard, historical and diagnostics endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Literal

import httpx
from fastapi import APIRouter, Depends, Query, Response

from argdash.api.dependencies.providers import (
    get_aggregator,
    get_app_settings,
    get_historical_service,
    get_http_client,
)
from argdash.config import AppSettings
from argdash.providers import argenstats
from argdash.schemas.indicators import utcnow
from argdash.schemas.responses import (
    DashboardResponse,
    DebugResponse,
    HistoricalMetadata,
    HistoricalResponse,
)
from argdash.services.aggregator import IndicatorAggregator
from argdash.services.dashboard import build_dashboard_response, fallback_dashboard_response
from argdash.services.diagnostics import run_diagnostics
from argdash.services.fallbacks import FALLBACK_SOURCE, reference_inflation_history, synthetic_dollar_history
from argdash.services.historical import HistoricalService, SeriesResult

router = APIRouter()
logger = logging.getLogger(__name__)

NO_CACHE = "no-cache"

HistoryType = Literal["all", "dollar", "inflation"]


def history_cache_control(settings: AppSettings) -> str:
    return f"public, max-age={settings.historical_cache_max_age_seconds}"


@router.get("", response_model=DashboardResponse, response_model_exclude_none=True)
async def dashboard(
    response: Response,
    settings: AppSettings = Depends(get_app_settings),
    aggregator: IndicatorAggregator = Depends(get_aggregator),
) -> DashboardResponse:
    """Every indicator, live where possible and from fallback data otherwise."""

    response.headers["Cache-Control"] = NO_CACHE
    try:
        result = await aggregator.aggregate()
        return build_dashboard_response(result, has_api_key=settings.has_argenstats_key)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Dashboard aggregation failed")
        return fallback_dashboard_response(str(exc), has_api_key=settings.has_argenstats_key)


def _history_source(parts: list[SeriesResult]) -> str:
    if not parts:
        return argenstats.SOURCE
    live = [part for part in parts if part.source == argenstats.SOURCE]
    if len(live) == len(parts):
        return argenstats.SOURCE
    if not live:
        return FALLBACK_SOURCE
    return f"{argenstats.SOURCE} + Generated Data"


async def _skipped() -> None:
    return None


@router.get("/historical", response_model=HistoricalResponse, response_model_exclude_none=True)
async def historical(
    response: Response,
    type: HistoryType = Query("all", description="Which series to return"),
    days: int = Query(30, ge=1, le=365),
    months: int = Query(12, ge=1, le=24),
    settings: AppSettings = Depends(get_app_settings),
    service: HistoricalService = Depends(get_historical_service),
) -> HistoricalResponse:
    response.headers["Cache-Control"] = history_cache_control(settings)
    parameters = {"type": type, "days": days, "months": months}
    try:
        want_dollar = type in ("all", "dollar")
        want_inflation = type in ("all", "inflation")
        dollar, inflation = await asyncio.gather(
            service.dollar_history(days) if want_dollar else _skipped(),
            service.inflation_history(months) if want_inflation else _skipped(),
        )
        parts = [part for part in (dollar, inflation) if part is not None]
        return HistoricalResponse(
            dollar_history=dollar.points if dollar else [],
            inflation_history=inflation.points if inflation else [],
            metadata=HistoricalMetadata(
                source=_history_source(parts),
                timestamp=utcnow().isoformat(),
                dollar_points=len(dollar.points) if dollar else 0,
                inflation_points=len(inflation.points) if inflation else 0,
                dollar_source=dollar.source if dollar else None,
                inflation_source=inflation.source if inflation else None,
                parameters=parameters,
            ),
        )
    except Exception as exc:  # noqa: BLE001
        logger.exception("Historical data route failed")
        dollar_points = synthetic_dollar_history(days)
        inflation_points = reference_inflation_history(months)
        return HistoricalResponse(
            dollar_history=dollar_points,
            inflation_history=inflation_points,
            metadata=HistoricalMetadata(
                source=FALLBACK_SOURCE,
                timestamp=utcnow().isoformat(),
                dollar_points=len(dollar_points),
                inflation_points=len(inflation_points),
                parameters=parameters,
                error=str(exc),
            ),
        )


@router.get("/debug", response_model=DebugResponse, response_model_exclude_none=True)
async def debug(
    response: Response,
    settings: AppSettings = Depends(get_app_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> DebugResponse:
    """Probe each upstream directly and report raw status, timing and body preview."""

    response.headers["Cache-Control"] = NO_CACHE
    return await run_diagnostics(settings, client)


__all__ = ["router"]

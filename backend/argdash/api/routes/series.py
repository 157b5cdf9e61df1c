"""datos.gob.ar inflation endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from argdash.api.dependencies.providers import get_app_settings, get_historical_service, get_series_client
from argdash.config import AppSettings
from argdash.providers.series import SeriesClient
from argdash.schemas.responses import InflationHistoryMetadata, InflationHistoryResponse, SeriesResponse
from argdash.services.fallbacks import FALLBACK_SOURCE, reference_inflation_history
from argdash.services.historical import SERIES_WINDOW_MONTHS, HistoricalService
from argdash.services.public_data import fallback_series_inflation, series_inflation

from .argentstats import NO_CACHE, history_cache_control

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=SeriesResponse, response_model_exclude_none=True)
async def inflation(
    response: Response,
    settings: AppSettings = Depends(get_app_settings),
    client: SeriesClient = Depends(get_series_client),
) -> SeriesResponse:
    response.headers["Cache-Control"] = NO_CACHE
    try:
        return await series_inflation(client, timeout=settings.upstream_timeout_seconds)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Series inflation failed")
        return fallback_series_inflation(str(exc))


@router.get("/inflation-history", response_model=InflationHistoryResponse, response_model_exclude_none=True)
async def inflation_history(
    response: Response,
    settings: AppSettings = Depends(get_app_settings),
    service: HistoricalService = Depends(get_historical_service),
) -> InflationHistoryResponse:
    response.headers["Cache-Control"] = history_cache_control(settings)
    try:
        result = await service.series_inflation_history()
        return InflationHistoryResponse(
            data=result.points,
            metadata=InflationHistoryMetadata(
                source=result.source,
                series_id=result.series_id,
                total_points=len(result.points),
                error=result.error,
            ),
        )
    except Exception as exc:  # noqa: BLE001
        logger.exception("Series inflation history failed")
        points = reference_inflation_history(SERIES_WINDOW_MONTHS)
        return InflationHistoryResponse(
            data=points,
            metadata=InflationHistoryMetadata(source=FALLBACK_SOURCE, total_points=len(points), error=str(exc)),
        )


__all__ = ["router"]

"""BCRA exchange-rate, policy-rate and exchange-history endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from argdash.api.dependencies.providers import get_app_settings, get_bcra_client, get_historical_service
from argdash.config import AppSettings
from argdash.providers.bcra import BCRAClient
from argdash.schemas.responses import BCRAResponse, ExchangeHistoryMetadata, ExchangeHistoryResponse
from argdash.services.fallbacks import FALLBACK_SOURCE, synthetic_dollar_history
from argdash.services.historical import BCRA_WINDOW_DAYS, HistoricalService
from argdash.services.public_data import bcra_snapshot, fallback_bcra_snapshot

from .argentstats import NO_CACHE, history_cache_control

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=BCRAResponse, response_model_exclude_none=True)
async def bcra(
    response: Response,
    settings: AppSettings = Depends(get_app_settings),
    client: BCRAClient = Depends(get_bcra_client),
) -> BCRAResponse:
    response.headers["Cache-Control"] = NO_CACHE
    try:
        return await bcra_snapshot(client, timeout=settings.upstream_timeout_seconds)
    except Exception as exc:  # noqa: BLE001
        logger.warning("BCRA snapshot failed: %s", exc)
        return fallback_bcra_snapshot(str(exc))


@router.get("/exchange-history", response_model=ExchangeHistoryResponse, response_model_exclude_none=True)
async def exchange_history(
    response: Response,
    settings: AppSettings = Depends(get_app_settings),
    service: HistoricalService = Depends(get_historical_service),
) -> ExchangeHistoryResponse:
    response.headers["Cache-Control"] = history_cache_control(settings)
    try:
        result = await service.bcra_exchange_history()
        return ExchangeHistoryResponse(
            data=result.points,
            metadata=ExchangeHistoryMetadata(
                source=result.source,
                real_data_points=result.real_points,
                variable_id=result.variable_id,
                description=result.description,
                error=result.error,
            ),
        )
    except Exception as exc:  # noqa: BLE001
        logger.exception("BCRA exchange history failed")
        return ExchangeHistoryResponse(
            data=synthetic_dollar_history(BCRA_WINDOW_DAYS),
            metadata=ExchangeHistoryMetadata(source=FALLBACK_SOURCE, error=str(exc)),
        )


__all__ = ["router"]

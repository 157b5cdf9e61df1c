"""National budget execution endpoints."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Response

from argdash.api.dependencies.providers import get_app_settings, get_presupuesto_client
from argdash.config import AppSettings
from argdash.providers.presupuesto import PresupuestoClient
from argdash.schemas.responses import BudgetExecutionResponse, BudgetMetadata, BudgetResponse
from argdash.services.fallbacks import FALLBACK_SOURCE, fallback_budget
from argdash.services.public_data import budget_execution_response, budget_response, budget_snapshot

from .argentstats import NO_CACHE

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=BudgetResponse, response_model_exclude_none=True)
async def budget(
    response: Response,
    settings: AppSettings = Depends(get_app_settings),
    client: PresupuestoClient = Depends(get_presupuesto_client),
) -> BudgetResponse:
    response.headers["Cache-Control"] = NO_CACHE
    year = date.today().year
    try:
        snapshot, metadata = await budget_snapshot(client, year, timeout=settings.upstream_timeout_seconds)
        return budget_response(snapshot, metadata)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Budget route failed")
        return budget_response(fallback_budget(year), BudgetMetadata(source=FALLBACK_SOURCE, error=str(exc)))


@router.get("/execution", response_model=BudgetExecutionResponse, response_model_exclude_none=True)
async def execution(
    response: Response,
    settings: AppSettings = Depends(get_app_settings),
    client: PresupuestoClient = Depends(get_presupuesto_client),
) -> BudgetExecutionResponse:
    """Executed and total credit split across the main spending areas."""

    response.headers["Cache-Control"] = NO_CACHE
    year = date.today().year
    try:
        snapshot, metadata = await budget_snapshot(client, year, timeout=settings.upstream_timeout_seconds)
        return budget_execution_response(snapshot, metadata)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Budget execution route failed")
        return budget_execution_response(
            fallback_budget(year), BudgetMetadata(source=FALLBACK_SOURCE, error=str(exc))
        )


__all__ = ["router"]

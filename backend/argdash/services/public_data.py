"""Snapshots from the public BCRA, datos.gob.ar and budget APIs."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, timedelta
from typing import Optional

from argdash.providers import bcra, presupuesto, series
from argdash.providers.bcra import (
    BCRAClient,
    BCRAObservation,
    BCRAVariable,
    find_exchange_variable,
    find_rate_variable,
)
from argdash.providers.http import UpstreamFetchError, within_deadline
from argdash.providers.presupuesto import PresupuestoClient
from argdash.providers.series import INFLATION_SERIES_IDS, SeriesClient
from argdash.schemas.indicators import BudgetSnapshot, utcnow
from argdash.schemas.responses import (
    BCRAExchangeBlock,
    BCRAMetadata,
    BCRAResponse,
    BudgetArea,
    BudgetExecutionResponse,
    BudgetMetadata,
    BudgetResponse,
    InterestRateBlock,
    SeriesInflationBlock,
    SeriesMetadata,
    SeriesResponse,
)

from .fallbacks import (
    BLUE_PREMIUM,
    FALLBACK_EXCHANGE_RATES,
    FALLBACK_INFLATION,
    FALLBACK_INTEREST_RATE,
    FALLBACK_SOURCE,
    REFERENCE_INFLATION_SERIES,
    fallback_budget,
)

logger = logging.getLogger(__name__)

REFERENCE_SERIES_ID = "fallback-data"
REFERENCE_SERIES_TITLE = "IPC Nacional Mensual (Datos de referencia)"
REFERENCE_SOURCE = "Datos de referencia"

BUDGET_AREAS: tuple[tuple[str, float], ...] = (
    ("Salud", 0.25),
    ("Educación", 0.20),
    ("Seguridad", 0.15),
    ("Infraestructura", 0.20),
    ("Otros", 0.20),
)


async def _latest(
    client: BCRAClient, variable: Optional[BCRAVariable], days: int, today: date
) -> Optional[BCRAObservation]:
    if variable is None:
        return None
    try:
        observations = await client.series(variable.id, today - timedelta(days=days), today)
    except UpstreamFetchError as exc:
        logger.warning("BCRA variable %s unavailable: %s", variable.id, exc)
        return None
    return observations[-1] if observations else None


async def _bcra_latest(
    client: BCRAClient, day: date
) -> tuple[Optional[BCRAVariable], Optional[BCRAVariable], Optional[BCRAObservation], Optional[BCRAObservation]]:
    variables = await client.variables()
    usd = find_exchange_variable(variables)
    rate = find_rate_variable(variables)
    exchange_obs, rate_obs = await asyncio.gather(
        _latest(client, usd, 30, day),
        _latest(client, rate, 7, day),
    )
    return usd, rate, exchange_obs, rate_obs


async def bcra_snapshot(
    client: BCRAClient, *, timeout: Optional[float] = None, today: Optional[date] = None
) -> BCRAResponse:
    """Latest official exchange rate and policy rate; metadata failures and timeouts propagate."""

    usd, rate, exchange_obs, rate_obs = await within_deadline(
        _bcra_latest(client, today or date.today()), timeout, url=client.url("/Metadatos")
    )
    now = utcnow().isoformat()
    oficial = exchange_obs.value if exchange_obs else FALLBACK_EXCHANGE_RATES["oficial"]
    return BCRAResponse(
        exchange_rate=BCRAExchangeBlock(
            oficial=oficial,
            blue=round(oficial * BLUE_PREMIUM, 2),
            date=exchange_obs.as_of.isoformat() if exchange_obs else now,
        ),
        interest_rate=InterestRateBlock(
            rate=rate_obs.value if rate_obs else FALLBACK_INTEREST_RATE,
            date=rate_obs.as_of.isoformat() if rate_obs else now,
        ),
        metadata=BCRAMetadata(
            source=bcra.SOURCE,
            usd_variable_id=usd.id if usd else None,
            rate_variable_id=rate.id if rate else None,
        ),
    )


def fallback_bcra_snapshot(error: Optional[str]) -> BCRAResponse:
    now = utcnow().isoformat()
    return BCRAResponse(
        exchange_rate=BCRAExchangeBlock(
            oficial=FALLBACK_EXCHANGE_RATES["oficial"],
            blue=FALLBACK_EXCHANGE_RATES["blue"],
            date=now,
        ),
        interest_rate=InterestRateBlock(rate=FALLBACK_INTEREST_RATE, date=now),
        metadata=BCRAMetadata(source=FALLBACK_SOURCE, error=error),
    )


async def series_inflation(client: SeriesClient, *, timeout: Optional[float] = None) -> SeriesResponse:
    """Latest monthly CPI and the sum of the last twelve monthly values; timeouts propagate."""

    data = await within_deadline(
        client.first_available(INFLATION_SERIES_IDS, last=12), timeout, url=client.url("/series")
    )
    if data is not None:
        values = data.values
        series_id, title, source = data.series_id, data.title, series.SOURCE
    else:
        values = [(point.date, point.value) for point in REFERENCE_INFLATION_SERIES]
        series_id, title, source = REFERENCE_SERIES_ID, REFERENCE_SERIES_TITLE, REFERENCE_SOURCE

    latest_day, latest_value = values[-1]
    annual = sum(value for _, value in values[-12:])
    return SeriesResponse(
        inflation=SeriesInflationBlock(
            monthly=latest_value,
            annual=round(annual, 2),
            date=latest_day.isoformat(),
        ),
        metadata=SeriesMetadata(
            source=source,
            series_id=series_id,
            series_title=title,
            last_update=utcnow().isoformat(),
        ),
    )


def fallback_series_inflation(error: Optional[str]) -> SeriesResponse:
    now = utcnow().isoformat()
    return SeriesResponse(
        inflation=SeriesInflationBlock(
            monthly=FALLBACK_INFLATION["monthly"],
            annual=FALLBACK_INFLATION["annual"],
            date=now,
        ),
        metadata=SeriesMetadata(source=FALLBACK_SOURCE, last_update=now, error=error),
    )


async def budget_snapshot(
    client: PresupuestoClient, year: int, *, timeout: Optional[float] = None
) -> tuple[BudgetSnapshot, BudgetMetadata]:
    """Budget execution for ``year``; falls back when the API is unset or unavailable."""

    try:
        snapshot = await within_deadline(client.execution(year), timeout, url=client.url("/ejecucion"))
    except UpstreamFetchError as exc:
        if client.configured:
            logger.warning("Budget execution unavailable (%s): %s", exc.kind, exc)
        return fallback_budget(year), BudgetMetadata(
            source=FALLBACK_SOURCE,
            error=None if exc.kind == "not_configured" else str(exc),
        )
    return snapshot, BudgetMetadata(source=presupuesto.SOURCE)


def budget_response(snapshot: BudgetSnapshot, metadata: BudgetMetadata) -> BudgetResponse:
    return BudgetResponse(
        executed=snapshot.executed,
        total=snapshot.total,
        percentage=round(snapshot.percentage, 2),
        year=snapshot.year,
        metadata=metadata,
    )


def budget_execution_response(snapshot: BudgetSnapshot, metadata: BudgetMetadata) -> BudgetExecutionResponse:
    """Split executed and total credit across the fixed area shares."""

    return BudgetExecutionResponse(
        executed=snapshot.executed,
        total=snapshot.total,
        areas=[
            BudgetArea(name=name, executed=snapshot.executed * share, total=snapshot.total * share)
            for name, share in BUDGET_AREAS
        ],
        metadata=metadata,
    )


__all__ = [
    "BUDGET_AREAS",
    "REFERENCE_SERIES_ID",
    "bcra_snapshot",
    "budget_execution_response",
    "budget_response",
    "budget_snapshot",
    "fallback_bcra_snapshot",
    "fallback_series_inflation",
    "series_inflation",
]

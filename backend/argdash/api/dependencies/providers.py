"""FastAPI dependencies resolving the shared settings, HTTP pool and provider clients."""

from __future__ import annotations

import httpx
from fastapi import Depends, Request

from argdash.config import AppSettings
from argdash.providers.argenstats import ArgenStatsClient
from argdash.providers.bcra import BCRAClient
from argdash.providers.presupuesto import PresupuestoClient
from argdash.providers.series import SeriesClient
from argdash.services.aggregator import IndicatorAggregator
from argdash.services.historical import HistoricalService


def get_app_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_argenstats_client(
    settings: AppSettings = Depends(get_app_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> ArgenStatsClient:
    return ArgenStatsClient(settings, client)


def get_bcra_client(
    settings: AppSettings = Depends(get_app_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> BCRAClient:
    return BCRAClient(settings, client)


def get_series_client(
    settings: AppSettings = Depends(get_app_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> SeriesClient:
    return SeriesClient(settings, client)


def get_presupuesto_client(
    settings: AppSettings = Depends(get_app_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> PresupuestoClient:
    return PresupuestoClient(settings, client)


def get_aggregator(
    settings: AppSettings = Depends(get_app_settings),
    source: ArgenStatsClient = Depends(get_argenstats_client),
) -> IndicatorAggregator:
    return IndicatorAggregator(source, timeout=settings.upstream_timeout_seconds)


def get_historical_service(
    settings: AppSettings = Depends(get_app_settings),
    argenstats: ArgenStatsClient = Depends(get_argenstats_client),
    bcra: BCRAClient = Depends(get_bcra_client),
    series: SeriesClient = Depends(get_series_client),
) -> HistoricalService:
    return HistoricalService(argenstats, bcra, series, timeout=settings.upstream_timeout_seconds)


__all__ = [
    "get_aggregator",
    "get_app_settings",
    "get_argenstats_client",
    "get_bcra_client",
    "get_historical_service",
    "get_http_client",
    "get_presupuesto_client",
    "get_series_client",
]

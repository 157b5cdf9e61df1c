"""Shape aggregated snapshots into the dashboard JSON contract."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, TypeVar, cast

from argdash.schemas.indicators import (
    ActivityIndexSnapshot,
    CalendarSnapshot,
    CountryRiskSnapshot,
    ExchangeRateSnapshot,
    Indicator,
    InflationSnapshot,
    LaborMarketSnapshot,
    PovertySnapshot,
    SectorBreakdownSnapshot,
    Snapshot,
)
from argdash.schemas.responses import (
    CalendarEventBlock,
    DashboardMetadata,
    DashboardResponse,
    EmaeBlock,
    ExchangeRatesBlock,
    InflationBlock,
    LaborMarketBlock,
    PovertyBlock,
    RiesgoPaisBlock,
    SectorBlock,
)

from .aggregator import ALL_INDICATORS, AggregationResult
from .fallbacks import FALLBACK_SOURCE, generate_fallback

S = TypeVar("S", bound=Snapshot)


def _iso(value: datetime) -> str:
    return value.isoformat()


def _snapshot(result: AggregationResult, indicator: Indicator, kind: type[S]) -> S:
    snapshot = result.get(indicator)
    if snapshot is None:
        snapshot = generate_fallback(indicator, result.generated_at)
    return cast(S, snapshot)


def build_dashboard_response(result: AggregationResult, *, has_api_key: bool) -> DashboardResponse:
    rates = _snapshot(result, Indicator.EXCHANGE_RATES, ExchangeRateSnapshot)
    inflation = _snapshot(result, Indicator.INFLATION, InflationSnapshot)
    activity = _snapshot(result, Indicator.ACTIVITY, ActivityIndexSnapshot)
    risk = _snapshot(result, Indicator.COUNTRY_RISK, CountryRiskSnapshot)
    labor = _snapshot(result, Indicator.LABOR_MARKET, LaborMarketSnapshot)
    poverty = _snapshot(result, Indicator.POVERTY, PovertySnapshot)
    calendar = _snapshot(result, Indicator.CALENDAR, CalendarSnapshot)
    sectors = _snapshot(result, Indicator.EMAE_SECTORS, SectorBreakdownSnapshot)

    return DashboardResponse(
        exchange_rates=ExchangeRatesBlock(
            oficial=rates.official_rate,
            blue=rates.blue_rate,
            mep=rates.mep_rate,
            ccl=rates.ccl_rate,
            tarjeta=rates.card_rate,
            date=_iso(rates.as_of),
        ),
        inflation=InflationBlock(
            monthly=inflation.monthly_pct,
            annual=inflation.annual_pct,
            accumulated=inflation.accumulated_pct,
            index=inflation.index_value,
            date=_iso(inflation.as_of),
        ),
        emae=EmaeBlock(
            monthly=activity.monthly_pct,
            annual=activity.annual_pct,
            index=activity.index_value,
            seasonally_adjusted=activity.seasonally_adjusted,
            trend_cycle=activity.trend_cycle,
            date=_iso(activity.as_of),
        ),
        riesgo_pais=RiesgoPaisBlock(
            value=risk.points,
            variation=risk.delta_points,
            variation_pct=risk.delta_pct,
            date=_iso(risk.as_of),
        ),
        labor_market=LaborMarketBlock(
            unemployment=labor.unemployment_pct,
            employment=labor.employment_pct,
            activity=labor.activity_pct,
            date=_iso(labor.as_of),
        ),
        poverty=PovertyBlock(
            poverty_rate=poverty.poverty_pct,
            indigence_rate=poverty.indigence_pct,
            poverty_population=poverty.poverty_population,
            indigence_population=poverty.indigence_population,
            period=poverty.period,
            date=_iso(poverty.as_of),
        ),
        calendar=[
            CalendarEventBlock(
                date=_iso(event.date),
                day_week=event.day_week,
                indicator=event.indicator,
                period=event.period,
                source=event.source,
            )
            for event in calendar.events
        ],
        emae_sectors=[
            SectorBlock(sector=row.sector, annual_variation=row.annual_pct, index_value=row.index_value)
            for row in sectors.sectors
        ],
        metadata=DashboardMetadata(
            source=result.source,
            timestamp=_iso(result.generated_at),
            successful_apis=result.successful,
            failed_apis=result.failed,
            api_status={indicator.value: status for indicator, status in result.statuses.items()},
            sources={indicator.value: source for indicator, source in result.sources.items()},
            has_api_key=has_api_key,
        ),
    )


def fallback_dashboard_response(error: Optional[str], *, has_api_key: bool) -> DashboardResponse:
    """Every block from fallback data; used when aggregation itself breaks."""

    result = AggregationResult()
    for indicator in ALL_INDICATORS:
        result.snapshots[indicator] = generate_fallback(indicator, result.generated_at)
        result.statuses[indicator] = "error"
        result.sources[indicator] = FALLBACK_SOURCE
        result.failed += 1
    response = build_dashboard_response(result, has_api_key=has_api_key)
    response.metadata.error = error
    return response


__all__ = ["build_dashboard_response", "fallback_dashboard_response"]

"""Historical series for the chart routes, each with its own fallback path."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

import pandas as pd

from argdash.providers import argenstats, bcra, series
from argdash.providers.argenstats import ArgenStatsClient
from argdash.providers.bcra import BCRAClient, BCRAObservation, BCRAVariable, find_exchange_variable
from argdash.providers.http import UpstreamFetchError, within_deadline
from argdash.providers.series import INFLATION_SERIES_IDS, SeriesClient
from argdash.schemas.indicators import DollarHistoryPoint, InflationHistoryPoint

from .fallbacks import (
    BLUE_PREMIUM,
    FALLBACK_SOURCE,
    fill_exchange_window,
    pad_monthly_series,
    reference_inflation_history,
    synthetic_dollar_history,
)

logger = logging.getLogger(__name__)

GENERATED_SOURCE = "Generated data"
REFERENCE_SOURCE = "Historical INDEC data 2024"
BCRA_WINDOW_DAYS = 30
BCRA_MIN_REAL_POINTS = 15
SERIES_WINDOW_MONTHS = 12

_MONTHS_SHORT_ES = ("Ene", "Feb", "Mar", "Abr", "May", "Jun", "Jul", "Ago", "Sep", "Oct", "Nov", "Dic")


def month_label(day: date) -> str:
    """``date(2024, 1, 31)`` -> ``"Ene 24"``."""

    return f"{_MONTHS_SHORT_ES[day.month - 1]} {day.year % 100:02d}"


def last_months(points: list[tuple[date, float]], months: int) -> list[InflationHistoryPoint]:
    """Keep one value per month, chronologically, and return the last ``months``."""

    if not points or months <= 0:
        return []
    frame = pd.DataFrame(points, columns=["date", "value"])
    frame["month"] = pd.to_datetime(frame["date"]).dt.to_period("M")
    frame = frame.sort_values("date").drop_duplicates("month", keep="last").tail(months)
    return [
        InflationHistoryPoint(month=month_label(row.date), value=round(float(row.value), 2), date=row.date)
        for row in frame.itertuples(index=False)
    ]


@dataclass
class SeriesResult:
    points: list
    source: str
    error: Optional[str] = None
    real_points: int = 0
    series_id: Optional[str] = None
    variable_id: Optional[int] = None
    description: Optional[str] = None


class HistoricalService:
    def __init__(
        self,
        argenstats_client: ArgenStatsClient,
        bcra_client: BCRAClient,
        series_client: SeriesClient,
        *,
        timeout: Optional[float] = None,
    ) -> None:
        self._argenstats = argenstats_client
        self._bcra = bcra_client
        self._series = series_client
        self._timeout = timeout

    async def dollar_history(self, days: int, *, today: Optional[date] = None) -> SeriesResult:
        end = today or date.today()
        start = end - timedelta(days=days - 1)
        try:
            points = await within_deadline(
                self._argenstats.dollar_history(start, end), self._timeout, url=self._argenstats.url("/dollar")
            )
        except UpstreamFetchError as exc:
            logger.warning("Dollar history unavailable (%s), generating %d days", exc.kind, days)
            return SeriesResult(synthetic_dollar_history(days, end=end), GENERATED_SOURCE, error=str(exc))
        points = [point for point in points if start <= point.date <= end][-days:]
        if not points:
            logger.info("Dollar history returned no usable rows, generating %d days", days)
            return SeriesResult(synthetic_dollar_history(days, end=end), GENERATED_SOURCE)
        return SeriesResult(points, argenstats.SOURCE, real_points=len(points))

    async def _inflation_points(self, year: int, months: int) -> list[tuple[date, float]]:
        collected = await self._argenstats.inflation_series(year)
        if len(collected) < months:
            try:
                collected = await self._argenstats.inflation_series(year - 1) + collected
            except UpstreamFetchError as exc:
                logger.info("Previous-year inflation unavailable: %s", exc)
        return collected

    async def inflation_history(self, months: int, *, today: Optional[date] = None) -> SeriesResult:
        year = (today or date.today()).year
        try:
            collected = await within_deadline(
                self._inflation_points(year, months), self._timeout, url=self._argenstats.url("/ipc")
            )
        except UpstreamFetchError as exc:
            logger.warning("Inflation history unavailable (%s), using reference series", exc.kind)
            return SeriesResult(reference_inflation_history(months), REFERENCE_SOURCE, error=str(exc))
        points = last_months(collected, months)
        if not points:
            return SeriesResult(reference_inflation_history(months), REFERENCE_SOURCE)
        return SeriesResult(points, argenstats.SOURCE, real_points=len(points))

    async def _bcra_window(self, end: date) -> tuple[BCRAVariable, list[BCRAObservation]]:
        variable = find_exchange_variable(await self._bcra.variables())
        if variable is None:
            raise UpstreamFetchError("USD variable not found in BCRA metadata", url=self._bcra.url("/Metadatos"))
        return variable, await self._bcra.series(variable.id, end - timedelta(days=BCRA_WINDOW_DAYS), end)

    async def bcra_exchange_history(self, *, today: Optional[date] = None) -> SeriesResult:
        """Thirty days of the BCRA official rate with an estimated blue rate."""

        end = today or date.today()
        try:
            variable, observations = await within_deadline(
                self._bcra_window(end), self._timeout, url=self._bcra.url("/Metadatos")
            )
        except UpstreamFetchError as exc:
            logger.warning("BCRA exchange history unavailable (%s), generating window", exc.kind)
            return SeriesResult(
                synthetic_dollar_history(BCRA_WINDOW_DAYS, end=end),
                FALLBACK_SOURCE,
                error=str(exc),
            )

        real = [
            DollarHistoryPoint(date=obs.date, oficial=obs.value, blue=round(obs.value * BLUE_PREMIUM, 2))
            for obs in observations
        ]
        if len(real) < BCRA_MIN_REAL_POINTS:
            return SeriesResult(
                fill_exchange_window(real, days=BCRA_WINDOW_DAYS, end=end),
                f"{bcra.SOURCE} + interpolación",
                real_points=len(real),
                variable_id=variable.id,
            )
        return SeriesResult(
            real,
            bcra.SOURCE,
            real_points=len(real),
            variable_id=variable.id,
            description=variable.description,
        )

    async def series_inflation_history(self) -> SeriesResult:
        """Exactly twelve monthly points from datos.gob.ar, padded or replaced when short."""

        try:
            data = await within_deadline(
                self._series.first_available(INFLATION_SERIES_IDS, last=SERIES_WINDOW_MONTHS),
                self._timeout,
                url=self._series.url("/series"),
            )
        except UpstreamFetchError as exc:
            logger.warning("Series inflation history unavailable: %s", exc)
            return SeriesResult(reference_inflation_history(SERIES_WINDOW_MONTHS), FALLBACK_SOURCE, error=str(exc))
        if data is None:
            return SeriesResult(reference_inflation_history(SERIES_WINDOW_MONTHS), REFERENCE_SOURCE)
        points = last_months(data.values, SERIES_WINDOW_MONTHS)
        return SeriesResult(
            pad_monthly_series(points, size=SERIES_WINDOW_MONTHS),
            series.SOURCE,
            real_points=len(points),
            series_id=data.series_id,
        )


__all__ = [
    "GENERATED_SOURCE",
    "HistoricalService",
    "REFERENCE_SOURCE",
    "SeriesResult",
    "last_months",
    "month_label",
]

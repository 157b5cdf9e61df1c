"""Concurrent indicator aggregation with per-indicator fallback substitution."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from pydantic import ValidationError

from argdash.core.metrics import record_upstream_outcome
from argdash.providers.argenstats import SOURCE, SOURCE_LABELS
from argdash.providers.http import UpstreamFetchError
from argdash.schemas.indicators import Indicator, Snapshot, utcnow

from .fallbacks import FALLBACK_SOURCE, generate_fallback

logger = logging.getLogger(__name__)

ALL_INDICATORS: tuple[Indicator, ...] = (
    Indicator.EXCHANGE_RATES,
    Indicator.INFLATION,
    Indicator.ACTIVITY,
    Indicator.COUNTRY_RISK,
    Indicator.LABOR_MARKET,
    Indicator.POVERTY,
    Indicator.CALENDAR,
    Indicator.EMAE_SECTORS,
)

SUCCESS = "success"


class IndicatorSource(Protocol):
    async def fetch(self, indicator: Indicator) -> Snapshot: ...


@dataclass
class IndicatorOutcome:
    indicator: Indicator
    snapshot: Snapshot
    status: str
    source: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS


@dataclass
class AggregationResult:
    """One snapshot per requested indicator plus the bookkeeping of how it was obtained."""

    snapshots: dict[Indicator, Snapshot] = field(default_factory=dict)
    statuses: dict[Indicator, str] = field(default_factory=dict)
    sources: dict[Indicator, str] = field(default_factory=dict)
    errors: dict[Indicator, str] = field(default_factory=dict)
    successful: int = 0
    failed: int = 0
    generated_at: datetime = field(default_factory=utcnow)

    @property
    def attempted(self) -> int:
        return self.successful + self.failed

    @property
    def source(self) -> str:
        if self.failed == 0:
            return SOURCE
        if self.successful == 0:
            return FALLBACK_SOURCE
        return f"{SOURCE} + {FALLBACK_SOURCE}"

    def get(self, indicator: Indicator) -> Optional[Snapshot]:
        return self.snapshots.get(indicator)

    def add(self, outcome: IndicatorOutcome) -> None:
        self.snapshots[outcome.indicator] = outcome.snapshot
        self.statuses[outcome.indicator] = outcome.status
        self.sources[outcome.indicator] = outcome.source
        if outcome.ok:
            self.successful += 1
        else:
            self.failed += 1
            if outcome.error:
                self.errors[outcome.indicator] = outcome.error


class IndicatorAggregator:
    """Fetch indicators concurrently, substituting fallbacks for every failure."""

    def __init__(self, source: IndicatorSource, *, timeout: float) -> None:
        self._source = source
        self._timeout = timeout

    async def _fetch_one(self, indicator: Indicator) -> IndicatorOutcome:
        try:
            snapshot = await asyncio.wait_for(self._source.fetch(indicator), self._timeout)
        except UpstreamFetchError as exc:
            return self._failed(indicator, exc.kind, str(exc))
        except asyncio.TimeoutError:
            return self._failed(indicator, "timeout", f"No response within {self._timeout:g}s")
        except ValidationError as exc:
            return self._failed(indicator, "parse_error", str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected failure fetching %s", indicator.value)
            return self._failed(indicator, "error", str(exc))
        record_upstream_outcome(indicator.value, SUCCESS)
        return IndicatorOutcome(
            indicator=indicator,
            snapshot=snapshot,
            status=SUCCESS,
            source=SOURCE_LABELS[indicator],
        )

    def _failed(self, indicator: Indicator, kind: str, message: str) -> IndicatorOutcome:
        logger.warning("Indicator %s fell back (%s): %s", indicator.value, kind, message)
        record_upstream_outcome(indicator.value, kind)
        return IndicatorOutcome(
            indicator=indicator,
            snapshot=generate_fallback(indicator),
            status=kind,
            source=FALLBACK_SOURCE,
            error=message,
        )

    async def aggregate(self, indicators: Optional[Iterable[Indicator]] = None) -> AggregationResult:
        requested: Sequence[Indicator] = tuple(
            Indicator(i) for i in (ALL_INDICATORS if indicators is None else indicators)
        )
        outcomes = await asyncio.gather(*(self._fetch_one(indicator) for indicator in requested))

        result = AggregationResult()
        for outcome in outcomes:
            result.add(outcome)
        logger.info(
            "Aggregated %d indicators: %d live, %d fallback",
            result.attempted,
            result.successful,
            result.failed,
        )
        return result


__all__ = [
    "ALL_INDICATORS",
    "AggregationResult",
    "IndicatorAggregator",
    "IndicatorOutcome",
    "IndicatorSource",
]

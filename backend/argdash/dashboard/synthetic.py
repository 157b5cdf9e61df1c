"""Client-side chart series used when the historical route cannot be reached."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from argdash.schemas.indicators import DollarHistoryPoint, InflationHistoryPoint
from argdash.schemas.responses import HistoricalResponse
from argdash.services.fallbacks import reference_inflation_history, synthetic_dollar_history


@dataclass
class ChartHistory:
    dollar: list[DollarHistoryPoint] = field(default_factory=list)
    inflation: list[InflationHistoryPoint] = field(default_factory=list)
    synthetic: bool = False
    source: str = ""

    @classmethod
    def from_response(cls, response: HistoricalResponse) -> "ChartHistory":
        return cls(
            dollar=list(response.dollar_history),
            inflation=list(response.inflation_history),
            source=response.metadata.source,
        )


def fabricate_history(
    days: int = 30,
    months: int = 12,
    *,
    base_rate: Optional[float] = None,
    end: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> ChartHistory:
    """Dollar series around ``base_rate`` plus the reference inflation series."""

    return ChartHistory(
        dollar=synthetic_dollar_history(days, end=end, base_rate=base_rate, rng=rng),
        inflation=reference_inflation_history(months),
        synthetic=True,
        source="Datos simulados",
    )


__all__ = ["ChartHistory", "fabricate_history"]

"""Canonical indicator snapshots built per request and discarded afterwards."""

from __future__ import annotations

from datetime import date as Date, datetime, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Indicator(str, Enum):
    """Indicators fetched by one aggregation cycle."""

    EXCHANGE_RATES = "dollar"
    INFLATION = "inflation"
    ACTIVITY = "emae"
    COUNTRY_RISK = "riesgo_pais"
    LABOR_MARKET = "labor_market"
    POVERTY = "poverty"
    CALENDAR = "calendar"
    EMAE_SECTORS = "emae_sectors"


class ExchangeRateSnapshot(BaseModel):
    official_rate: float
    blue_rate: float
    mep_rate: float
    ccl_rate: float
    card_rate: float
    as_of: datetime = Field(default_factory=utcnow)


class InflationSnapshot(BaseModel):
    monthly_pct: float
    annual_pct: float
    accumulated_pct: float
    index_value: float
    as_of: datetime = Field(default_factory=utcnow)


class ActivityIndexSnapshot(BaseModel):
    """EMAE (Estimador Mensual de Actividad Económica) reading."""

    monthly_pct: float
    annual_pct: float
    index_value: float
    seasonally_adjusted: float
    trend_cycle: float
    as_of: datetime = Field(default_factory=utcnow)


class CountryRiskSnapshot(BaseModel):
    points: int
    delta_points: float
    delta_pct: float
    as_of: datetime = Field(default_factory=utcnow)


class LaborMarketSnapshot(BaseModel):
    unemployment_pct: float
    employment_pct: float
    activity_pct: float
    as_of: datetime = Field(default_factory=utcnow)


class PovertySnapshot(BaseModel):
    poverty_pct: float
    indigence_pct: float
    poverty_population: int
    indigence_population: int
    period: str
    as_of: datetime = Field(default_factory=utcnow)


class CalendarEvent(BaseModel):
    date: datetime
    day_week: str
    indicator: str
    period: str
    source: str = "INDEC"


class CalendarSnapshot(BaseModel):
    events: list[CalendarEvent]
    as_of: datetime = Field(default_factory=utcnow)


class SectorActivity(BaseModel):
    sector: str
    annual_pct: float
    index_value: float


class SectorBreakdownSnapshot(BaseModel):
    sectors: list[SectorActivity]
    as_of: datetime = Field(default_factory=utcnow)


class InterestRateSnapshot(BaseModel):
    rate_pct: float
    as_of: datetime = Field(default_factory=utcnow)


class BudgetSnapshot(BaseModel):
    executed: float
    total: float
    percentage: float
    year: int
    as_of: datetime = Field(default_factory=utcnow)


class DollarHistoryPoint(BaseModel):
    date: Date
    oficial: float
    blue: float


class InflationHistoryPoint(BaseModel):
    month: str
    value: float
    date: Optional[Date] = None


Snapshot = Union[
    ExchangeRateSnapshot,
    InflationSnapshot,
    ActivityIndexSnapshot,
    CountryRiskSnapshot,
    LaborMarketSnapshot,
    PovertySnapshot,
    CalendarSnapshot,
    SectorBreakdownSnapshot,
]


__all__ = [
    "ActivityIndexSnapshot",
    "BudgetSnapshot",
    "CalendarEvent",
    "CalendarSnapshot",
    "CountryRiskSnapshot",
    "DollarHistoryPoint",
    "ExchangeRateSnapshot",
    "Indicator",
    "InflationHistoryPoint",
    "InflationSnapshot",
    "InterestRateSnapshot",
    "LaborMarketSnapshot",
    "PovertySnapshot",
    "SectorActivity",
    "SectorBreakdownSnapshot",
    "Snapshot",
    "utcnow",
]

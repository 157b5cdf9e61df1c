"""External JSON contracts returned by the dashboard routes."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .indicators import DollarHistoryPoint, InflationHistoryPoint


class _ContractModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ExchangeRatesBlock(_ContractModel):
    oficial: float
    blue: float
    mep: float
    ccl: float
    tarjeta: float
    date: str


class InflationBlock(_ContractModel):
    monthly: float
    annual: float
    accumulated: float
    index: float
    date: str


class EmaeBlock(_ContractModel):
    monthly: float
    annual: float
    index: float
    seasonally_adjusted: float
    trend_cycle: float
    date: str


class RiesgoPaisBlock(_ContractModel):
    value: int
    variation: float
    variation_pct: float
    date: str


class LaborMarketBlock(_ContractModel):
    unemployment: float
    employment: float
    activity: float
    date: str


class PovertyBlock(_ContractModel):
    poverty_rate: float
    indigence_rate: float
    poverty_population: int
    indigence_population: int
    period: str
    date: str


class CalendarEventBlock(_ContractModel):
    date: str
    day_week: str
    indicator: str
    period: str
    source: str


class SectorBlock(_ContractModel):
    sector: str
    annual_variation: float
    index_value: float


class DashboardMetadata(_ContractModel):
    source: str
    timestamp: str
    successful_apis: int
    failed_apis: int
    api_status: dict[str, str]
    sources: dict[str, str]
    has_api_key: bool = False
    error: Optional[str] = None


class DashboardResponse(_ContractModel):
    exchange_rates: ExchangeRatesBlock = Field(alias="exchangeRates")
    inflation: InflationBlock
    emae: EmaeBlock
    riesgo_pais: RiesgoPaisBlock = Field(alias="riesgoPais")
    labor_market: LaborMarketBlock = Field(alias="laborMarket")
    poverty: PovertyBlock
    calendar: list[CalendarEventBlock]
    emae_sectors: list[SectorBlock] = Field(alias="emaeSectors")
    metadata: DashboardMetadata


class HistoricalMetadata(_ContractModel):
    source: str
    timestamp: str
    dollar_points: int = Field(alias="dollarPoints")
    inflation_points: int = Field(alias="inflationPoints")
    dollar_source: Optional[str] = Field(default=None, alias="dollarSource")
    inflation_source: Optional[str] = Field(default=None, alias="inflationSource")
    parameters: dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None


class HistoricalResponse(_ContractModel):
    dollar_history: list[DollarHistoryPoint] = Field(alias="dollarHistory")
    inflation_history: list[InflationHistoryPoint] = Field(alias="inflationHistory")
    metadata: HistoricalMetadata


class ProbeResult(_ContractModel):
    name: str
    url: str
    status: Any = "unknown"
    success: bool = False
    timing: float = 0.0
    response: Any = None
    response_text: Optional[str] = Field(default=None, alias="responseText")
    error: Optional[str] = None
    parse_error: Optional[str] = Field(default=None, alias="parseError")


class ProbeSummary(_ContractModel):
    total: int
    successful: int
    failed: int
    avg_response_time: float = Field(alias="avgResponseTime")
    api_key_available: bool
    api_key_used: bool


class DebugResponse(_ContractModel):
    timestamp: str
    tests: list[ProbeResult]
    summary: ProbeSummary


class BCRAExchangeBlock(_ContractModel):
    oficial: float
    blue: float
    date: str


class InterestRateBlock(_ContractModel):
    rate: float
    date: str


class BCRAMetadata(_ContractModel):
    source: str
    usd_variable_id: Optional[int] = Field(default=None, alias="usdVariableId")
    rate_variable_id: Optional[int] = Field(default=None, alias="rateVariableId")
    error: Optional[str] = None


class BCRAResponse(_ContractModel):
    exchange_rate: BCRAExchangeBlock = Field(alias="exchangeRate")
    interest_rate: InterestRateBlock = Field(alias="interestRate")
    metadata: BCRAMetadata


class ExchangeHistoryMetadata(_ContractModel):
    source: str
    real_data_points: int = Field(default=0, alias="realDataPoints")
    variable_id: Optional[int] = Field(default=None, alias="variableId")
    description: Optional[str] = None
    error: Optional[str] = None


class ExchangeHistoryResponse(_ContractModel):
    data: list[DollarHistoryPoint]
    metadata: ExchangeHistoryMetadata


class SeriesInflationBlock(_ContractModel):
    monthly: float
    annual: float
    date: str


class SeriesMetadata(_ContractModel):
    source: str
    series_id: Optional[str] = Field(default=None, alias="seriesId")
    series_title: Optional[str] = Field(default=None, alias="seriesTitle")
    last_update: str = Field(alias="lastUpdate")
    error: Optional[str] = None


class SeriesResponse(_ContractModel):
    inflation: SeriesInflationBlock
    metadata: SeriesMetadata


class InflationHistoryMetadata(_ContractModel):
    source: str
    series_id: Optional[str] = Field(default=None, alias="seriesId")
    total_points: int = Field(alias="totalPoints")
    error: Optional[str] = None


class InflationHistoryResponse(_ContractModel):
    data: list[InflationHistoryPoint]
    metadata: InflationHistoryMetadata


class BudgetMetadata(_ContractModel):
    source: str
    error: Optional[str] = None


class BudgetResponse(_ContractModel):
    executed: float
    total: float
    percentage: float
    year: int
    metadata: BudgetMetadata


class BudgetArea(_ContractModel):
    name: str
    executed: float
    total: float


class BudgetExecutionResponse(_ContractModel):
    executed: float
    total: float
    areas: list[BudgetArea]
    metadata: BudgetMetadata


__all__ = [
    "BCRAExchangeBlock",
    "BCRAMetadata",
    "BCRAResponse",
    "BudgetArea",
    "BudgetExecutionResponse",
    "BudgetMetadata",
    "BudgetResponse",
    "CalendarEventBlock",
    "DashboardMetadata",
    "DashboardResponse",
    "DebugResponse",
    "EmaeBlock",
    "ExchangeHistoryMetadata",
    "ExchangeHistoryResponse",
    "ExchangeRatesBlock",
    "HistoricalMetadata",
    "HistoricalResponse",
    "InflationBlock",
    "InflationHistoryMetadata",
    "InflationHistoryResponse",
    "InterestRateBlock",
    "LaborMarketBlock",
    "PovertyBlock",
    "ProbeResult",
    "ProbeSummary",
    "RiesgoPaisBlock",
    "SectorBlock",
    "SeriesInflationBlock",
    "SeriesMetadata",
    "SeriesResponse",
]

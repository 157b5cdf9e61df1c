"""Pydantic schema exports."""

from .indicators import (
    ActivityIndexSnapshot,
    BudgetSnapshot,
    CalendarEvent,
    CalendarSnapshot,
    CountryRiskSnapshot,
    DollarHistoryPoint,
    ExchangeRateSnapshot,
    Indicator,
    InflationHistoryPoint,
    InflationSnapshot,
    InterestRateSnapshot,
    LaborMarketSnapshot,
    PovertySnapshot,
    SectorActivity,
    SectorBreakdownSnapshot,
    Snapshot,
)
from .responses import (
    BCRAExchangeBlock,
    BCRAMetadata,
    BCRAResponse,
    BudgetArea,
    BudgetExecutionResponse,
    BudgetMetadata,
    BudgetResponse,
    CalendarEventBlock,
    DashboardMetadata,
    DashboardResponse,
    DebugResponse,
    EmaeBlock,
    ExchangeHistoryMetadata,
    ExchangeHistoryResponse,
    ExchangeRatesBlock,
    HistoricalMetadata,
    HistoricalResponse,
    InflationBlock,
    InflationHistoryMetadata,
    InflationHistoryResponse,
    InterestRateBlock,
    LaborMarketBlock,
    PovertyBlock,
    ProbeResult,
    ProbeSummary,
    RiesgoPaisBlock,
    SectorBlock,
    SeriesInflationBlock,
    SeriesMetadata,
    SeriesResponse,
)

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

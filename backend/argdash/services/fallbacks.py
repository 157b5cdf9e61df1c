"""Fallback snapshots and synthetic series served when upstream data is unavailable.

Snapshot fallbacks are fixed constants so a failed indicator always renders the
same documented numbers. Series generators perturb values with the default
``random`` source; they exist for chart continuity and carry no reproducibility
guarantee.
"""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta
from typing import Callable, Sequence

from argdash.schemas.indicators import (
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
    utcnow,
)

FALLBACK_SOURCE = "Fallback data"

FALLBACK_EXCHANGE_RATES = {
    "oficial": 1290.0,
    "blue": 1325.0,
    "mep": 1305.0,
    "ccl": 1315.0,
    "tarjeta": 1677.0,
}
FALLBACK_INFLATION = {
    "monthly": 2.2,
    "annual": 84.5,
    "accumulated": 15.1,
    "index": 8855.57,
}
FALLBACK_EMAE = {
    "monthly": -0.07,
    "annual": 4.98,
    "index": 164.58,
    "seasonally_adjusted": 153.07,
    "trend_cycle": 154.09,
}
FALLBACK_COUNTRY_RISK = {"points": 850, "variation": -15.0, "variation_pct": -1.7}
FALLBACK_LABOR_MARKET = {"unemployment": 5.2, "employment": 42.8, "activity": 45.1}
FALLBACK_POVERTY = {
    "poverty_rate": 41.7,
    "indigence_rate": 11.9,
    "poverty_population": 19_500_000,
    "indigence_population": 5_600_000,
    "period": "Primer semestre 2024",
}
FALLBACK_INTEREST_RATE = 35.0
FALLBACK_BUDGET = {"total": 50_000_000_000_000.0, "executed": 32_500_000_000_000.0, "percentage": 65.0}

# Blue-market premium over the official rate implied by the fallback quotes
BLUE_PREMIUM = FALLBACK_EXCHANGE_RATES["blue"] / FALLBACK_EXCHANGE_RATES["oficial"]

FALLBACK_SECTORS: tuple[tuple[str, float, float], ...] = (
    ("Agricultura, ganadería, caza y silvicultura", 2.1, 142.3),
    ("Pesca", -1.5, 98.7),
    ("Explotación de minas y canteras", 5.2, 156.8),
    ("Industria manufacturera", 3.8, 187.4),
    ("Electricidad, gas y agua", 1.9, 134.6),
    ("Construcción", -2.3, 78.9),
    ("Comercio mayorista, minorista y reparaciones", 4.1, 165.2),
    ("Hoteles y restaurantes", 6.7, 201.3),
    ("Transporte, almacenamiento y comunicaciones", 2.8, 149.1),
    ("Intermediación financiera", 8.9, 223.7),
    ("Actividades inmobiliarias, empresariales y de alquiler", 3.5, 172.8),
    ("Administración pública y defensa", 1.2, 128.4),
    ("Enseñanza", 0.8, 115.9),
    ("Servicios sociales y de salud", 2.4, 138.7),
)

# Monthly CPI variation published by INDEC for 2024
REFERENCE_INFLATION_SERIES: tuple[InflationHistoryPoint, ...] = tuple(
    InflationHistoryPoint(month=label, value=value, date=date.fromisoformat(day))
    for label, value, day in (
        ("Ene 24", 20.6, "2024-01-31"),
        ("Feb 24", 13.2, "2024-02-29"),
        ("Mar 24", 11.0, "2024-03-31"),
        ("Abr 24", 8.8, "2024-04-30"),
        ("May 24", 4.2, "2024-05-31"),
        ("Jun 24", 4.6, "2024-06-30"),
        ("Jul 24", 4.0, "2024-07-31"),
        ("Ago 24", 4.2, "2024-08-31"),
        ("Sep 24", 3.5, "2024-09-30"),
        ("Oct 24", 2.7, "2024-10-31"),
        ("Nov 24", 2.4, "2024-11-30"),
        ("Dic 24", 2.5, "2024-12-31"),
    )
)

_WEEKDAYS_ES = ("Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo")
_MONTHS_ES = (
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
)


def fallback_exchange_rates(as_of: datetime | None = None) -> ExchangeRateSnapshot:
    rates = FALLBACK_EXCHANGE_RATES
    return ExchangeRateSnapshot(
        official_rate=rates["oficial"],
        blue_rate=rates["blue"],
        mep_rate=rates["mep"],
        ccl_rate=rates["ccl"],
        card_rate=rates["tarjeta"],
        as_of=as_of or utcnow(),
    )


def fallback_inflation(as_of: datetime | None = None) -> InflationSnapshot:
    values = FALLBACK_INFLATION
    return InflationSnapshot(
        monthly_pct=values["monthly"],
        annual_pct=values["annual"],
        accumulated_pct=values["accumulated"],
        index_value=values["index"],
        as_of=as_of or utcnow(),
    )


def fallback_activity(as_of: datetime | None = None) -> ActivityIndexSnapshot:
    values = FALLBACK_EMAE
    return ActivityIndexSnapshot(
        monthly_pct=values["monthly"],
        annual_pct=values["annual"],
        index_value=values["index"],
        seasonally_adjusted=values["seasonally_adjusted"],
        trend_cycle=values["trend_cycle"],
        as_of=as_of or utcnow(),
    )


def fallback_country_risk(as_of: datetime | None = None) -> CountryRiskSnapshot:
    values = FALLBACK_COUNTRY_RISK
    return CountryRiskSnapshot(
        points=values["points"],
        delta_points=values["variation"],
        delta_pct=values["variation_pct"],
        as_of=as_of or utcnow(),
    )


def fallback_labor_market(as_of: datetime | None = None) -> LaborMarketSnapshot:
    values = FALLBACK_LABOR_MARKET
    return LaborMarketSnapshot(
        unemployment_pct=values["unemployment"],
        employment_pct=values["employment"],
        activity_pct=values["activity"],
        as_of=as_of or utcnow(),
    )


def fallback_poverty(as_of: datetime | None = None) -> PovertySnapshot:
    values = FALLBACK_POVERTY
    return PovertySnapshot(
        poverty_pct=values["poverty_rate"],
        indigence_pct=values["indigence_rate"],
        poverty_population=values["poverty_population"],
        indigence_population=values["indigence_population"],
        period=values["period"],
        as_of=as_of or utcnow(),
    )


def _release_period(day: datetime, months_back: int) -> str:
    month_index = (day.month - 1 - months_back) % 12
    year = day.year if day.month - months_back > 0 else day.year - 1
    return f"{_MONTHS_ES[month_index]} {year}"


def fallback_calendar(as_of: datetime | None = None) -> CalendarSnapshot:
    """Two upcoming INDEC releases relative to ``as_of``."""

    now = as_of or utcnow()
    ipc_day = now + timedelta(days=3)
    emae_day = now + timedelta(days=7)
    events = [
        CalendarEvent(
            date=ipc_day,
            day_week=_WEEKDAYS_ES[ipc_day.weekday()],
            indicator="IPC - Índice de Precios al Consumidor",
            period=_release_period(now, 1),
        ),
        CalendarEvent(
            date=emae_day,
            day_week=_WEEKDAYS_ES[emae_day.weekday()],
            indicator="EMAE - Estimador Mensual de Actividad Económica",
            period=_release_period(now, 2),
        ),
    ]
    return CalendarSnapshot(events=events, as_of=now)


def fallback_sectors(as_of: datetime | None = None) -> SectorBreakdownSnapshot:
    sectors = [
        SectorActivity(sector=name, annual_pct=annual, index_value=index)
        for name, annual, index in FALLBACK_SECTORS
    ]
    return SectorBreakdownSnapshot(sectors=sectors, as_of=as_of or utcnow())


def fallback_interest_rate(as_of: datetime | None = None) -> InterestRateSnapshot:
    return InterestRateSnapshot(rate_pct=FALLBACK_INTEREST_RATE, as_of=as_of or utcnow())


def fallback_budget(year: int, as_of: datetime | None = None) -> BudgetSnapshot:
    return BudgetSnapshot(
        executed=FALLBACK_BUDGET["executed"],
        total=FALLBACK_BUDGET["total"],
        percentage=FALLBACK_BUDGET["percentage"],
        year=year,
        as_of=as_of or utcnow(),
    )


_GENERATORS: dict[Indicator, Callable[[datetime | None], Snapshot]] = {
    Indicator.EXCHANGE_RATES: fallback_exchange_rates,
    Indicator.INFLATION: fallback_inflation,
    Indicator.ACTIVITY: fallback_activity,
    Indicator.COUNTRY_RISK: fallback_country_risk,
    Indicator.LABOR_MARKET: fallback_labor_market,
    Indicator.POVERTY: fallback_poverty,
    Indicator.CALENDAR: fallback_calendar,
    Indicator.EMAE_SECTORS: fallback_sectors,
}


def generate_fallback(indicator: Indicator, as_of: datetime | None = None) -> Snapshot:
    """Return the documented fallback snapshot for ``indicator``."""

    return _GENERATORS[Indicator(indicator)](as_of)


def reference_inflation_history(months: int) -> list[InflationHistoryPoint]:
    """Return the last ``months`` entries of the reference INDEC series, oldest first."""

    if months <= 0:
        return []
    return [point.model_copy() for point in REFERENCE_INFLATION_SERIES[-months:]]


def synthetic_dollar_history(
    days: int,
    *,
    end: date | None = None,
    base_rate: float | None = None,
    rng: random.Random | None = None,
) -> list[DollarHistoryPoint]:
    """Generate one point per calendar day ending on ``end`` with blue above official."""

    rng = rng or random.Random()
    last_day = end or date.today()
    base = base_rate if base_rate is not None else FALLBACK_EXCHANGE_RATES["oficial"]
    points: list[DollarHistoryPoint] = []
    for offset in range(days - 1, -1, -1):
        oficial = base + (rng.random() - 0.5) * 20
        blue = oficial * (1.01 + rng.random() * 0.04)
        points.append(
            DollarHistoryPoint(
                date=last_day - timedelta(days=offset),
                oficial=round(oficial, 2),
                blue=round(blue, 2),
            )
        )
    return points


def fill_exchange_window(
    points: Sequence[DollarHistoryPoint],
    *,
    days: int = 30,
    end: date | None = None,
    rng: random.Random | None = None,
) -> list[DollarHistoryPoint]:
    """Cover every day of the window, keeping real points and interpolating the rest."""

    rng = rng or random.Random()
    last_day = end or date.today()
    by_day = {point.date: point for point in points}
    base = points[-1].oficial if points else FALLBACK_EXCHANGE_RATES["oficial"]
    filled: list[DollarHistoryPoint] = []
    for offset in range(days - 1, -1, -1):
        day = last_day - timedelta(days=offset)
        existing = by_day.get(day)
        if existing is not None:
            filled.append(existing)
            continue
        oficial = base + (rng.random() - 0.5) * 20
        filled.append(
            DollarHistoryPoint(
                date=day,
                oficial=round(oficial, 2),
                blue=round(oficial * BLUE_PREMIUM, 2),
            )
        )
    return filled


def pad_monthly_series(
    points: Sequence[InflationHistoryPoint],
    *,
    size: int = 12,
    rng: random.Random | None = None,
) -> list[InflationHistoryPoint]:
    """Extend ``points`` with small variations until it holds ``size`` entries, then keep the last ``size``."""

    rng = rng or random.Random()
    padded = list(points)
    while len(padded) < size:
        last_value = padded[-1].value if padded else FALLBACK_INFLATION["monthly"]
        value = max(0.0, last_value + (rng.random() - 0.5))
        padded.append(InflationHistoryPoint(month=f"Mes {len(padded) + 1}", value=round(value, 2)))
    return padded[-size:]


__all__ = [
    "BLUE_PREMIUM",
    "FALLBACK_BUDGET",
    "FALLBACK_COUNTRY_RISK",
    "FALLBACK_EMAE",
    "FALLBACK_EXCHANGE_RATES",
    "FALLBACK_INFLATION",
    "FALLBACK_INTEREST_RATE",
    "FALLBACK_LABOR_MARKET",
    "FALLBACK_POVERTY",
    "FALLBACK_SECTORS",
    "FALLBACK_SOURCE",
    "REFERENCE_INFLATION_SERIES",
    "fallback_activity",
    "fallback_budget",
    "fallback_calendar",
    "fallback_country_risk",
    "fallback_exchange_rates",
    "fallback_inflation",
    "fallback_interest_rate",
    "fallback_labor_market",
    "fallback_poverty",
    "fallback_sectors",
    "fill_exchange_window",
    "generate_fallback",
    "pad_monthly_series",
    "reference_inflation_history",
    "synthetic_dollar_history",
]

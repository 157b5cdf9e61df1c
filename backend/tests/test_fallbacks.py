"""Fallback snapshots and synthetic series."""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta, timezone

import pytest

from argdash.schemas.indicators import DollarHistoryPoint, Indicator, InflationHistoryPoint
from argdash.services.aggregator import ALL_INDICATORS
from argdash.services.fallbacks import (
    FALLBACK_SECTORS,
    fallback_calendar,
    fill_exchange_window,
    generate_fallback,
    pad_monthly_series,
    reference_inflation_history,
    synthetic_dollar_history,
)


def test_every_indicator_has_a_fallback():
    for indicator in ALL_INDICATORS:
        snapshot = generate_fallback(indicator)
        assert snapshot.as_of is not None


def test_documented_exchange_rate_and_risk_constants():
    rates = generate_fallback(Indicator.EXCHANGE_RATES)
    assert (rates.official_rate, rates.blue_rate, rates.mep_rate, rates.ccl_rate, rates.card_rate) == (
        1290,
        1325,
        1305,
        1315,
        1677,
    )
    risk = generate_fallback(Indicator.COUNTRY_RISK)
    assert (risk.points, risk.delta_points, risk.delta_pct) == (850, -15, -1.7)
    sectors = generate_fallback(Indicator.EMAE_SECTORS)
    assert len(sectors.sectors) == len(FALLBACK_SECTORS) == 14


def test_calendar_lists_upcoming_releases():
    now = datetime(2026, 10, 18, 12, tzinfo=timezone.utc)
    calendar = fallback_calendar(now)
    assert [event.date - now for event in calendar.events] == [timedelta(days=3), timedelta(days=7)]
    assert calendar.events[0].indicator.startswith("IPC")
    assert calendar.events[0].period == "Septiembre 2026"
    assert calendar.events[1].period == "Agosto 2026"
    assert calendar.events[0].day_week == "Miércoles"


def test_calendar_period_wraps_year():
    calendar = fallback_calendar(datetime(2026, 1, 10, tzinfo=timezone.utc))
    assert calendar.events[0].period == "Diciembre 2025"
    assert calendar.events[1].period == "Noviembre 2025"


def test_synthetic_dollar_history_shape():
    end = date(2026, 10, 18)
    points = synthetic_dollar_history(30, end=end, rng=random.Random(7))
    assert len(points) == 30
    assert points[0].date == end - timedelta(days=29)
    assert points[-1].date == end
    for point in points:
        assert point.oficial < point.blue
        assert 1280 <= point.oficial <= 1300


def test_reference_inflation_history_returns_tail_in_order():
    points = reference_inflation_history(6)
    assert [p.month for p in points] == ["Jul 24", "Ago 24", "Sep 24", "Oct 24", "Nov 24", "Dic 24"]
    assert [p.value for p in points] == [4.0, 4.2, 3.5, 2.7, 2.4, 2.5]
    assert reference_inflation_history(0) == []


def test_fill_exchange_window_keeps_real_points():
    end = date(2026, 10, 18)
    real = [
        DollarHistoryPoint(date=end - timedelta(days=2), oficial=1400.0, blue=1450.0),
        DollarHistoryPoint(date=end, oficial=1410.0, blue=1460.0),
    ]
    filled = fill_exchange_window(real, days=30, end=end, rng=random.Random(1))
    assert len(filled) == 30
    by_day = {p.date: p for p in filled}
    assert by_day[end].oficial == 1410.0
    assert by_day[end - timedelta(days=2)].blue == 1450.0
    interpolated = by_day[end - timedelta(days=1)]
    assert 1400 <= interpolated.oficial <= 1420
    assert interpolated.blue > interpolated.oficial


def test_pad_monthly_series_reaches_exact_size():
    base = [InflationHistoryPoint(month="Ene 25", value=2.2), InflationHistoryPoint(month="Feb 25", value=2.4)]
    padded = pad_monthly_series(base, size=12, rng=random.Random(3))
    assert len(padded) == 12
    assert padded[0].month == "Ene 25"
    assert padded[2].month == "Mes 3"
    assert all(p.value >= 0 for p in padded)

    longer = [InflationHistoryPoint(month=f"M{i}", value=float(i)) for i in range(15)]
    assert [p.month for p in pad_monthly_series(longer, size=12)] == [f"M{i}" for i in range(3, 15)]


@pytest.mark.parametrize("months", [1, 12, 24])
def test_reference_history_never_exceeds_series(months):
    assert len(reference_inflation_history(months)) == min(months, 12)

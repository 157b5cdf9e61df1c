"""es-AR formatting helpers."""

from __future__ import annotations

from datetime import date

import pytest

from argdash.dashboard.formatting import (
    blue_gap_pct,
    change_color,
    change_icon,
    format_currency,
    format_date,
    format_number,
    format_percentage,
)


@pytest.mark.parametrize(
    "value, expected",
    [(1290, "$ 1.290,00"), (1677.5, "$ 1.677,50"), (0, "$ 0,00"), (-15, "-$ 15,00")],
)
def test_format_currency(value, expected):
    assert format_currency(value) == expected


def test_format_percentage():
    assert format_percentage(2.2) == "2,20 %"
    assert format_percentage(84.5, 1) == "84,5 %"
    assert format_percentage(-1.7) == "-1,70 %"


def test_format_number():
    assert format_number(19_500_000) == "19.500.000"
    assert format_number(164.58) == "164,58"
    assert format_number(850) == "850"


def test_format_date():
    assert format_date("2026-10-18") == "18 de octubre de 2026"
    assert format_date("2024-01-05T10:00:00Z") == "05 de enero de 2024"
    assert format_date(date(2024, 12, 31)) == "31 de diciembre de 2024"
    assert format_date("pronto") == "pronto"


@pytest.mark.parametrize("value, color, icon", [(1.5, "green", "↗"), (-0.2, "red", "↘"), (0, "grey50", "→")])
def test_change_color_and_icon(value, color, icon):
    assert change_color(value) == color
    assert change_icon(value) == icon


def test_blue_gap():
    assert blue_gap_pct(1290, 1325) == pytest.approx(2.713, rel=1e-3)
    assert blue_gap_pct(0, 1325) == 0.0

"""es-AR number and date formatting for the terminal dashboard."""

from __future__ import annotations

from datetime import date, datetime
from typing import Union

_MONTHS_ES = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)


def _group(value: float, decimals: int) -> str:
    # Swap the separators of the en-US rendering: 1,290.50 -> 1.290,50
    text = f"{abs(value):,.{decimals}f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(value: float) -> str:
    """``1290`` -> ``"$ 1.290,00"``."""

    sign = "-" if value < 0 else ""
    return f"{sign}$ {_group(value, 2)}"


def format_percentage(value: float, decimals: int = 2) -> str:
    """``2.2`` -> ``"2,20 %"``; the input is already a percentage."""

    sign = "-" if value < 0 else ""
    return f"{sign}{_group(value, decimals)} %"


def format_number(value: float, max_decimals: int = 3) -> str:
    """``19500000`` -> ``"19.500.000"``, ``164.58`` -> ``"164,58"``."""

    sign = "-" if value < 0 else ""
    text = _group(round(value, max_decimals), max_decimals)
    if "," in text:
        text = text.rstrip("0").rstrip(",")
    return f"{sign}{text}"


def format_date(value: Union[str, date, datetime]) -> str:
    """``"2026-10-18"`` -> ``"18 de octubre de 2026"``; unparseable input is returned unchanged."""

    if isinstance(value, (date, datetime)):
        day = value
    else:
        try:
            day = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return str(value)
    return f"{day.day:02d} de {_MONTHS_ES[day.month - 1]} de {day.year}"


def change_color(value: float) -> str:
    if value > 0:
        return "green"
    if value < 0:
        return "red"
    return "grey50"


def change_icon(value: float) -> str:
    if value > 0:
        return "↗"
    if value < 0:
        return "↘"
    return "→"


def blue_gap_pct(oficial: float, blue: float) -> float:
    """Blue-market premium over the official rate, in percent."""

    if not oficial:
        return 0.0
    return (blue - oficial) / oficial * 100


__all__ = [
    "blue_gap_pct",
    "change_color",
    "change_icon",
    "format_currency",
    "format_date",
    "format_number",
    "format_percentage",
]

"""Helpers mapping the many upstream payload shapes onto plain records."""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping

_ENVELOPE_KEYS = ("data", "results")


def unwrap_records(payload: Any) -> list[dict[str, Any]]:
    """Return the list of record dicts carried by ``payload``.

    Accepts ``{"success": ..., "data": [...]}``, ``{"data": {...}}``,
    ``{"results": [...]}``, a bare list or a bare object.
    """

    body = payload
    if isinstance(payload, Mapping):
        for key in _ENVELOPE_KEYS:
            if key in payload:
                body = payload[key]
                break
    if body is None:
        return []
    if isinstance(body, Mapping):
        return [dict(body)]
    if isinstance(body, list):
        return [dict(item) for item in body if isinstance(item, Mapping)]
    return []


def pick(record: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    """Return the first non-empty value among ``names``."""

    for name in names:
        value = record.get(name)
        if value is not None and value != "":
            return value
    return default


def _finite(value: float) -> float | None:
    return value if math.isfinite(value) else None


def to_float(value: Any) -> float | None:
    """Coerce upstream numbers; NaN and infinities count as missing."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _finite(float(value))
    text = str(value).strip().replace("%", "")
    if not text:
        return None
    # "1.290,50" style numbers
    if "," in text and text.rfind(",") > text.rfind("."):
        text = text.replace(".", "").replace(",", ".")
    try:
        return _finite(float(text))
    except ValueError:
        return None


def pick_float(record: Mapping[str, Any], *names: str) -> float | None:
    for name in names:
        value = to_float(record.get(name))
        if value is not None:
            return value
    return None


def parse_timestamp(raw: Any) -> datetime | None:
    """Parse the date formats seen across providers; naive values are taken as UTC."""

    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, date):
        parsed = datetime(raw.year, raw.month, raw.day)
    else:
        text = str(raw).strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
            for fmt in ("%Y-%m-%d", "%d/%m/%Y", "%Y%m%d", "%Y-%m"):
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
            if parsed is None:
                return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def latest_record(records: Iterable[Mapping[str, Any]], *date_keys: str) -> dict[str, Any] | None:
    """Return the record with the most recent date, or the last one when undated."""

    items = [dict(r) for r in records]
    if not items:
        return None
    keys = date_keys or ("date", "fecha")
    dated = [(parse_timestamp(pick(item, *keys)), index, item) for index, item in enumerate(items)]
    with_dates = [entry for entry in dated if entry[0] is not None]
    if not with_dates:
        return items[-1]
    return max(with_dates, key=lambda entry: (entry[0], entry[1]))[2]


__all__ = [
    "latest_record",
    "parse_timestamp",
    "pick",
    "pick_float",
    "to_float",
    "unwrap_records",
]

"""datos.gob.ar time-series API client."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional, Sequence

import httpx

from argdash.config import AppSettings

from .http import UpstreamFetchError, UpstreamParseError, build_headers, get_json
from .normalize import parse_timestamp, pick, to_float

logger = logging.getLogger(__name__)

SOURCE = "Series de Tiempo API"

# National CPI series, tried in order
INFLATION_SERIES_IDS = (
    "148.3_INIVELNAL_DICI_M_26",
    "148.3_INIVELNAL_DICI_M_19",
    "103.1_I2N_2016_M_19",
)


@dataclass
class SeriesData:
    series_id: str
    values: list[tuple[date, float]] = field(default_factory=list)
    title: Optional[str] = None
    units: Optional[str] = None


def parse_series(payload: Any, series_id: str) -> SeriesData:
    """Accept ``data: [[date, value], ...]`` and ``data: [{values: [{date, value}]}]``."""

    if not isinstance(payload, Mapping):
        raise UpstreamParseError("Series payload is not an object", url=series_id)
    rows = payload.get("data") or []
    meta = payload.get("meta")
    title = units = None
    if isinstance(meta, list) and len(meta) > 1 and isinstance(meta[1], Mapping):
        info = meta[1].get("field") or {}
        title = info.get("description") or info.get("title")
        units = info.get("units")

    raw_points: list[tuple[Any, Any]] = []
    if rows and isinstance(rows[0], Mapping):
        first = rows[0]
        title = first.get("series_title", title)
        units = first.get("series_units", units)
        for item in first.get("values") or []:
            if isinstance(item, Mapping):
                raw_points.append((pick(item, "date", "fecha"), pick(item, "value", "valor")))
    else:
        for row in rows:
            if isinstance(row, Sequence) and not isinstance(row, str) and len(row) >= 2:
                raw_points.append((row[0], row[1]))

    values: list[tuple[date, float]] = []
    for raw_date, raw_value in raw_points:
        stamp = parse_timestamp(raw_date)
        value = to_float(raw_value)
        if stamp is None or value is None:
            continue
        values.append((stamp.date(), value))
    values.sort()
    return SeriesData(series_id=series_id, values=values, title=title, units=units)


class SeriesClient:
    def __init__(self, settings: AppSettings, client: httpx.AsyncClient) -> None:
        self._client = client
        self._base_url = settings.series_base_url.rstrip("/")
        self._headers = build_headers(settings)

    def url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def fetch_series(self, series_id: str, *, last: int = 12) -> SeriesData:
        payload = await get_json(
            self._client,
            self.url("/series"),
            params={"ids": series_id, "last": last, "format": "json"},
            headers=self._headers,
        )
        return parse_series(payload, series_id)

    async def first_available(
        self, series_ids: Sequence[str] = INFLATION_SERIES_IDS, *, last: int = 12
    ) -> Optional[SeriesData]:
        """Return the first series id that yields values, or ``None`` when none does."""

        for series_id in series_ids:
            try:
                data = await self.fetch_series(series_id, last=last)
            except UpstreamFetchError as exc:
                logger.info("Series %s unavailable: %s", series_id, exc)
                continue
            if data.values:
                return data
        return None


__all__ = ["INFLATION_SERIES_IDS", "SOURCE", "SeriesClient", "SeriesData", "parse_series"]

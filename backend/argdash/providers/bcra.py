"""BCRA statistics API (v3) client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional

import httpx

from argdash.config import AppSettings

from .http import UpstreamParseError, build_headers, get_json
from .normalize import parse_timestamp, pick, pick_float, to_float, unwrap_records

logger = logging.getLogger(__name__)

SOURCE = "BCRA API v3"


@dataclass(frozen=True)
class BCRAVariable:
    id: int
    description: str


@dataclass(frozen=True)
class BCRAObservation:
    date: date
    value: float
    as_of: datetime


def parse_variables(payload: Any) -> list[BCRAVariable]:
    variables: list[BCRAVariable] = []
    for record in unwrap_records(payload):
        raw_id = to_float(pick(record, "idVariable", "id_variable", "id"))
        if raw_id is None:
            continue
        variables.append(
            BCRAVariable(id=int(raw_id), description=str(pick(record, "descripcion", "description", default="")))
        )
    return variables


def parse_observations(payload: Any) -> list[BCRAObservation]:
    """Observations sorted by date; rows without a date or value are skipped."""

    observations: list[BCRAObservation] = []
    for record in unwrap_records(payload):
        stamp = parse_timestamp(pick(record, "fecha", "date"))
        value = pick_float(record, "valor", "value")
        if stamp is None or value is None:
            continue
        observations.append(BCRAObservation(date=stamp.date(), value=value, as_of=stamp))
    observations.sort(key=lambda obs: obs.date)
    return observations


def find_exchange_variable(variables: Iterable[BCRAVariable]) -> Optional[BCRAVariable]:
    """Prefer a USD "tipo de cambio" variable, else any variable mentioning USD."""

    items = list(variables)
    for variable in items:
        text = variable.description.lower()
        if "tipo de cambio" in text and "usd" in text:
            return variable
    for variable in items:
        if "usd" in variable.description.lower():
            return variable
    return None


def find_rate_variable(variables: Iterable[BCRAVariable]) -> Optional[BCRAVariable]:
    for variable in variables:
        text = variable.description.lower()
        if "tasa" in text or "leliq" in text:
            return variable
    return None


class BCRAClient:
    def __init__(self, settings: AppSettings, client: httpx.AsyncClient) -> None:
        self._client = client
        self._base_url = settings.bcra_base_url.rstrip("/")
        self._headers = build_headers(settings)

    def url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def variables(self) -> list[BCRAVariable]:
        url = self.url("/Metadatos")
        variables = parse_variables(await get_json(self._client, url, headers=self._headers))
        if not variables:
            raise UpstreamParseError("BCRA metadata listed no variables", url=url)
        return variables

    async def series(self, variable_id: int, start: date, end: date) -> list[BCRAObservation]:
        url = self.url(f"/Datos/{variable_id}/{start.isoformat()}/{end.isoformat()}")
        return parse_observations(await get_json(self._client, url, headers=self._headers))


__all__ = [
    "BCRAClient",
    "BCRAObservation",
    "BCRAVariable",
    "SOURCE",
    "find_exchange_variable",
    "find_rate_variable",
    "parse_observations",
    "parse_variables",
]

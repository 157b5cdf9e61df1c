"""Open budget execution API client."""

from __future__ import annotations

from typing import Any

import httpx

from argdash.config import AppSettings
from argdash.schemas.indicators import BudgetSnapshot

from .http import UpstreamNotConfiguredError, UpstreamParseError, build_headers, get_json
from .normalize import pick_float, unwrap_records

SOURCE = "Presupuesto Abierto API"


def parse_execution(payload: Any, year: int, *, url: str = "/ejecucion") -> BudgetSnapshot:
    """Sum executed and total credit across the returned rows."""

    executed = total = 0.0
    percentage = None
    rows = 0
    for record in unwrap_records(payload):
        row_executed = pick_float(record, "executed", "devengado", "credito_devengado")
        row_total = pick_float(record, "total", "credito_vigente", "vigente")
        if row_executed is None and row_total is None:
            continue
        rows += 1
        executed += row_executed or 0.0
        total += row_total or 0.0
        percentage = pick_float(record, "percentage", "porcentaje")
    if not rows or total <= 0:
        raise UpstreamParseError("Budget payload carried no executed/total amounts", url=url)
    return BudgetSnapshot(
        executed=executed,
        total=total,
        percentage=percentage if rows == 1 and percentage is not None else executed / total * 100,
        year=year,
    )


class PresupuestoClient:
    def __init__(self, settings: AppSettings, client: httpx.AsyncClient) -> None:
        self._client = client
        self._base_url = (settings.presupuesto_base_url or "").rstrip("/")
        self._headers = build_headers(settings, bearer_token=settings.presupuesto_api_token)

    @property
    def configured(self) -> bool:
        return bool(self._base_url)

    def url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def execution(self, year: int) -> BudgetSnapshot:
        if not self.configured:
            raise UpstreamNotConfiguredError("Budget API base URL is not configured", url="")
        url = self.url("/ejecucion")
        payload = await get_json(
            self._client,
            url,
            params={"ejercicio": year, "formato": "json"},
            headers=self._headers,
        )
        return parse_execution(payload, year, url=url)


__all__ = ["PresupuestoClient", "SOURCE", "parse_execution"]

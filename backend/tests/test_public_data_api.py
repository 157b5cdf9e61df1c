"""BCRA, datos.gob.ar and budget route tests."""

from __future__ import annotations

import asyncio
import time
from datetime import date, timedelta

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from conftest import json_routes

METADATOS = "/estadisticas/v3/Metadatos"
VARIABLES = [
    {"idVariable": 1, "descripcion": "Reservas Internacionales del BCRA"},
    {"idVariable": 4, "descripcion": "Tipo de Cambio Minorista ($ por USD) Comunicación B 9791"},
    {"idVariable": 6, "descripcion": "Tasa de Política Monetaria (en % n.a.)"},
]


async def _get(app, path: str) -> httpx.Response:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        return await client.get(path)


def _bcra_handler(exchange_rows, rate_rows=None):
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == METADATOS:
            return httpx.Response(200, json={"status": 200, "results": VARIABLES})
        if path.startswith("/estadisticas/v3/Datos/4/"):
            return httpx.Response(200, json={"results": exchange_rows})
        if path.startswith("/estadisticas/v3/Datos/6/") and rate_rows is not None:
            return httpx.Response(200, json=rate_rows)
        raise httpx.ConnectError("connection refused", request=request)

    return handler


async def test_bcra_latest_values(make_app):
    handler = _bcra_handler(
        [{"fecha": "2026-10-15", "valor": 1380.5}, {"fecha": "2026-10-16", "valor": 1385.0}],
        [{"fecha": "2026-10-16", "valor": 29.0}],
    )
    response = await _get(make_app(handler), "/api/bcra")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-cache"
    body = response.json()
    assert body["exchangeRate"]["oficial"] == 1385.0
    assert body["exchangeRate"]["blue"] > body["exchangeRate"]["oficial"]
    assert body["exchangeRate"]["date"].startswith("2026-10-16")
    assert body["interestRate"]["rate"] == 29.0
    assert body["metadata"] == {"source": "BCRA API v3", "usdVariableId": 4, "rateVariableId": 6}


async def test_bcra_unreachable_serves_fallback(make_app):
    body = (await _get(make_app(json_routes({})), "/api/bcra")).json()
    assert body["exchangeRate"]["oficial"] == 1290
    assert body["exchangeRate"]["blue"] == 1325
    assert body["interestRate"]["rate"] == 35
    assert body["metadata"]["source"] == "Fallback data"
    assert body["metadata"]["error"]


async def test_exchange_history_fills_window_when_sparse(make_app):
    today = date.today()
    rows = [{"fecha": (today - timedelta(days=d)).isoformat(), "valor": 1400.0 + d} for d in (1, 3, 5)]
    response = await _get(make_app(_bcra_handler(rows)), "/api/bcra/exchange-history")

    assert response.headers["cache-control"] == "public, max-age=300"
    body = response.json()
    assert len(body["data"]) == 30
    by_day = {point["date"]: point for point in body["data"]}
    assert by_day[(today - timedelta(days=3)).isoformat()]["oficial"] == 1403.0
    assert body["metadata"]["realDataPoints"] == 3
    assert body["metadata"]["variableId"] == 4
    assert body["metadata"]["source"] == "BCRA API v3 + interpolación"


async def test_exchange_history_keeps_dense_series(make_app):
    today = date.today()
    rows = [{"fecha": (today - timedelta(days=d)).isoformat(), "valor": 1400.0} for d in range(20)]
    body = (await _get(make_app(_bcra_handler(rows)), "/api/bcra/exchange-history")).json()

    assert len(body["data"]) == 20
    assert body["metadata"]["source"] == "BCRA API v3"
    assert body["metadata"]["description"].startswith("Tipo de Cambio")


async def test_exchange_history_unreachable(make_app):
    body = (await _get(make_app(json_routes({})), "/api/bcra/exchange-history")).json()
    assert len(body["data"]) == 30
    assert all(point["oficial"] < point["blue"] for point in body["data"])
    assert body["metadata"]["source"] == "Fallback data"


async def test_series_inflation_sums_last_twelve_months(make_app):
    values = [[f"2025-{month:02d}-01", 2.0] for month in range(1, 13)]
    values[-1][1] = 3.5
    handler = json_routes({"/series/api/series": {"data": values, "meta": [{}, {"field": {"description": "IPC"}}]}})
    body = (await _get(make_app(handler), "/api/series")).json()

    assert body["inflation"]["monthly"] == 3.5
    assert body["inflation"]["annual"] == pytest.approx(25.5)
    assert body["inflation"]["date"] == "2025-12-01"
    assert body["metadata"]["seriesId"] == "148.3_INIVELNAL_DICI_M_26"
    assert body["metadata"]["seriesTitle"] == "IPC"


async def test_series_falls_back_to_reference_values(make_app):
    body = (await _get(make_app(json_routes({})), "/api/series")).json()
    assert body["inflation"]["monthly"] == 2.5
    assert body["metadata"]["seriesId"] == "fallback-data"
    assert body["metadata"]["source"] == "Datos de referencia"


async def test_series_tries_next_id_when_first_is_empty(make_app):
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        series_id = request.url.params["ids"]
        seen.append(series_id)
        if series_id == "148.3_INIVELNAL_DICI_M_19":
            return httpx.Response(200, json={"data": [{"values": [{"date": "2025-03-01", "value": 3.7}]}]})
        return httpx.Response(200, json={"data": []})

    body = (await _get(make_app(handler), "/api/series")).json()
    assert seen == ["148.3_INIVELNAL_DICI_M_26", "148.3_INIVELNAL_DICI_M_19"]
    assert body["inflation"]["monthly"] == 3.7


def _slow_empty_series(delay: float):
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(delay)
        return httpx.Response(200, json={"data": []})

    return handler


async def test_series_lookup_is_bounded_by_one_deadline(make_app):
    app = make_app(_slow_empty_series(0.2), upstream_timeout_seconds=0.3)
    started = time.perf_counter()
    body = (await _get(app, "/api/series")).json()

    assert time.perf_counter() - started < 0.55
    assert body["inflation"]["monthly"] == 2.2
    assert body["inflation"]["annual"] == 84.5
    assert body["metadata"]["source"] == "Fallback data"
    assert "0.3s" in body["metadata"]["error"]


async def test_inflation_history_lookup_is_bounded_by_one_deadline(make_app):
    app = make_app(_slow_empty_series(0.2), upstream_timeout_seconds=0.3)
    started = time.perf_counter()
    body = (await _get(app, "/api/series/inflation-history")).json()

    assert time.perf_counter() - started < 0.55
    assert len(body["data"]) == 12
    assert body["metadata"]["source"] == "Fallback data"
    assert "0.3s" in body["metadata"]["error"]


async def test_inflation_history_is_padded_to_twelve(make_app):
    values = [["2025-08-01", 1.9], ["2025-09-01", 2.1], ["2025-10-01", 2.3]]
    handler = json_routes({"/series/api/series": {"data": values}})
    body = (await _get(make_app(handler), "/api/series/inflation-history")).json()

    assert len(body["data"]) == 12
    assert [p["month"] for p in body["data"][:3]] == ["Ago 25", "Sep 25", "Oct 25"]
    assert body["data"][3]["month"] == "Mes 4"
    assert body["metadata"]["totalPoints"] == 12


async def test_inflation_history_unreachable_uses_reference(make_app):
    body = (await _get(make_app(json_routes({})), "/api/series/inflation-history")).json()
    assert [p["value"] for p in body["data"]][:2] == [20.6, 13.2]
    assert len(body["data"]) == 12


async def test_budget_without_configured_api(make_app):
    body = (await _get(make_app(json_routes({})), "/api/presupuesto")).json()
    assert body["executed"] == 32_500_000_000_000
    assert body["total"] == 50_000_000_000_000
    assert body["percentage"] == 65
    assert body["year"] == date.today().year
    assert body["metadata"] == {"source": "Fallback data"}


async def test_budget_from_configured_api(make_app):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        rows = [{"devengado": 30.0, "credito_vigente": 120.0}, {"devengado": 10.0, "credito_vigente": 80.0}]
        return httpx.Response(200, json=rows)

    app = make_app(handler, presupuesto_base_url="https://budget.test/api/v1", presupuesto_api_token="tok")
    body = (await _get(app, "/api/presupuesto")).json()

    assert body["executed"] == 40.0
    assert body["total"] == 200.0
    assert body["percentage"] == 20.0
    assert seen[0].headers["authorization"] == "Bearer tok"
    assert seen[0].url.params["ejercicio"] == str(date.today().year)


async def test_budget_execution_areas(make_app):
    body = (await _get(make_app(json_routes({})), "/api/presupuesto/execution")).json()
    areas = {area["name"]: area for area in body["areas"]}
    assert list(areas) == ["Salud", "Educación", "Seguridad", "Infraestructura", "Otros"]
    assert areas["Salud"]["total"] == pytest.approx(12_500_000_000_000)
    assert areas["Seguridad"]["executed"] == pytest.approx(32_500_000_000_000 * 0.15)
    assert sum(area["total"] for area in body["areas"]) == pytest.approx(body["total"])

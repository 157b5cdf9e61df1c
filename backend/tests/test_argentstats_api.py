"""ArgenStats route tests against a mocked upstream."""

from __future__ import annotations

from datetime import date

import httpx
from httpx import ASGITransport, AsyncClient

from conftest import json_routes

DASHBOARD_BLOCKS = {
    "exchangeRates": {"oficial", "blue", "mep", "ccl", "tarjeta", "date"},
    "inflation": {"monthly", "annual", "accumulated", "index", "date"},
    "emae": {"monthly", "annual", "index", "seasonally_adjusted", "trend_cycle", "date"},
    "riesgoPais": {"value", "variation", "variation_pct", "date"},
    "laborMarket": {"unemployment", "employment", "activity", "date"},
    "poverty": {"poverty_rate", "indigence_rate", "poverty_population", "indigence_population", "period", "date"},
}


async def _get(app, path: str, **params) -> httpx.Response:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        return await client.get(path, params=params or None)


async def test_dashboard_with_every_upstream_unreachable(make_app):
    response = await _get(make_app(json_routes({})), "/api/argentstats")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-cache"
    body = response.json()
    for block, fields in DASHBOARD_BLOCKS.items():
        assert set(body[block]) == fields
    assert body["exchangeRates"]["oficial"] == 1290
    assert body["riesgoPais"]["value"] == 850
    assert len(body["calendar"]) == 2
    assert len(body["emaeSectors"]) == 14

    metadata = body["metadata"]
    assert metadata["source"] == "Fallback data"
    assert metadata["successful_apis"] == 0
    assert metadata["failed_apis"] == 8
    assert set(metadata["api_status"].values()) == {"network_error"}
    assert metadata["has_api_key"] is False
    assert "error" not in metadata


async def test_dashboard_mixes_live_and_fallback(make_app):
    handler = json_routes(
        {
            "/api/dollar": {"data": [{"dollar_type": "OFICIAL", "sell_price": 1400}]},
            "/api/riesgo-pais": {"data": {"value": 640, "variation": -5, "date": "2026-10-17"}},
        }
    )
    response = await _get(make_app(handler, argenstats_api_key="k"), "/api/argentstats")

    body = response.json()
    assert body["exchangeRates"]["oficial"] == 1400
    assert body["riesgoPais"]["value"] == 640
    assert body["metadata"]["successful_apis"] == 2
    assert body["metadata"]["failed_apis"] == 6
    assert body["metadata"]["api_status"]["dollar"] == "success"
    assert body["metadata"]["sources"]["dollar"] == "ArgenStats API - Dollar"
    assert body["metadata"]["sources"]["inflation"] == "Fallback data"
    assert body["metadata"]["source"] == "ArgenStats API + Fallback data"
    assert body["metadata"]["has_api_key"] is True


async def test_dashboard_treats_non_finite_values_as_missing(make_app):
    handler = json_routes(
        {
            "/api/ipc": [{"date": "2025-01-31", "monthly_variation": "NaN", "annual_variation": "Infinity"}],
        }
    )
    response = await _get(make_app(handler), "/api/argentstats")

    body = response.json()
    assert body["inflation"]["monthly"] == 2.2
    assert body["inflation"]["annual"] == 84.5
    assert body["metadata"]["api_status"]["inflation"] == "parse_error"
    assert body["metadata"]["sources"]["inflation"] == "Fallback data"


async def test_non_get_methods_are_rejected(make_app):
    app = make_app(json_routes({}))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        for path in ("/api/argentstats", "/api/argentstats/debug", "/api/bcra", "/api/presupuesto"):
            response = await client.post(path)
            assert response.status_code == 405
            assert response.json() == {"error": "Method not allowed"}


async def test_historical_dollar_generates_requested_days(make_app):
    response = await _get(make_app(json_routes({})), "/api/argentstats/historical", type="dollar", days=30)

    assert response.status_code == 200
    assert response.headers["cache-control"] == "public, max-age=300"
    body = response.json()
    history = body["dollarHistory"]
    assert len(history) == 30
    assert body["inflationHistory"] == []
    for point in history:
        date.fromisoformat(point["date"])
        assert point["oficial"] < point["blue"]
    assert body["metadata"]["dollarPoints"] == 30
    assert body["metadata"]["parameters"] == {"type": "dollar", "days": 30, "months": 12}


async def test_historical_inflation_returns_last_reference_months(make_app):
    response = await _get(make_app(json_routes({})), "/api/argentstats/historical", type="inflation", months=6)

    body = response.json()
    assert [p["value"] for p in body["inflationHistory"]] == [4.0, 4.2, 3.5, 2.7, 2.4, 2.5]
    assert [p["month"] for p in body["inflationHistory"]][0] == "Jul 24"
    assert body["dollarHistory"] == []


async def test_historical_uses_live_series(make_app):
    today = date.today()
    handler = json_routes(
        {
            "/api/dollar": {
                "data": [
                    {"date": today.isoformat(), "dollar_type": "OFICIAL", "sell_price": 1400},
                    {"date": today.isoformat(), "dollar_type": "BLUE", "sell_price": 1450},
                ]
            },
            "/api/ipc": {
                "data": [
                    {"date": f"{today.year}-02-28", "monthly_variation": 2.4},
                    {"date": f"{today.year}-01-31", "monthly_variation": 2.2},
                ]
            },
        }
    )
    response = await _get(make_app(handler), "/api/argentstats/historical", days=7, months=2)

    body = response.json()
    assert body["dollarHistory"] == [{"date": today.isoformat(), "oficial": 1400.0, "blue": 1450.0}]
    assert [p["value"] for p in body["inflationHistory"]] == [2.2, 2.4]
    assert body["inflationHistory"][0]["month"] == f"Ene {today.year % 100:02d}"
    assert body["metadata"]["source"] == "ArgenStats API"


async def test_historical_rejects_out_of_range_parameters(make_app):
    app = make_app(json_routes({}))
    assert (await _get(app, "/api/argentstats/historical", type="weekly")).status_code == 422
    assert (await _get(app, "/api/argentstats/historical", days=0)).status_code == 422
    assert (await _get(app, "/api/argentstats/historical", months=25)).status_code == 422


async def test_debug_summarises_probes(make_app):
    handler = json_routes(
        {
            "/api/dollar": {"data": []},
            "/api/ipc": httpx.Response(500, text="oops"),
            "/api/emae/latest": httpx.Response(200, text="not json"),
        }
    )
    response = await _get(make_app(handler), "/api/argentstats/debug")

    body = response.json()
    tests = {test["name"]: test for test in body["tests"]}
    assert tests["Dollar"]["success"] is True
    assert tests["Dollar"]["status"] == 200
    assert tests["IPC"]["error"] == "HTTP 500: Internal Server Error"
    assert tests["EMAE"]["error"] == "Invalid JSON response"
    assert tests["EMAE"]["responseText"] == "not json"
    assert "parseError" in tests["EMAE"]
    assert tests["Riesgo País"]["success"] is False
    summary = body["summary"]
    assert summary["total"] == len(body["tests"])
    assert summary["successful"] == 1
    assert summary["successful"] + summary["failed"] == summary["total"]
    assert summary["api_key_available"] is False


async def test_health(make_app):
    response = await _get(make_app(json_routes({})), "/health")
    assert response.json()["status"] == "ok"
    assert response.json()["timezone"] == "America/Argentina/Buenos_Aires"

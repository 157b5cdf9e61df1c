"""ArgenStats client and parser tests."""

from __future__ import annotations

from datetime import date

import httpx
import pytest

from argdash.providers.argenstats import (
    ArgenStatsClient,
    parse_activity,
    parse_country_risk,
    parse_dollar_history,
    parse_exchange_rates,
    parse_inflation,
    parse_labor_market,
)
from argdash.providers.http import UpstreamHTTPError, UpstreamNetworkError, UpstreamParseError
from argdash.schemas.indicators import Indicator
from argdash.services.fallbacks import FALLBACK_EXCHANGE_RATES, FALLBACK_INFLATION

from conftest import json_routes


def test_exchange_rates_pivot_typed_records():
    payload = {
        "success": True,
        "data": [
            {"date": "2024-06-03", "dollar_type": "OFICIAL", "buy_price": 890, "sell_price": 910},
            {"date": "2024-06-03", "dollar_type": "BLUE", "buy_price": 1250, "sell_price": 1280},
            {"date": "2024-06-03", "dollar_type": "MEP", "sell_price": 1260},
            {"date": "2024-06-03", "dollar_type": "CCL", "sell_price": 1275},
            {"date": "2024-06-03", "dollar_type": "TARJETA", "sell_price": 1456},
        ],
    }
    snapshot = parse_exchange_rates(payload)
    assert snapshot.official_rate == 910
    assert snapshot.blue_rate == 1280
    assert snapshot.mep_rate == 1260
    assert snapshot.ccl_rate == 1275
    assert snapshot.card_rate == 1456
    assert snapshot.as_of.date() == date(2024, 6, 3)


def test_exchange_rates_accept_flat_record_and_fill_missing_quotes():
    snapshot = parse_exchange_rates({"data": {"official": "1.300,00", "blue": 1340}})
    assert snapshot.official_rate == 1300
    assert snapshot.blue_rate == 1340
    assert snapshot.mep_rate == FALLBACK_EXCHANGE_RATES["mep"]
    assert snapshot.card_rate == FALLBACK_EXCHANGE_RATES["tarjeta"]


def test_exchange_rates_without_official_quote_is_a_parse_error():
    with pytest.raises(UpstreamParseError):
        parse_exchange_rates({"data": [{"dollar_type": "BLUE", "sell_price": 1300}]})
    with pytest.raises(UpstreamParseError):
        parse_exchange_rates({"data": []})


@pytest.mark.parametrize("field", ["monthly_variation", "monthly", "variacion_mensual"])
def test_inflation_alternate_monthly_names(field):
    snapshot = parse_inflation({"data": [{"date": "2024-05-31", field: 4.2}]})
    assert snapshot.monthly_pct == pytest.approx(4.2)
    assert snapshot.annual_pct == FALLBACK_INFLATION["annual"]


@pytest.mark.parametrize("field", ["value", "points", "valor"])
def test_country_risk_alternate_point_names(field):
    snapshot = parse_country_risk([{field: 1234.6, "variation": 12}])
    assert snapshot.points == 1235
    assert snapshot.delta_points == 12


def test_activity_requires_at_least_one_known_field():
    with pytest.raises(UpstreamParseError):
        parse_activity({"data": {"date": "2024-05-01", "unexpected": 1}})
    snapshot = parse_activity({"data": {"annual_variation": 3.1}})
    assert snapshot.annual_pct == pytest.approx(3.1)


def test_labor_market_prefers_national_rows():
    payload = {
        "data": [
            {"region": "GBA", "unemployment_rate": 9.9, "date": "2024-06-30"},
            {"region": "Nacional", "unemployment_rate": 7.6, "employment_rate": 44.2, "date": "2024-06-30"},
        ]
    }
    snapshot = parse_labor_market(payload)
    assert snapshot.unemployment_pct == pytest.approx(7.6)
    assert snapshot.employment_pct == pytest.approx(44.2)


def test_dollar_history_pivots_by_date():
    payload = {
        "data": [
            {"date": "2024-06-02", "dollar_type": "OFICIAL", "sell_price": 905},
            {"date": "2024-06-01", "dollar_type": "OFICIAL", "sell_price": 900},
            {"date": "2024-06-01", "dollar_type": "BLUE", "sell_price": 1250},
            {"date": "2024-06-02", "dollar_type": "BLUE", "sell_price": 1260},
            {"date": "2024-06-02", "dollar_type": "MEP", "sell_price": 1240},
        ]
    }
    points = parse_dollar_history(payload)
    assert [p.date.isoformat() for p in points] == ["2024-06-01", "2024-06-02"]
    assert points[0].oficial == 900 and points[0].blue == 1250
    assert points[1].oficial == 905 and points[1].blue == 1260


async def test_client_sends_standard_headers_and_api_key(settings, mock_client):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": [{"dollar_type": "OFICIAL", "sell_price": 1000}]})

    keyed = settings.model_copy(update={"argenstats_api_key": "secret"})
    async with mock_client(handler) as client:
        snapshot = await ArgenStatsClient(keyed, client).fetch(Indicator.EXCHANGE_RATES)

    assert snapshot.official_rate == 1000
    request = seen[0]
    assert request.url.path == "/api/dollar"
    assert request.headers["accept"] == "application/json"
    assert request.headers["user-agent"] == "Dashboard-Argentina/2.0"
    assert request.headers["x-api-key"] == "secret"


async def test_client_maps_http_and_network_failures(settings, mock_client):
    async with mock_client(lambda request: httpx.Response(503, json={})) as client:
        with pytest.raises(UpstreamHTTPError) as excinfo:
            await ArgenStatsClient(settings, client).inflation()
    assert excinfo.value.status_code == 503
    assert excinfo.value.kind == "http_error"

    async with mock_client(json_routes({})) as client:
        with pytest.raises(UpstreamNetworkError):
            await ArgenStatsClient(settings, client).country_risk()


async def test_client_rejects_invalid_json(settings, mock_client):
    async with mock_client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(UpstreamParseError):
            await ArgenStatsClient(settings, client).activity()


async def test_poverty_retries_view_latest_when_latest_endpoint_fails(settings, mock_client):
    handler = json_routes(
        {
            "/api/poverty/latest": httpx.Response(404, json={"error": "not found"}),
            "/api/poverty": {"data": {"poverty_rate": 38.1, "indigence_rate": 8.2, "period": "S2 2024"}},
        }
    )
    async with mock_client(handler) as client:
        snapshot = await ArgenStatsClient(settings, client).poverty()
    assert snapshot.poverty_pct == pytest.approx(38.1)
    assert snapshot.period == "S2 2024"

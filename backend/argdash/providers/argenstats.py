"""ArgenStats client used by the aggregator and the historical routes."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable

import httpx
import pandas as pd

from argdash.config import AppSettings
from argdash.schemas.indicators import (
    ActivityIndexSnapshot,
    CalendarEvent,
    CalendarSnapshot,
    CountryRiskSnapshot,
    DollarHistoryPoint,
    ExchangeRateSnapshot,
    Indicator,
    InflationSnapshot,
    LaborMarketSnapshot,
    PovertySnapshot,
    SectorActivity,
    SectorBreakdownSnapshot,
    Snapshot,
    utcnow,
)
from argdash.services.fallbacks import (
    BLUE_PREMIUM,
    FALLBACK_COUNTRY_RISK,
    FALLBACK_EMAE,
    FALLBACK_EXCHANGE_RATES,
    FALLBACK_INFLATION,
    FALLBACK_LABOR_MARKET,
    FALLBACK_POVERTY,
)

from .http import UpstreamFetchError, UpstreamParseError, build_headers, get_json
from .normalize import latest_record, parse_timestamp, pick, pick_float, unwrap_records

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

SOURCE = "ArgenStats API"
SOURCE_LABELS: dict[Indicator, str] = {
    Indicator.EXCHANGE_RATES: f"{SOURCE} - Dollar",
    Indicator.INFLATION: f"{SOURCE} - IPC",
    Indicator.ACTIVITY: f"{SOURCE} - EMAE",
    Indicator.COUNTRY_RISK: f"{SOURCE} - Riesgo País",
    Indicator.LABOR_MARKET: f"{SOURCE} - Labor Market",
    Indicator.POVERTY: f"{SOURCE} - Poverty",
    Indicator.CALENDAR: f"{SOURCE} - Calendar",
    Indicator.EMAE_SECTORS: f"{SOURCE} - EMAE Sectors",
}

# Upstream dollar_type codes mapped to the dashboard's quote names
_DOLLAR_TYPES = {
    "OFICIAL": "oficial",
    "OFFICIAL": "oficial",
    "BLUE": "blue",
    "INFORMAL": "blue",
    "MEP": "mep",
    "BOLSA": "mep",
    "CCL": "ccl",
    "CONTADOCONLIQUI": "ccl",
    "CONTADO_CON_LIQUI": "ccl",
    "TARJETA": "tarjeta",
    "CARD": "tarjeta",
}
_QUOTE_ALIASES = {
    "oficial": ("oficial", "official", "official_rate"),
    "blue": ("blue", "blue_rate", "informal"),
    "mep": ("mep", "bolsa", "mep_rate"),
    "ccl": ("ccl", "contado_con_liqui", "ccl_rate"),
    "tarjeta": ("tarjeta", "card", "card_rate", "solidario"),
}


def _require(value: float | None, field: str, url: str) -> float:
    if value is None:
        raise UpstreamParseError(f"Missing {field} in upstream payload", url=url)
    return value


def _dollar_type(record: dict[str, Any]) -> str | None:
    raw = pick(record, "dollar_type", "type", "casa", "tipo")
    if raw is None:
        return None
    return _DOLLAR_TYPES.get(str(raw).strip().upper().replace(" ", ""))


def _record_time(record: dict[str, Any]) -> datetime | None:
    return parse_timestamp(pick(record, "date", "fecha", "fechaActualizacion"))


def _quote_value(record: dict[str, Any]) -> float | None:
    return pick_float(record, "sell_price", "venta", "sell", "value", "valor", "buy_price", "compra")


def parse_exchange_rates(payload: Any, *, url: str = "/dollar") -> ExchangeRateSnapshot:
    """Normalise either per-type quote records or a single record carrying every quote."""

    records = unwrap_records(payload)
    if not records:
        raise UpstreamParseError("Dollar payload contained no records", url=url)

    quotes: dict[str, float] = {}
    as_of: datetime | None = None
    typed = [r for r in records if _dollar_type(r)]
    if typed:
        ordered = sorted(typed, key=lambda r: _record_time(r) or _EPOCH)
        for record in ordered:
            value = _quote_value(record)
            if value is None:
                continue
            quotes[_dollar_type(record)] = value
            stamp = _record_time(record)
            if stamp and (as_of is None or stamp > as_of):
                as_of = stamp
    else:
        record = latest_record(records)
        for name, aliases in _QUOTE_ALIASES.items():
            value = pick_float(record, *aliases)
            if value is not None:
                quotes[name] = value
        as_of = parse_timestamp(pick(record, "date", "fecha"))

    oficial = _require(quotes.get("oficial"), "official rate", url)
    return ExchangeRateSnapshot(
        official_rate=oficial,
        blue_rate=quotes.get("blue", FALLBACK_EXCHANGE_RATES["blue"]),
        mep_rate=quotes.get("mep", FALLBACK_EXCHANGE_RATES["mep"]),
        ccl_rate=quotes.get("ccl", FALLBACK_EXCHANGE_RATES["ccl"]),
        card_rate=quotes.get("tarjeta", FALLBACK_EXCHANGE_RATES["tarjeta"]),
        as_of=as_of or utcnow(),
    )


def parse_inflation(payload: Any, *, url: str = "/ipc") -> InflationSnapshot:
    record = latest_record(unwrap_records(payload))
    if record is None:
        raise UpstreamParseError("IPC payload contained no records", url=url)
    monthly = pick_float(record, "monthly_variation", "monthly", "variacion_mensual", "monthly_pct")
    annual = pick_float(record, "annual_variation", "annual", "variacion_interanual", "yearly_variation")
    accumulated = pick_float(record, "accumulated_variation", "accumulated", "variacion_acumulada")
    index = pick_float(record, "index_value", "index", "indice", "value")
    return InflationSnapshot(
        monthly_pct=_require(monthly, "monthly variation", url),
        annual_pct=annual if annual is not None else FALLBACK_INFLATION["annual"],
        accumulated_pct=accumulated if accumulated is not None else FALLBACK_INFLATION["accumulated"],
        index_value=index if index is not None else FALLBACK_INFLATION["index"],
        as_of=parse_timestamp(pick(record, "date", "fecha")) or utcnow(),
    )


def parse_activity(payload: Any, *, url: str = "/emae") -> ActivityIndexSnapshot:
    record = latest_record(unwrap_records(payload))
    if record is None:
        raise UpstreamParseError("EMAE payload contained no records", url=url)
    monthly = pick_float(record, "monthly_variation", "monthly", "variacion_mensual")
    annual = pick_float(record, "annual_variation", "annual", "variacion_interanual")
    index = pick_float(record, "index_value", "original_value", "index", "valor")
    if monthly is None and annual is None and index is None:
        raise UpstreamParseError("EMAE payload is missing every known field", url=url)
    seasonal = pick_float(record, "seasonally_adjusted", "seasonally_adjusted_value", "desestacionalizado")
    trend = pick_float(record, "trend_cycle", "trend_cycle_value", "tendencia_ciclo")
    return ActivityIndexSnapshot(
        monthly_pct=monthly if monthly is not None else FALLBACK_EMAE["monthly"],
        annual_pct=annual if annual is not None else FALLBACK_EMAE["annual"],
        index_value=index if index is not None else FALLBACK_EMAE["index"],
        seasonally_adjusted=seasonal if seasonal is not None else FALLBACK_EMAE["seasonally_adjusted"],
        trend_cycle=trend if trend is not None else FALLBACK_EMAE["trend_cycle"],
        as_of=parse_timestamp(pick(record, "date", "fecha")) or utcnow(),
    )


def parse_country_risk(payload: Any, *, url: str = "/riesgo-pais") -> CountryRiskSnapshot:
    record = latest_record(unwrap_records(payload))
    if record is None:
        raise UpstreamParseError("Riesgo país payload contained no records", url=url)
    points = _require(pick_float(record, "value", "points", "valor", "riesgo_pais", "closing_value"), "points", url)
    delta = pick_float(record, "variation", "change", "variacion", "daily_change")
    delta_pct = pick_float(record, "variation_pct", "change_pct", "variacion_porcentual", "change_percentage")
    return CountryRiskSnapshot(
        points=int(round(points)),
        delta_points=delta if delta is not None else FALLBACK_COUNTRY_RISK["variation"],
        delta_pct=delta_pct if delta_pct is not None else FALLBACK_COUNTRY_RISK["variation_pct"],
        as_of=parse_timestamp(pick(record, "date", "fecha")) or utcnow(),
    )


def parse_labor_market(payload: Any, *, url: str = "/labor-market") -> LaborMarketSnapshot:
    records = unwrap_records(payload)
    national = [r for r in records if str(pick(r, "region", default="Nacional")).lower() in {"nacional", "total", "total nacional"}]
    record = latest_record(national or records)
    if record is None:
        raise UpstreamParseError("Labor market payload contained no records", url=url)
    unemployment = pick_float(record, "unemployment_rate", "unemployment", "desocupacion", "tasa_desocupacion")
    employment = pick_float(record, "employment_rate", "employment", "empleo", "tasa_empleo")
    activity = pick_float(record, "activity_rate", "activity", "actividad", "tasa_actividad")
    return LaborMarketSnapshot(
        unemployment_pct=_require(unemployment, "unemployment rate", url),
        employment_pct=employment if employment is not None else FALLBACK_LABOR_MARKET["employment"],
        activity_pct=activity if activity is not None else FALLBACK_LABOR_MARKET["activity"],
        as_of=parse_timestamp(pick(record, "date", "fecha")) or utcnow(),
    )


def parse_poverty(payload: Any, *, url: str = "/poverty") -> PovertySnapshot:
    record = latest_record(unwrap_records(payload))
    if record is None:
        raise UpstreamParseError("Poverty payload contained no records", url=url)
    poverty = pick_float(record, "poverty_rate", "poverty", "pobreza", "tasa_pobreza")
    indigence = pick_float(record, "indigence_rate", "indigence", "indigencia", "tasa_indigencia")
    poverty_pop = pick_float(record, "poverty_population", "personas_pobres")
    indigence_pop = pick_float(record, "indigence_population", "personas_indigentes")
    return PovertySnapshot(
        poverty_pct=_require(poverty, "poverty rate", url),
        indigence_pct=indigence if indigence is not None else FALLBACK_POVERTY["indigence_rate"],
        poverty_population=int(poverty_pop) if poverty_pop is not None else FALLBACK_POVERTY["poverty_population"],
        indigence_population=int(indigence_pop) if indigence_pop is not None else FALLBACK_POVERTY["indigence_population"],
        period=str(pick(record, "period", "periodo", "semester", default=FALLBACK_POVERTY["period"])),
        as_of=parse_timestamp(pick(record, "date", "fecha")) or utcnow(),
    )


def parse_calendar(payload: Any, *, url: str = "/calendar") -> CalendarSnapshot:
    events: list[CalendarEvent] = []
    for record in unwrap_records(payload):
        when = parse_timestamp(pick(record, "date", "fecha"))
        indicator = pick(record, "indicator", "indicador", "name", "title")
        if when is None or indicator is None:
            continue
        events.append(
            CalendarEvent(
                date=when,
                day_week=str(pick(record, "day_week", "dia_semana", default="")),
                indicator=str(indicator),
                period=str(pick(record, "period", "periodo", default="")),
                source=str(pick(record, "source", "fuente", default="INDEC")),
            )
        )
    events.sort(key=lambda event: event.date)
    return CalendarSnapshot(events=events)


def parse_sectors(payload: Any, *, url: str = "/emae/sectors") -> SectorBreakdownSnapshot:
    sectors: list[SectorActivity] = []
    for record in unwrap_records(payload):
        name = pick(record, "sector", "name", "sector_name")
        annual = pick_float(record, "annual_variation", "annual", "variacion_interanual")
        index = pick_float(record, "index_value", "original_value", "index", "valor")
        if name is None or (annual is None and index is None):
            continue
        sectors.append(
            SectorActivity(
                sector=str(name),
                annual_pct=annual if annual is not None else 0.0,
                index_value=index if index is not None else 0.0,
            )
        )
    if not sectors:
        raise UpstreamParseError("EMAE sectors payload contained no usable rows", url=url)
    return SectorBreakdownSnapshot(sectors=sectors)


def parse_dollar_history(payload: Any) -> list[DollarHistoryPoint]:
    """Pivot daily quote records into one ``{date, oficial, blue}`` row per day."""

    rows: list[dict[str, Any]] = []
    for record in unwrap_records(payload):
        day = parse_timestamp(pick(record, "date", "fecha"))
        if day is None:
            continue
        quote_type = _dollar_type(record)
        if quote_type is not None:
            if quote_type in {"oficial", "blue"}:
                rows.append({"date": day.date(), "type": quote_type, "value": _quote_value(record)})
            continue
        for name in ("oficial", "blue"):
            value = pick_float(record, *_QUOTE_ALIASES[name])
            if value is not None:
                rows.append({"date": day.date(), "type": name, "value": value})
    if not rows:
        return []

    df = pd.DataFrame(rows).dropna(subset=["value"])
    if df.empty:
        return []
    table = df.pivot_table(index="date", columns="type", values="value", aggfunc="last").sort_index()
    if "oficial" not in table.columns:
        return []
    if "blue" not in table.columns:
        table["blue"] = table["oficial"] * BLUE_PREMIUM
    table["blue"] = table["blue"].fillna(table["oficial"] * BLUE_PREMIUM)
    table = table.dropna(subset=["oficial"])
    return [
        DollarHistoryPoint(
            date=pd.Timestamp(day).date(),
            oficial=round(float(row["oficial"]), 2),
            blue=round(float(row["blue"]), 2),
        )
        for day, row in table.iterrows()
    ]


def parse_inflation_series(payload: Any) -> list[tuple[date, float]]:
    """Monthly variations sorted oldest first, one entry per month."""

    points: dict[date, float] = {}
    for record in unwrap_records(payload):
        day = parse_timestamp(pick(record, "date", "fecha"))
        value = pick_float(record, "monthly_variation", "monthly", "variacion_mensual", "value")
        if day is None or value is None:
            continue
        category = str(pick(record, "category", "categoria", default="Nivel General"))
        if category.lower() not in {"nivel general", "general"}:
            continue
        points[day.date()] = value
    return sorted(points.items())


class ArgenStatsClient:
    """Thin ArgenStats wrapper returning canonical snapshots."""

    def __init__(self, settings: AppSettings, client: httpx.AsyncClient) -> None:
        self._settings = settings
        self._client = client
        self._base_url = settings.argenstats_base_url.rstrip("/")
        self._headers = build_headers(settings, api_key=settings.argenstats_api_key)
        self._fetchers: dict[Indicator, Callable[[], Awaitable[Snapshot]]] = {
            Indicator.EXCHANGE_RATES: self.exchange_rates,
            Indicator.INFLATION: self.inflation,
            Indicator.ACTIVITY: self.activity,
            Indicator.COUNTRY_RISK: self.country_risk,
            Indicator.LABOR_MARKET: self.labor_market,
            Indicator.POVERTY: self.poverty,
            Indicator.CALENDAR: self.calendar,
            Indicator.EMAE_SECTORS: self.emae_sectors,
        }

    @property
    def has_api_key(self) -> bool:
        return self._settings.has_argenstats_key

    def url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await get_json(self._client, self.url(path), params=params, headers=self._headers)

    async def fetch(self, indicator: Indicator) -> Snapshot:
        """Fetch the latest snapshot for ``indicator``."""

        return await self._fetchers[Indicator(indicator)]()

    async def exchange_rates(self) -> ExchangeRateSnapshot:
        payload = await self._get("/dollar", {"type": "latest"})
        return parse_exchange_rates(payload, url=self.url("/dollar"))

    async def inflation(self, *, category: str | None = None, region: str | None = None) -> InflationSnapshot:
        payload = await self._get("/ipc", {"view": "latest", "category": category, "region": region})
        return parse_inflation(payload, url=self.url("/ipc"))

    async def activity(self, *, sector: str | None = None) -> ActivityIndexSnapshot:
        payload = await self._get("/emae", {"view": "latest", "sector": sector})
        return parse_activity(payload, url=self.url("/emae"))

    async def emae_sectors(self, year: int | None = None) -> SectorBreakdownSnapshot:
        payload = await self._get("/emae/sectors", {"year": year or date.today().year})
        return parse_sectors(payload, url=self.url("/emae/sectors"))

    async def country_risk(self) -> CountryRiskSnapshot:
        payload = await self._get("/riesgo-pais", {"view": "latest"})
        return parse_country_risk(payload, url=self.url("/riesgo-pais"))

    async def labor_market(self, *, region: str | None = None) -> LaborMarketSnapshot:
        payload = await self._get(
            "/labor-market",
            {"view": "latest", "data_type": "national", "region": region},
        )
        return parse_labor_market(payload, url=self.url("/labor-market"))

    async def poverty(self) -> PovertySnapshot:
        try:
            payload = await self._get("/poverty/latest")
            return parse_poverty(payload, url=self.url("/poverty/latest"))
        except UpstreamFetchError as exc:
            logger.info("Latest poverty endpoint failed (%s), retrying with view=latest", exc)
        payload = await self._get("/poverty", {"view": "latest"})
        return parse_poverty(payload, url=self.url("/poverty"))

    async def calendar(self, year: int | None = None) -> CalendarSnapshot:
        payload = await self._get("/calendar", {"year": year or date.today().year})
        return parse_calendar(payload, url=self.url("/calendar"))

    async def dollar_history(self, start: date, end: date) -> list[DollarHistoryPoint]:
        payload = await self._get(
            "/dollar",
            {
                "type": "daily",
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "dollar_type": "BLUE,OFICIAL",
            },
        )
        return parse_dollar_history(payload)

    async def inflation_series(self, year: int) -> list[tuple[date, float]]:
        payload = await self._get("/ipc", {"year": year, "view": "all"})
        return parse_inflation_series(payload)


__all__ = [
    "ArgenStatsClient",
    "SOURCE",
    "SOURCE_LABELS",
    "parse_activity",
    "parse_calendar",
    "parse_country_risk",
    "parse_dollar_history",
    "parse_exchange_rates",
    "parse_inflation",
    "parse_inflation_series",
    "parse_labor_market",
    "parse_poverty",
    "parse_sectors",
]

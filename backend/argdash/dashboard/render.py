"""rich renderables for the dashboard state."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.columns import Columns
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from argdash.schemas.indicators import DollarHistoryPoint, InflationHistoryPoint

from .formatting import (
    blue_gap_pct,
    change_color,
    change_icon,
    format_currency,
    format_date,
    format_number,
    format_percentage,
)
from .state import DashboardState, LoadStatus

SPARK_CHARS = "▁▂▃▄▅▆▇█"
SKELETON = "░░░░░░░░"
LIVE_BADGE = "datos reales"
RETRY_HINT = "Presioná Enter para reintentar"
_CARD_TITLES = ("Dólar Oficial", "Inflación Mensual", "EMAE Mensual", "Riesgo País", "Desempleo", "Pobreza")


def sparkline(values: Sequence[float]) -> str:
    if not values:
        return ""
    low, high = min(values), max(values)
    span = high - low
    if span == 0:
        return SPARK_CHARS[len(SPARK_CHARS) // 2] * len(values)
    last = len(SPARK_CHARS) - 1
    return "".join(SPARK_CHARS[round((value - low) / span * last)] for value in values)


def metric_card(
    title: str,
    value: str,
    *,
    subtitle: str = "",
    change: Optional[float] = None,
    live: bool = False,
    loading: bool = False,
    style: str = "blue",
) -> Panel:
    if loading:
        body = Text(f"{SKELETON}\n{SKELETON[:4]}", style="grey37")
        return Panel(body, title=title, border_style="grey37", width=30)

    body = Text(value, style="bold")
    if change is not None:
        body.append(f"\n{change_icon(change)} {format_percentage(abs(change), 1)}", style=change_color(change))
    if subtitle:
        body.append(f"\n{subtitle}", style="dim")
    badge = Text(LIVE_BADGE, style="green") if live else None
    return Panel(body, title=title, subtitle=badge, border_style=style, width=30)


def exchange_rates_card(state: DashboardState) -> Panel:
    rates = state.data.exchange_rates
    table = Table.grid(padding=(0, 2))
    table.add_column()
    table.add_column(justify="right")
    for name, value in (
        ("Oficial", rates.oficial),
        ("Blue", rates.blue),
        ("MEP", rates.mep),
        ("CCL", rates.ccl),
        ("Tarjeta", rates.tarjeta),
    ):
        table.add_row(name, format_currency(value))
    gap = blue_gap_pct(rates.oficial, rates.blue)
    table.add_row(Text("Brecha Blue/Oficial", style="dim"), Text(format_percentage(gap, 1), style="red"))
    return Panel(table, title="Cotizaciones del Dólar", border_style="green")


def dollar_chart(points: Sequence[DollarHistoryPoint], *, synthetic: bool = False) -> Panel:
    body = Text()
    if points:
        body.append("Oficial ", style="blue")
        body.append(sparkline([p.oficial for p in points]), style="blue")
        body.append(f"  {format_currency(points[-1].oficial)}\n")
        body.append("Blue    ", style="red")
        body.append(sparkline([p.blue for p in points]), style="red")
        body.append(f"  {format_currency(points[-1].blue)}")
    title = f"Dólar últimos {len(points)} días"
    return Panel(body, title=title, subtitle="datos simulados" if synthetic else None, border_style="blue")


def inflation_chart(points: Sequence[InflationHistoryPoint], *, width: int = 30) -> Panel:
    table = Table.grid(padding=(0, 1))
    table.add_column(width=7)
    table.add_column()
    table.add_column(justify="right")
    peak = max((p.value for p in points), default=0.0)
    for point in points:
        size = round(point.value / peak * width) if peak > 0 else 0
        table.add_row(point.month, Text("█" * size, style="red"), format_percentage(point.value, 1))
    return Panel(table, title="Inflación mensual", border_style="red")


def calendar_table(state: DashboardState) -> Table:
    table = Table(title="Próximas publicaciones INDEC", expand=False)
    table.add_column("Fecha")
    table.add_column("Día")
    table.add_column("Indicador")
    table.add_column("Período")
    for event in state.data.calendar:
        table.add_row(format_date(event.date), event.day_week, event.indicator, event.period)
    return table


def error_panel(message: Optional[str]) -> Panel:
    body = Text("Error al cargar los datos\n", style="bold red")
    body.append(f"{message or ''}\n", style="dim")
    body.append(RETRY_HINT, style="bold")
    return Panel(body, border_style="red")


def header(state: DashboardState) -> Panel:
    text = Text("🇦🇷 Dashboard Económico", style="bold")
    text.append("\nIndicadores oficiales de Argentina • Powered by ArgenStats", style="dim")
    if state.last_updated is not None:
        text.append(f"\nÚltima actualización: {format_date(state.last_updated)} {state.last_updated:%H:%M}")
    if state.status is LoadStatus.LOADING:
        text.append("\nActualizando…", style="yellow")
    return Panel(text, border_style="magenta")


def render_dashboard(state: DashboardState) -> RenderableType:
    parts: list[RenderableType] = [header(state)]
    if state.status is LoadStatus.ERROR:
        parts.append(error_panel(state.error))
        if state.data is None:
            return Group(*parts)

    loading = state.status is LoadStatus.LOADING and state.data is None
    if loading:
        parts.append(Columns([metric_card(title, "", loading=True) for title in _CARD_TITLES]))
        return Group(*parts)

    data = state.data
    live = state.live_indicators()
    cards = [
        metric_card(
            "Dólar Oficial",
            format_currency(data.exchange_rates.oficial),
            subtitle=f"Actualizado: {format_date(data.exchange_rates.date)}",
            live="dollar" in live,
            style="green",
        ),
        metric_card(
            "Inflación Mensual",
            format_percentage(data.inflation.monthly, 1),
            subtitle="Índice de Precios al Consumidor",
            live="inflation" in live,
            style="red",
        ),
        metric_card(
            "EMAE Mensual",
            format_percentage(data.emae.monthly, 1),
            change=data.emae.annual,
            subtitle="Estimador Mensual Act. Económica",
            live="emae" in live,
        ),
        metric_card(
            "Riesgo País",
            format_number(data.riesgo_pais.value),
            change=data.riesgo_pais.variation_pct,
            subtitle="EMBI+ Argentina",
            live="riesgo_pais" in live,
            style="yellow",
        ),
        metric_card(
            "Desempleo",
            format_percentage(data.labor_market.unemployment, 1),
            subtitle="Tasa de Desocupación",
            live="labor_market" in live,
            style="magenta",
        ),
        metric_card(
            "Pobreza",
            format_percentage(data.poverty.poverty_rate, 1),
            subtitle=f"{format_number(data.poverty.poverty_population)} personas",
            live="poverty" in live,
            style="magenta",
        ),
    ]
    parts.append(Columns(cards))
    parts.append(
        Columns(
            [
                exchange_rates_card(state),
                dollar_chart(state.history.dollar, synthetic=state.history.synthetic),
                inflation_chart(state.history.inflation),
            ]
        )
    )
    if data.calendar:
        parts.append(calendar_table(state))
    return Group(*parts)


__all__ = [
    "dollar_chart",
    "error_panel",
    "exchange_rates_card",
    "inflation_chart",
    "metric_card",
    "render_dashboard",
    "sparkline",
]

"""Counters recording real upstream outcomes hidden by the always-200 contract."""

from __future__ import annotations

from opentelemetry import metrics

_meter = metrics.get_meter("argdash")

_upstream_fetches = _meter.create_counter(
    "argdash.upstream.fetches",
    unit="1",
    description="Upstream indicator fetches by indicator and outcome",
)
_fallbacks = _meter.create_counter(
    "argdash.aggregation.fallbacks",
    unit="1",
    description="Indicators served from fallback data",
)


def record_upstream_outcome(indicator: str, outcome: str) -> None:
    _upstream_fetches.add(1, {"indicator": indicator, "outcome": outcome})
    if outcome != "success":
        _fallbacks.add(1, {"indicator": indicator})


__all__ = ["record_upstream_outcome"]

"""Direct probes of the upstream endpoints for the debug route."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Sequence

import httpx

from argdash.config import AppSettings
from argdash.providers.http import build_headers
from argdash.schemas.indicators import utcnow
from argdash.schemas.responses import DebugResponse, ProbeResult, ProbeSummary

logger = logging.getLogger(__name__)

RESPONSE_PREVIEW_CHARS = 500


def default_probes(settings: AppSettings) -> list[tuple[str, str]]:
    argenstats = settings.argenstats_base_url.rstrip("/")
    return [
        ("Dollar", f"{argenstats}/dollar"),
        ("IPC", f"{argenstats}/ipc"),
        ("EMAE", f"{argenstats}/emae/latest"),
        ("Riesgo País", f"{argenstats}/riesgo-pais"),
        ("BCRA Metadatos", f"{settings.bcra_base_url.rstrip('/')}/Metadatos"),
        ("Series de Tiempo", f"{settings.series_base_url.rstrip('/')}/series?ids=148.3_INIVELNAL_DICI_M_26&last=1"),
    ]


async def probe(client: httpx.AsyncClient, name: str, url: str, headers: dict[str, str]) -> ProbeResult:
    result = ProbeResult(name=name, url=url)
    started = time.perf_counter()
    try:
        response = await client.get(url, headers=headers)
    except httpx.HTTPError as exc:
        result.error = str(exc) or exc.__class__.__name__
        return result

    result.timing = round((time.perf_counter() - started) * 1000, 1)
    result.status = response.status_code
    if not response.is_success:
        result.error = f"HTTP {response.status_code}: {response.reason_phrase}"
        return result

    text = response.text
    result.response_text = text[:RESPONSE_PREVIEW_CHARS]
    try:
        result.response = json.loads(text)
    except ValueError as exc:
        result.error = "Invalid JSON response"
        result.parse_error = str(exc)
        return result
    result.success = True
    return result


async def run_diagnostics(
    settings: AppSettings,
    client: httpx.AsyncClient,
    probes: Sequence[tuple[str, str]] | None = None,
) -> DebugResponse:
    """Probe every upstream concurrently and summarise the outcome."""

    headers = build_headers(settings, api_key=settings.argenstats_api_key)
    targets = list(probes) if probes is not None else default_probes(settings)
    tests = list(await asyncio.gather(*(probe(client, name, url, headers) for name, url in targets)))

    successful = sum(1 for test in tests if test.success)
    summary = ProbeSummary(
        total=len(tests),
        successful=successful,
        failed=len(tests) - successful,
        avg_response_time=round(sum(test.timing for test in tests) / len(tests), 1) if tests else 0.0,
        api_key_available=settings.has_argenstats_key,
        api_key_used=settings.has_argenstats_key,
    )
    logger.info("Diagnostics: %d/%d upstream probes succeeded", successful, len(tests))
    return DebugResponse(timestamp=utcnow().isoformat(), tests=tests, summary=summary)


__all__ = ["RESPONSE_PREVIEW_CHARS", "default_probes", "probe", "run_diagnostics"]

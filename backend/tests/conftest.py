import asyncio
import inspect
import pathlib
import sys
from typing import Any, Callable

import httpx
import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from argdash.config import AppSettings  # noqa: E402

ARGENSTATS = "https://argenstats.test/api"
BCRA = "https://bcra.test/estadisticas/v3"
SERIES = "https://series.test/series/api"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            arguments = {name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
            loop.run_until_complete(test_function(**arguments))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def json_routes(routes: dict[str, Any], *, default: Callable[[httpx.Request], httpx.Response] = unreachable):
    """Mock handler answering ``routes[path]`` as JSON; other paths use ``default``."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = routes.get(request.url.path)
        if body is None:
            return default(request)
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(200, json=body)

    return handler


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        argenstats_base_url=ARGENSTATS,
        bcra_base_url=BCRA,
        series_base_url=SERIES,
        upstream_timeout_seconds=0.5,
        telemetry_enabled=False,
    )


@pytest.fixture
def make_app(settings: AppSettings):
    from argdash.main import create_app

    def _make(handler, **overrides):
        app_settings = settings.model_copy(update=overrides) if overrides else settings
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return create_app(app_settings, http_client=client)

    return _make


@pytest.fixture
def mock_client():
    def _make(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make

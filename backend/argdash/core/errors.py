"""HTTP error shaping shared by every data route."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

METHOD_NOT_ALLOWED_BODY = {"error": "Method not allowed"}


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return JSONResponse(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            content=METHOD_NOT_ALLOWED_BODY,
            headers=exc.headers,
        )
    return await http_exception_handler(request, exc)


def install_error_handlers(app: FastAPI) -> None:
    """Register the handlers that give data routes their error body shape."""

    app.add_exception_handler(StarletteHTTPException, _http_error_handler)


__all__ = ["METHOD_NOT_ALLOWED_BODY", "install_error_handlers"]

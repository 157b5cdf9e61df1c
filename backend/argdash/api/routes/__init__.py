"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .argentstats import router as argentstats_router
from .bcra import router as bcra_router
from .presupuesto import router as presupuesto_router
from .series import router as series_router

api_router = APIRouter(prefix="/api")
api_router.include_router(argentstats_router, prefix="/argentstats", tags=["argentstats"])
api_router.include_router(bcra_router, prefix="/bcra", tags=["bcra"])
api_router.include_router(series_router, prefix="/series", tags=["series"])
api_router.include_router(presupuesto_router, prefix="/presupuesto", tags=["presupuesto"])

__all__ = ["api_router"]

"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(request: Request) -> JSONResponse:
    """Ready once the engine is built; reports index size and cache reachability."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        return JSONResponse(status_code=503, content={"status": "not_ready"})

    body: dict[str, object] = {"status": "ready", "patterns": len(engine)}
    cache = getattr(request.app.state, "cache", None)
    if cache is not None and hasattr(cache, "ping"):
        body["cache"] = "up" if cache.ping() else "down"
    return JSONResponse(content=body)

"""User-agent lookup endpoint."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from uacaps.core.exceptions import InvalidInputError

router = APIRouter(tags=["lookup"])


# Sync handler: FastAPI runs it in the threadpool.
@router.get("/lookup")
def lookup(
    request: Request,
    ua: Optional[str] = Query(default=None, description="User-agent string; defaults to the request's own"),
) -> dict:
    """Return the resolved capabilities for a user-agent string."""
    user_agent = ua if ua is not None else request.headers.get("user-agent", "")
    try:
        capabilities = request.app.state.lookup.lookup(user_agent)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return capabilities.to_dict()

"""Health route."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["status"])


@router.get("/api/health")
async def health(request: Request) -> JSONResponse:
    """Report liveness and history configuration."""
    history = request.app.state.history
    return JSONResponse(
        {
            "ok": True,
            "historyEnabled": history.enabled,
            "retentionDays": history.retention_days,
            "screens": len(request.app.state.screens),
        }
    )

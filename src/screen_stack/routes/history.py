"""History routes: day listings, event logs, snapshots and the replay page."""

from __future__ import annotations

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, Response

from screen_stack.history.reader import (
    SnapshotPathError,
    list_days,
    read_events,
    read_snapshot,
)
from screen_stack.routes.errors import api_error

router = APIRouter(tags=["history"])


@router.get("/api/history")
async def history_days(request: Request) -> JSONResponse:
    """List retained day buckets, newest first."""
    days = await list_days(request.app.state.history.workspace_root)
    return JSONResponse({"ok": True, "days": days})


@router.get("/api/history/snapshot")
async def history_snapshot(request: Request, path: str) -> Response:
    """Serve one snapshot as HTML."""
    try:
        html = await read_snapshot(request.app.state.history.workspace_root, path)
    except SnapshotPathError as exc:
        return api_error(status.HTTP_400_BAD_REQUEST, "INVALID_SNAPSHOT_PATH", str(exc))
    except FileNotFoundError:
        return api_error(status.HTTP_404_NOT_FOUND, "SNAPSHOT_NOT_FOUND", path)
    return HTMLResponse(html)


@router.get("/api/history/{day}")
async def history_events(request: Request, day: str) -> JSONResponse:
    """Return one day's events in append order."""
    try:
        events = await read_events(request.app.state.history.workspace_root, day)
    except ValueError as exc:
        return api_error(status.HTTP_400_BAD_REQUEST, "INVALID_DAY", str(exc))
    return JSONResponse(
        {
            "ok": True,
            "day": day,
            "events": [
                event.model_dump(mode="json", by_alias=True, exclude_none=True)
                for event in events
            ],
        }
    )


@router.get("/history/{day}", response_class=HTMLResponse)
async def history_page(request: Request, day: str):
    """Render the replay timeline for one day."""
    try:
        events = await read_events(request.app.state.history.workspace_root, day)
    except ValueError as exc:
        return api_error(status.HTTP_400_BAD_REQUEST, "INVALID_DAY", str(exc))
    templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "history.html",
        {"day": day, "events": events},
    )

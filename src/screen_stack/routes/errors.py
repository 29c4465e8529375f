"""JSON error responses shared by the API routes."""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse


def api_error(status_code: int, code: str, message: str, **details: Any) -> JSONResponse:
    error: dict[str, Any] = {"code": str(code), "message": message}
    if details:
        error["details"] = details
    return JSONResponse({"ok": False, "error": error}, status_code=status_code)

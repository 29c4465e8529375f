"""Tests for history route handlers."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

from screen_stack.history.reader import SnapshotPathError
from screen_stack.routes.history import (
    history_days,
    history_events,
    history_page,
    history_snapshot,
)


def _request() -> MagicMock:
    request = MagicMock()
    request.app.state.history.workspace_root = "/workspace"
    return request


class TestHistoryRoutes:
    """Test the History Routes."""

    async def test_lists_days(self) -> None:
        """Verify day listing."""
        with patch(
            "screen_stack.routes.history.list_days",
            new_callable=AsyncMock,
            return_value=["2026-02-17"],
        ) as mock_list:
            response = await history_days(_request())

        mock_list.assert_awaited_once_with("/workspace")
        assert json.loads(response.body) == {"ok": True, "days": ["2026-02-17"]}

    async def test_invalid_day(self) -> None:
        """Verify malformed days return 400."""
        with patch(
            "screen_stack.routes.history.read_events",
            new_callable=AsyncMock,
            side_effect=ValueError("Invalid history day 'x'"),
        ):
            response = await history_events(_request(), "x")

        assert response.status_code == 400
        assert json.loads(response.body)["error"]["code"] == "INVALID_DAY"

    async def test_snapshot_escape(self) -> None:
        """Verify escaping paths return 400."""
        with patch(
            "screen_stack.routes.history.read_snapshot",
            new_callable=AsyncMock,
            side_effect=SnapshotPathError("escape"),
        ):
            response = await history_snapshot(_request(), "../x")

        assert response.status_code == 400
        assert json.loads(response.body)["error"]["code"] == "INVALID_SNAPSHOT_PATH"

    async def test_snapshot_missing(self) -> None:
        """Verify missing snapshots return 404."""
        with patch(
            "screen_stack.routes.history.read_snapshot",
            new_callable=AsyncMock,
            side_effect=FileNotFoundError,
        ):
            response = await history_snapshot(_request(), ".history/x.html")

        assert response.status_code == 404

    async def test_snapshot_served_as_html(self) -> None:
        """Verify snapshots are returned verbatim."""
        with patch(
            "screen_stack.routes.history.read_snapshot",
            new_callable=AsyncMock,
            return_value="<p>one</p>",
        ):
            response = await history_snapshot(_request(), ".history/x.html")

        assert response.body == b"<p>one</p>"
        assert response.media_type == "text/html"

    async def test_page_renders_template(self) -> None:
        """Verify the replay page renders the history template."""
        request = _request()
        request.app.state.templates = MagicMock()

        with patch(
            "screen_stack.routes.history.read_events",
            new_callable=AsyncMock,
            return_value=[],
        ):
            await history_page(request, "2026-02-17")

        request.app.state.templates.TemplateResponse.assert_called_once_with(
            request,
            "history.html",
            {"day": "2026-02-17", "events": []},
        )

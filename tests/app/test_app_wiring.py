"""Tests for app factory and lifespan wiring."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from screen_stack.app import create_app
from screen_stack.config import AppConfig, HistoryConfig, ScreenConfig, Settings
from screen_stack.history.retention import day_key, utcnow

if TYPE_CHECKING:
    from pathlib import Path


def _settings(workspace: Path, *, enabled: bool = True) -> Settings:
    """Create settings rooted in a temporary workspace."""
    return Settings(
        screen=ScreenConfig(max_html_chars=240_000, max_revision_note_chars=200),
        history=HistoryConfig(
            workspace_root=str(workspace), retention_days=7, enabled=enabled
        ),
        app=AppConfig(env="test", log_level="INFO", host="127.0.0.1", port=8787),
    )


@pytest.mark.unit
def test_lifespan_wires_history_and_screens(tmp_path: Path) -> None:
    """Lifespan builds the history log and registry from settings."""
    with (
        patch("screen_stack.app.load_settings", return_value=_settings(tmp_path)),
        patch("screen_stack.app.configure_logging") as mock_logging,
        TestClient(create_app()) as client,
    ):
        response = client.get("/api/health")
        history = client.app.state.history

    mock_logging.assert_called_once_with("INFO")
    assert response.json() == {
        "ok": True,
        "historyEnabled": True,
        "retentionDays": 7,
        "screens": 0,
    }
    assert history.workspace_root == tmp_path.resolve()


@pytest.mark.unit
def test_emit_persists_and_replays(tmp_path: Path) -> None:
    """An emitted revision shows up in the history API and replay page."""
    with (
        patch("screen_stack.app.load_settings", return_value=_settings(tmp_path)),
        patch("screen_stack.app.configure_logging"),
        TestClient(create_app()) as client,
    ):
        emitted = client.post(
            "/api/screens/ui-1/emit",
            json={
                "args": {"html": "<main><p>Hello</p></main>", "revisionNote": "first"},
                "toolCallId": "call-1",
            },
        )
        day = day_key(utcnow())
        days = client.get("/api/history")
        events = client.get(f"/api/history/{day}")
        html_path = events.json()["events"][0]["htmlPath"]
        snapshot = client.get("/api/history/snapshot", params={"path": html_path})
        page = client.get(f"/history/{day}")
        meta = client.get("/api/screens/ui-1")

    assert emitted.status_code == 200
    assert emitted.json()["persisted"] is True
    assert days.json()["days"] == [day]
    assert events.json()["events"][0]["revisionNote"] == "first"
    assert snapshot.text == "<main><p>Hello</p></main>"
    assert page.status_code == 200
    assert "ui-1" in page.text
    assert meta.json()["meta"]["revision"] == 1


@pytest.mark.unit
def test_disabled_history_skips_persistence(tmp_path: Path) -> None:
    """With history disabled nothing is written."""
    with (
        patch(
            "screen_stack.app.load_settings",
            return_value=_settings(tmp_path, enabled=False),
        ),
        patch("screen_stack.app.configure_logging"),
        TestClient(create_app()) as client,
    ):
        emitted = client.post("/api/screens/ui-1/emit", json={"args": {"html": "<p>x</p>"}})

    assert emitted.json()["persisted"] is False
    assert not (tmp_path / ".history").exists()

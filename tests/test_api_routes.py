"""Tests for API routes."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from lookout.app import create_app


def _response(status_code, message="Success", event=None):
    body = {
        "message": message,
        "timestamp": "2025-07-24T10:30:45.123Z",
        "screenshotUrl": None,
        "totalElapsedMs": 10,
        "steps": [],
        "event": event,
    }
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


class TestAPIRoutes:
    """Test suite for API routes."""

    @pytest.fixture
    def client(self):
        """Create test client."""
        return TestClient(create_app())

    def test_healthz(self, client):
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_run_success(self, client):
        with patch("lookout.api.routes.async_handler", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = _response(200, event={"url": "https://x.test"})

            response = client.post("/run", json={"url": "https://x.test"})

        assert response.status_code == 200
        assert response.json()["message"] == "Success"
        mock_run.assert_awaited_once_with(
            {"url": "https://x.test"}, url="https://x.test", selector=None
        )

    def test_run_without_body(self, client):
        with patch("lookout.api.routes.async_handler", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = _response(200, event={})

            response = client.post("/run")

        assert response.status_code == 200
        mock_run.assert_awaited_once_with({}, url=None, selector=None)

    def test_run_failure_status_propagates(self, client):
        with patch("lookout.api.routes.async_handler", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = _response(500, message="Error: Component not found")

            response = client.post("/run", json={"selector": "#missing", "note": "nightly"})

        assert response.status_code == 500
        assert response.json()["message"] == "Error: Component not found"
        event = mock_run.await_args.args[0]
        assert event == {"selector": "#missing", "note": "nightly"}

    def test_run_rejects_bad_types(self, client):
        response = client.post("/run", json={"url": 42})
        assert response.status_code == 422

    def test_run_echoes_explicit_nulls(self, client):
        with patch("lookout.api.routes.async_handler", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = _response(200)

            client.post("/run", json={"url": None, "note": None})

        mock_run.assert_awaited_once_with(
            {"url": None, "note": None}, url=None, selector=None
        )

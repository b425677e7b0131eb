"""Tests for the plain HTTP front-end."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

import pytest
from starlette.testclient import TestClient

from offx_mcp.ext.mcp import Dispatcher, HTTPToolServer, create_http_app

if TYPE_CHECKING:
    from conftest import FakeOffx

NOT_FOUND = {"error": "Not found", "code": 404}


@pytest.fixture
def http(dispatcher: Dispatcher) -> Iterator[TestClient]:
    with TestClient(create_http_app(dispatcher)) as client:
        yield client


class TestDiscoveryRoutes:
    def test_health(self, http: TestClient, upstream: FakeOffx) -> None:
        response = http.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert upstream.requests == []

    def test_list_tools(self, http: TestClient) -> None:
        response = http.post("/list_tools")
        assert response.status_code == 200
        tools = response.json()["tools"]
        assert len(tools) == 10
        assert tools[0]["name"] == "search_drugs"
        assert {t["category"] for t in tools} == {"drugs", "alerts", "scores", "adverse_events", "targets"}
        assert all(isinstance(t["schema"], list) and t["schema"] for t in tools)
        alerts = next(t for t in tools if t["name"] == "get_alerts")
        assert [p["name"] for p in alerts["schema"]][:4] == ["drug_id", "target_id", "action_id", "page"]

    @pytest.mark.parametrize("method, path", [
        ("POST", "/get_weather"),
        ("GET", "/search_drugs"),
        ("GET", "/nope/deeper"),
        ("GET", "/list_tools"),
    ])
    def test_not_found(self, http: TestClient, upstream: FakeOffx, method: str, path: str) -> None:
        response = http.request(method, path)
        assert response.status_code == 404
        assert response.json() == NOT_FOUND
        assert upstream.requests == []

    def test_unknown_tool_with_bad_body(self, http: TestClient) -> None:
        """The path is checked before the body."""
        response = http.post("/get_weather", content=b"{not json")
        assert response.status_code == 404
        assert response.json() == NOT_FOUND


class TestToolRoutes:
    def test_success_passes_body_through(self, http: TestClient, upstream: FakeOffx) -> None:
        upstream.respond(body={"drugs": [{"drug_id": 99402}], "total": 1})
        response = http.post("/search_drugs", json={"drug": "everolimus"})
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"drugs": [{"drug_id": 99402}], "total": 1}
        assert upstream.query == [("drug", "everolimus"), ("token", "test-token")]

    def test_targets_reshaped(self, http: TestClient, upstream: FakeOffx) -> None:
        upstream.respond(body={"targets": [{"target_id": 158}]})
        response = http.post("/get_targets", json={"drug_id": "11204", "type": "secondary"})
        assert response.json() == {"secondary_targets": [{"target_id": 158}]}

    @pytest.mark.parametrize("content", [b"", b"{not json", b"[1, 2]", b'"everolimus"'])
    def test_body_must_be_json_object(self, http: TestClient, upstream: FakeOffx, content: bytes) -> None:
        response = http.post("/search_drugs", content=content)
        assert response.status_code == 400
        assert response.json()["code"] == 400
        assert upstream.requests == []

    def test_invalid_combination(self, http: TestClient, upstream: FakeOffx) -> None:
        response = http.post("/get_drugs", json={"target_id": "123"})
        assert response.status_code == 400
        assert response.json() == {
            "error": "You must provide either both target_id and action_id, or only adverse_event_id",
            "code": 400,
        }
        assert upstream.requests == []

    def test_invalid_field(self, http: TestClient) -> None:
        response = http.post("/get_alerts", json={"drug_id": "1", "alert_severity": "maybe"})
        assert response.status_code == 400
        assert response.json()["error"] == "alert_severity must be one of: yes, no"

    def test_upstream_error(self, http: TestClient, upstream: FakeOffx) -> None:
        upstream.respond(500, raw=b"internal")
        response = http.post("/get_score", json={"drug_id": "99402"})
        assert response.status_code == 500
        assert response.json() == {"error": "Request failed with status 500: internal", "code": 500}


class TestLifespan:
    def test_shutdown_hook_runs_once(self, dispatcher: Dispatcher) -> None:
        calls: list[str] = []

        async def on_shutdown() -> None:
            calls.append("closed")

        server = HTTPToolServer("offx", dispatcher, on_shutdown=on_shutdown)
        with TestClient(server.app) as client:
            assert client.get("/health").status_code == 200
            assert calls == []
        assert calls == ["closed"]

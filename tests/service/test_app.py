"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from mdxport.migrator import Migrator
from mdxport.resolution.orchestrator import NO_CREDENTIAL_WARNING
from mdxport.service.app import create_app
from tests._fixtures.fakes import ScriptedClient, echo_callout


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(lambda: Migrator()))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_scan_endpoint_lists_components(client: TestClient) -> None:
    response = client.post("/scan", json={"mdx": "Intro\n\n<ProTip>Use it</ProTip>\n"})

    assert response.status_code == 200
    data = response.json()
    assert data["unknown_counts"] == {"ProTip": 1}
    summary = data["components"][0]
    assert summary["name"] == "ProTip"
    assert summary["usages"] == 1
    assert summary["has_definition"] is False
    assert summary["category"] == "tip"
    assert summary["placeholder_ids"][0] in data["content"]


def test_convert_endpoint_without_credentials_returns_stubs(client: TestClient) -> None:
    response = client.post("/convert", json={"mdx": "<Foo />\n"})

    assert response.status_code == 200
    data = response.json()
    assert "MANUAL REVIEW NEEDED: <Foo>" in data["converted"]
    assert NO_CREDENTIAL_WARNING in data["warnings"]
    assert data["stats"]["components"] == 1
    assert {"type": "manual-review", "count": 1, "detail": "1 usage(s) left for manual review"} in data["changes"]


def test_convert_endpoint_uses_configured_client() -> None:
    app = create_app(lambda: Migrator(client=ScriptedClient(echo_callout)))
    response = TestClient(app).post("/convert", json={"mdx": "Intro\n\n<Foo />\n"})

    assert response.status_code == 200
    assert response.json()["converted"] == 'Intro\n\n<Callout kind="info">Foo #0</Callout>\n'


def test_convert_endpoint_rejects_missing_body(client: TestClient) -> None:
    response = client.post("/convert", json={})
    assert response.status_code == 422

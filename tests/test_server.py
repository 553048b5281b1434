"""Tests for the FastAPI registry service."""

from __future__ import annotations

from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from regscout.config import RegScoutConfig
from regscout.constants import CACHE_CONTROL_FRESH, CACHE_CONTROL_STALE
from regscout.core import RegistryResponse, RegistryService
from regscout.models import CachedRegistry, VersionInfo
from regscout.server import create_app


def _service(response: RegistryResponse) -> MagicMock:
    service = MagicMock(spec=RegistryService)
    service.read = AsyncMock(return_value=response)
    return service


@pytest.mark.unit
class TestRegistryEndpoint:
    def test_health(self) -> None:
        client = TestClient(create_app(lambda: _service(RegistryResponse(payload={}))))

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_fresh_registry(self) -> None:
        payload = CachedRegistry(
            last_updated_at="2024-05-01T12:00:00.000Z",
            registry={"@scope/pkg-a": VersionInfo.unsupported()},
        ).to_json()
        service = _service(RegistryResponse(payload=payload, cache_control=CACHE_CONTROL_FRESH))
        client = TestClient(create_app(lambda: service))

        response = client.get("/registry")

        assert response.status_code == 200
        assert response.headers["cache-control"] == CACHE_CONTROL_FRESH
        assert response.json() == payload

    def test_stale_registry(self) -> None:
        payload = {"lastUpdatedAt": "T1", "registry": {}, "warning": "w", "error": "e"}
        service = _service(
            RegistryResponse(payload=payload, cache_control=CACHE_CONTROL_STALE, state="stale")
        )
        client = TestClient(create_app(lambda: service))

        response = client.get("/registry")

        assert response.headers["cache-control"] == CACHE_CONTROL_STALE
        assert response.json()["warning"] == "w"

    def test_failure_is_500(self) -> None:
        payload = {
            "error": "Failed to parse registry",
            "message": "Registry parsing timeout",
            "lastUpdatedAt": "T",
            "registry": {},
        }
        service = _service(RegistryResponse(payload=payload, status_code=500, state="failed"))
        client = TestClient(create_app(lambda: service))

        response = client.get("/registry")

        assert response.status_code == 500
        assert response.json() == payload
        assert "cache-control" not in response.headers

    def test_service_created_once(self) -> None:
        created: List[MagicMock] = []

        def factory() -> MagicMock:
            service = _service(RegistryResponse(payload={"registry": {}}))
            created.append(service)
            return service

        client = TestClient(create_app(factory))
        client.get("/health")
        assert created == []

        client.get("/registry")
        client.get("/registry")

        assert len(created) == 1
        assert created[0].read.await_count == 2

    def test_missing_token_end_to_end(self) -> None:
        config = RegScoutConfig(github_token=None)
        client = TestClient(create_app(lambda: RegistryService(config)))

        response = client.get("/registry")

        assert response.status_code == 500
        assert response.json()["message"] == "GitHub token not configured on server"

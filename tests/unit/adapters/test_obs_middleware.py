"""Unit tests for the FastAPI ObsMiddleware."""
from __future__ import annotations

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

# Imported at module level so FastAPI can resolve the string-form annotations.
from observance.adapters.fastapi import ObsMiddleware, get_obs
from observance.facade import Obs
from observance.testing import TestLogger


@pytest.fixture()
def root() -> TestLogger:
    return TestLogger()


@pytest.fixture()
def client(root: TestLogger) -> TestClient:
    app = FastAPI()
    app.add_middleware(ObsMiddleware, obs=Obs(logger=root))

    @app.get("/items")
    async def items(obs: Obs = Depends(get_obs)) -> dict[str, str]:
        obs.logger.info("listing items")
        return {"ok": "1"}

    @app.get("/boom")
    async def boom() -> dict[str, str]:
        raise RuntimeError("handler exploded")

    return TestClient(app, raise_server_exceptions=False)


class TestObsMiddleware:
    def test_request_fields_on_handler_logs(self, client: TestClient, root: TestLogger) -> None:
        resp = client.get("/items?q=1", headers={"X-Request-ID": "req-42"})
        assert resp.status_code == 200
        entry = root.last_entry()
        assert entry.message == "listing items"
        assert entry.fields["url"] == "/items?q=1"
        assert entry.fields["method"] == "GET"
        assert entry.fields["requestId"] == "req-42"
        assert "accountId" not in entry.fields

    def test_unhandled_exception_becomes_500(self, client: TestClient, root: TestLogger) -> None:
        resp = client.get("/boom", headers={"X-Account-ID": "acct-1"})
        assert resp.status_code == 500
        assert resp.json()["code"] == "internal_error"

        entry = root.last_entry()
        assert entry.level == "error"
        assert entry.message == "handler exploded"
        assert entry.fields["accountId"] == "acct-1"
        assert "RuntimeError: handler exploded" in entry.fields["stack"]

    def test_root_logger_fields_untouched(self, client: TestClient, root: TestLogger) -> None:
        client.get("/items", headers={"X-Request-ID": "req-1"})
        assert root.fields == {}

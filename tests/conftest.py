"""Test fixtures — in-memory Latitude project and shared test data."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from latitude_mcp.core.cache import PromptNameCache
from latitude_mcp.core.errors import LatitudeApiError
from latitude_mcp.core.models import (
    ChangeStatus,
    DocumentChange,
    PromptDocument,
    RunResult,
    Version,
)
from latitude_mcp.core.sync import SyncOperations
from latitude_mcp.remote.client import LatitudeClient


class FakeLatitudeClient(LatitudeClient):
    """In-memory stand-in for the Latitude API.

    ``calls`` records every remote operation in order. Set ``fail_on`` to an
    operation name to make it raise, or ``fail_get_after`` to fail document
    fetches after that many successes.
    """

    def __init__(self, documents: dict[str, str] | None = None, project_id: str = "42"):
        self.project_id = project_id
        self.base_url = "http://latitude.test"
        self.documents: dict[str, str] = dict(documents or {})
        self.live_version = str(uuid4())
        self.calls: list[str] = []
        self.deployments: list[tuple[list[DocumentChange], str]] = []
        self.fail_on: str | None = None
        self.fail_get_after: int | None = None
        self._gets = 0
        self.closed = 0

    def _record(self, op: str) -> None:
        self.calls.append(op)
        if self.fail_on == op:
            raise LatitudeApiError(f"{op} failed", status_code=500, details={"op": op})

    async def close(self) -> None:
        self.closed += 1

    async def list_documents(self, version: str = "live") -> list[PromptDocument]:
        self._record("list_documents")
        return [
            PromptDocument(path=p, content=c, version_uuid=self.live_version)
            for p, c in self.documents.items()
        ]

    async def get_document(self, path: str, version: str = "live") -> PromptDocument:
        self._record("get_document")
        if self.fail_get_after is not None and self._gets >= self.fail_get_after:
            raise LatitudeApiError("connection reset", status_code=503)
        self._gets += 1
        if path not in self.documents:
            raise LatitudeApiError(f"Document not found: {path}", status_code=404)
        return PromptDocument(path=path, content=self.documents[path], version_uuid=self.live_version)

    async def run_document(
        self, path: str, parameters: dict[str, Any] | None = None, version: str = "live"
    ) -> RunResult:
        self._record("run_document")
        if path not in self.documents:
            raise LatitudeApiError(f"Document not found: {path}", status_code=404)
        return RunResult(
            path=path,
            text=f"ran {path} with {sorted((parameters or {}).keys())}",
            total_tokens=12,
            uuid="conv-1",
            raw={"uuid": "conv-1"},
        )

    async def get_live_version(self) -> Version:
        self._record("get_live_version")
        return Version(uuid=self.live_version)

    async def deploy_to_live(self, changes: list[DocumentChange], description: str) -> Version:
        self._record("deploy_to_live")
        self.deployments.append((list(changes), description))
        for change in changes:
            if change.status is ChangeStatus.DELETED:
                self.documents.pop(change.path, None)
            else:
                self.documents[change.path] = change.content
        self.live_version = str(uuid4())
        return Version(uuid=self.live_version, title=description)


@pytest.fixture
def fake_client() -> FakeLatitudeClient:
    """Remote project holding prompts ``a`` and ``b``."""
    return FakeLatitudeClient({"a": "A v1", "b": "B v1"})


@pytest.fixture
def cache(fake_client) -> PromptNameCache:
    return PromptNameCache(fake_client.get_prompt_names, ttl_seconds=60)


@pytest.fixture
def ops(fake_client, cache, tmp_path) -> SyncOperations:
    return SyncOperations(fake_client, cache=cache, prompts_dir=str(tmp_path / "prompts"))


@pytest.fixture
def app(ops):
    """FastAPI test app with the fake project wired in."""
    from latitude_mcp.core.sync import get_sync_operations
    from latitude_mcp.main import app as _app

    _app.dependency_overrides[get_sync_operations] = lambda: ops
    yield _app
    _app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    """HTTP test client."""
    return TestClient(app)

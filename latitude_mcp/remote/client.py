"""Async client for the Latitude prompt store API."""

from __future__ import annotations

from functools import lru_cache
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from latitude_mcp.config import get_settings
from latitude_mcp.core.errors import LatitudeApiError
from latitude_mcp.core.models import DocumentChange, PromptDocument, RunResult, Version

logger = structlog.get_logger()

LIVE = "live"


class LatitudeClient:
    """HTTP client wrapping the Latitude v3 gateway endpoints a project needs."""

    def __init__(
        self,
        api_key: str,
        project_id: str,
        base_url: str = "https://gateway.latitude.so/api/v3",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.project_id = str(project_id)
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=f"{self.base_url}/projects/{self.project_id}",
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
            transport=transport,
        )

    def get_project_id(self) -> str:
        return self.project_id

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            resp = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise LatitudeApiError(f"Request to Latitude failed: {e}") from e

        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                message = body.get("message") or body.get("detail") or resp.text
                details = body.get("details") or body.get("errors")
            else:
                message, details = resp.text or resp.reason_phrase, None
            logger.warning(
                "latitude.request_failed",
                method=method,
                url=url,
                status=resp.status_code,
            )
            raise LatitudeApiError(message, status_code=resp.status_code, details=details)

        if not resp.content:
            return {}
        return resp.json()

    # --- Documents ---

    async def list_documents(self, version: str = LIVE) -> list[PromptDocument]:
        """List all documents of a version."""
        data = await self._request("GET", f"/versions/{version}/documents")
        return [_to_document(d) for d in data]

    async def get_prompt_names(self) -> list[str]:
        return [doc.path for doc in await self.list_documents(LIVE)]

    async def get_document(self, path: str, version: str = LIVE) -> PromptDocument:
        """Fetch one document with its full content."""
        data = await self._request(
            "GET", f"/versions/{version}/documents/{quote(path, safe='/')}"
        )
        return _to_document(data)

    async def run_document(
        self,
        path: str,
        parameters: dict[str, Any] | None = None,
        version: str = LIVE,
    ) -> RunResult:
        """Execute a document and return its (non-streamed) response."""
        data = await self._request(
            "POST",
            f"/versions/{version}/documents/run",
            json={"path": path, "parameters": parameters or {}, "stream": False},
        )
        response = data.get("response") or {}
        usage = response.get("usage") or {}
        return RunResult(
            path=path,
            text=response.get("text"),
            total_tokens=usage.get("totalTokens"),
            uuid=data.get("uuid"),
            raw=data,
        )

    # --- Versions ---

    async def get_live_version(self) -> Version:
        data = await self._request("GET", f"/versions/{LIVE}")
        return _to_version(data)

    async def deploy_to_live(self, changes: list[DocumentChange], description: str) -> Version:
        """Commit a change-set as one new version and publish it to LIVE.

        Creates a draft, pushes every change into it, then publishes the draft.
        A failure after the draft exists leaves the draft unpublished.
        """
        draft = _to_version(await self._request("POST", "/versions", json={"name": description}))
        logger.debug("latitude.draft_created", version=draft.uuid, description=description)

        await self._request(
            "POST",
            f"/versions/{draft.uuid}/push",
            json={"changes": [c.to_payload() for c in changes]},
        )

        published = await self._request(
            "POST",
            f"/versions/{draft.uuid}/publish",
            json={"title": description, "description": description},
        )
        version = _to_version(published) if published else draft
        logger.info("latitude.published", version=version.uuid, changes=len(changes))
        return version


def _to_document(data: dict[str, Any]) -> PromptDocument:
    return PromptDocument(
        path=data["path"],
        content=data.get("content") or "",
        version_uuid=data.get("versionUuid") or data.get("commitUuid"),
    )


def _to_version(data: dict[str, Any]) -> Version:
    return Version(
        uuid=data.get("uuid") or data.get("versionUuid", ""),
        title=data.get("title") or data.get("name"),
        description=data.get("description"),
    )


@lru_cache
def get_latitude_client() -> LatitudeClient:
    """Get cached Latitude client instance."""
    settings = get_settings()
    if not settings.latitude_api_key or not settings.latitude_project_id:
        raise RuntimeError("LATITUDE_API_KEY and LATITUDE_PROJECT_ID must be set")
    client = LatitudeClient(
        api_key=settings.latitude_api_key,
        project_id=settings.latitude_project_id,
        base_url=settings.latitude_base_url,
        timeout=settings.request_timeout,
    )
    logger.info("latitude.client_created", project_id=settings.latitude_project_id)
    return client

"""Deployment coordinator: commits a change-set to LIVE as one version."""

from __future__ import annotations

import structlog

from latitude_mcp.core.cache import PromptNameCache
from latitude_mcp.core.errors import InvalidPromptSetError, VersionConflictError
from latitude_mcp.core.models import ChangeStatus, DocumentChange, RemoteSnapshot, Version
from latitude_mcp.remote.client import LatitudeClient

logger = structlog.get_logger()


def _summarise(changes: list[DocumentChange]) -> dict[str, int]:
    counts = {status.value: 0 for status in ChangeStatus}
    for change in changes:
        counts[change.status.value] += 1
    return counts


class DeploymentCoordinator:
    """Pushes change-sets through the remote versioning API.

    No retries and no local rollback: the remote store owns atomicity, and
    failures propagate unchanged.
    """

    def __init__(self, client: LatitudeClient, cache: PromptNameCache | None = None) -> None:
        self.client = client
        self.cache = cache

    async def deploy(
        self,
        changes: list[DocumentChange],
        description: str,
        snapshot: RemoteSnapshot | None = None,
    ) -> Version:
        """Deploy ``changes`` to LIVE and return the new version.

        When ``snapshot`` carries the LIVE version it was listed at, the deploy
        fails with ``VersionConflictError`` if LIVE has moved since. The check
        runs just before the draft is created, so a window remains between the
        two calls.
        """
        if not changes:
            raise InvalidPromptSetError("Refusing to deploy an empty change-set")

        paths = [c.path for c in changes]
        if len(paths) != len(set(paths)):
            raise InvalidPromptSetError("A change-set may touch each path only once")

        if snapshot is not None and snapshot.version_uuid:
            live = await self.client.get_live_version()
            if live.uuid != snapshot.version_uuid:
                logger.warning(
                    "deploy.version_conflict",
                    expected=snapshot.version_uuid,
                    actual=live.uuid,
                    description=description,
                )
                raise VersionConflictError(snapshot.version_uuid, live.uuid)

        version = await self.client.deploy_to_live(changes, description)
        logger.info(
            "deploy.published",
            version=version.uuid,
            description=description,
            **_summarise(changes),
        )

        if self.cache is not None:
            await self.cache.invalidate()
        return version

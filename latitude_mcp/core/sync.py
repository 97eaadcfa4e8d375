"""Prompt-set synchronisation workflows: push, append, replace, pull."""

from __future__ import annotations

from collections import Counter
from functools import lru_cache
from pathlib import Path
from typing import Any

import structlog

from latitude_mcp.config import get_settings
from latitude_mcp.core.cache import PromptNameCache
from latitude_mcp.core.deployer import DeploymentCoordinator
from latitude_mcp.core.differ import ChangeSetBuilder, validate_prompts
from latitude_mcp.core.errors import InvalidPromptSetError
from latitude_mcp.core.mirror import LocalMirror
from latitude_mcp.core.models import (
    AppendResult,
    PromptDocument,
    PromptInput,
    PullResult,
    PushResult,
    RemoteSnapshot,
    ReplaceResult,
    RunResult,
)
from latitude_mcp.remote.client import LIVE, LatitudeClient, get_latitude_client
from latitude_mcp.utils.logging import logged_workflow

logger = structlog.get_logger()


class SyncOperations:
    """Caller-facing workflows over one Latitude project.

    Each workflow lists LIVE, builds a change-set and deploys it in that
    order. Concurrent workflows are not coordinated beyond the LIVE version
    check done at deploy time.
    """

    def __init__(
        self,
        client: LatitudeClient,
        cache: PromptNameCache | None = None,
        prompts_dir: str = "prompts",
        extension: str = ".promptl",
    ) -> None:
        self.client = client
        self.cache = cache or PromptNameCache(client.get_prompt_names)
        self.builder = ChangeSetBuilder()
        self.deployer = DeploymentCoordinator(client, self.cache)
        self.prompts_dir = prompts_dir
        self.extension = extension

    async def snapshot(self) -> RemoteSnapshot:
        """Current LIVE version and the paths it contains."""
        live = await self.client.get_live_version()
        docs = await self.client.list_documents(LIVE)
        return RemoteSnapshot(paths=[d.path for d in docs], version_uuid=live.uuid)

    # --- Read-only ---

    async def list_prompts(self) -> list[str]:
        docs = await self.client.list_documents(LIVE)
        names = [d.path for d in docs]
        self.cache.store(names)
        return names

    async def get_prompt(self, name: str) -> PromptDocument:
        return await self.client.get_document(name, LIVE)

    async def run_prompt(self, name: str, parameters: dict[str, Any] | None = None) -> RunResult:
        return await self.client.run_document(name, parameters or {})

    # --- Deploying ---

    @logged_workflow("push")
    async def push(self, prompts: list[PromptInput]) -> PushResult:
        """Replace the whole LIVE prompt set with ``prompts``."""
        validate_prompts(prompts)

        snapshot = await self.snapshot()
        plan = self.builder.replace_all(snapshot, prompts)
        version = await self.deployer.deploy(plan.changes, "push-prompts", snapshot=snapshot)

        logger.info(
            "sync.push_completed",
            deleted=len(plan.deleted),
            added=len(plan.added),
            version=version.uuid,
        )
        return PushResult(deleted=plan.deleted, added=plan.added, version=version)

    @logged_workflow("append")
    async def append(self, prompts: list[PromptInput], overwrite: bool = False) -> AppendResult:
        """Add ``prompts`` to LIVE. Existing names are skipped unless ``overwrite``."""
        validate_prompts(prompts)

        snapshot = await self.snapshot()
        plan = self.builder.additive_merge(snapshot, prompts, overwrite=overwrite)

        if plan.is_empty:
            logger.info("sync.append_noop", skipped=len(plan.skipped))
            return AppendResult(skipped=plan.skipped)

        version = await self.deployer.deploy(plan.changes, "append-prompts", snapshot=snapshot)
        logger.info(
            "sync.append_completed",
            added=len(plan.added),
            updated=len(plan.updated),
            skipped=len(plan.skipped),
            version=version.uuid,
        )
        return AppendResult(
            added=plan.added,
            updated=plan.updated,
            skipped=plan.skipped,
            version=version,
        )

    @logged_workflow("replace")
    async def replace(self, name: str, content: str) -> ReplaceResult:
        """Create or replace a single prompt."""
        prompt = PromptInput(name=name, content=content)
        snapshot = await self.snapshot()
        plan = self.builder.single(snapshot, prompt)
        version = await self.deployer.deploy(plan.changes, f"replace-{name}", snapshot=snapshot)

        action = "replaced" if plan.updated else "created"
        logger.info("sync.replace_completed", name=name, action=action, version=version.uuid)
        return ReplaceResult(name=name, action=action, version=version, content=content)

    # --- Mirroring ---

    @logged_workflow("pull")
    async def pull(self, output_dir: str | Path | None = None) -> PullResult:
        """Mirror LIVE into ``output_dir``.

        Existing mirror files are deleted before anything is fetched, so a
        failed pull can leave the directory empty or partially written.
        """
        mirror = LocalMirror(output_dir or Path.cwd() / self.prompts_dir, self.extension)
        mirror.ensure_directory()
        deleted = mirror.clear()

        docs = await self.client.list_documents(LIVE)
        result = PullResult(directory=str(mirror.directory), deleted=deleted)
        if not docs:
            logger.info("sync.pull_empty", directory=str(mirror.directory))
            return result

        collisions = sorted(
            f for f, n in Counter(mirror.filename_for(d.path) for d in docs).items() if n > 1
        )
        if collisions:
            raise InvalidPromptSetError(
                "Several prompts map to the same local file: " + ", ".join(collisions)
            )

        for doc in docs:
            full = await self.client.get_document(doc.path, LIVE)
            result.written.append(mirror.write(doc.path, full.content))

        logger.info(
            "sync.pull_completed",
            directory=str(mirror.directory),
            deleted=len(deleted),
            written=len(result.written),
        )
        return result


@lru_cache
def get_sync_operations() -> SyncOperations:
    """Get cached workflows bound to the configured project."""
    settings = get_settings()
    client = get_latitude_client()
    cache = PromptNameCache(client.get_prompt_names, ttl_seconds=settings.cache_ttl_seconds)
    return SyncOperations(
        client,
        cache=cache,
        prompts_dir=settings.prompts_dir,
        extension=settings.prompt_extension,
    )

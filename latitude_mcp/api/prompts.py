"""Prompt sync endpoints, mirroring the tool surface over HTTP."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

from latitude_mcp.api.models import (
    AppendPromptsRequest,
    AppendResponse,
    PromptListResponse,
    PromptResponse,
    PullPromptsRequest,
    PullResponse,
    PushPromptsRequest,
    PushResponse,
    ReplacePromptRequest,
    ReplaceResponse,
    RunPromptRequest,
    RunPromptResponse,
)
from latitude_mcp.core.errors import (
    InvalidPromptSetError,
    LatitudeApiError,
    VersionConflictError,
)
from latitude_mcp.core.sync import SyncOperations, get_sync_operations

router = APIRouter()


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, InvalidPromptSetError):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, VersionConflictError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, LatitudeApiError):
        status = 404 if e.status_code == 404 else 502
        return HTTPException(status_code=status, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


def _confined_pull_dir(ops: SyncOperations, output_dir: str | None) -> Path:
    """Resolve a requested pull directory inside the configured prompts root.

    Relative paths are taken from the root. Anything resolving outside it is rejected.
    """
    root = (Path.cwd() / ops.prompts_dir).resolve()
    if not output_dir:
        return root
    target = (root / output_dir).resolve()
    if target != root and root not in target.parents:
        raise HTTPException(
            status_code=422,
            detail=f"outputDir must be inside the prompts directory ({root})",
        )
    return target


@router.get("", response_model=PromptListResponse)
async def list_prompts(
    ops: SyncOperations = Depends(get_sync_operations),
) -> PromptListResponse:
    """List prompt names in LIVE."""
    try:
        names = await ops.list_prompts()
    except LatitudeApiError as e:
        raise _http_error(e)
    return PromptListResponse(project_id=ops.client.get_project_id(), names=names)


@router.post("/push", response_model=PushResponse)
async def push_prompts(
    data: PushPromptsRequest,
    ops: SyncOperations = Depends(get_sync_operations),
) -> PushResponse:
    """Replace every prompt in LIVE with the given set."""
    try:
        result = await ops.push(data.prompts)
    except (InvalidPromptSetError, VersionConflictError, LatitudeApiError) as e:
        raise _http_error(e)
    return PushResponse(**result.model_dump())


@router.post("/append", response_model=AppendResponse)
async def append_prompts(
    data: AppendPromptsRequest,
    ops: SyncOperations = Depends(get_sync_operations),
) -> AppendResponse:
    """Add prompts to LIVE, keeping existing ones."""
    try:
        result = await ops.append(data.prompts, overwrite=data.overwrite)
    except (InvalidPromptSetError, VersionConflictError, LatitudeApiError) as e:
        raise _http_error(e)
    return AppendResponse(deployed=result.deployed, **result.model_dump())


@router.post("/replace", response_model=ReplaceResponse)
async def replace_prompt(
    data: ReplacePromptRequest,
    ops: SyncOperations = Depends(get_sync_operations),
) -> ReplaceResponse:
    """Create or replace a single prompt."""
    try:
        result = await ops.replace(data.name, data.content)
    except (InvalidPromptSetError, VersionConflictError, LatitudeApiError) as e:
        raise _http_error(e)
    return ReplaceResponse(name=result.name, action=result.action, version=result.version)


@router.post("/pull", response_model=PullResponse)
async def pull_prompts(
    data: PullPromptsRequest,
    ops: SyncOperations = Depends(get_sync_operations),
) -> PullResponse:
    """Mirror LIVE into a directory under the configured prompts root."""
    target = _confined_pull_dir(ops, data.output_dir)
    try:
        result = await ops.pull(target)
    except (InvalidPromptSetError, LatitudeApiError) as e:
        raise _http_error(e)
    return PullResponse(**result.model_dump())


@router.post("/run", response_model=RunPromptResponse)
async def run_prompt(
    data: RunPromptRequest,
    ops: SyncOperations = Depends(get_sync_operations),
) -> RunPromptResponse:
    """Execute a prompt with parameters."""
    try:
        result = await ops.run_prompt(data.name, data.parameters)
    except LatitudeApiError as e:
        raise _http_error(e)
    return RunPromptResponse(
        name=data.name,
        text=result.text,
        total_tokens=result.total_tokens,
        conversation_uuid=result.uuid,
    )


@router.get("/{path:path}", response_model=PromptResponse)
async def get_prompt(
    path: str,
    ops: SyncOperations = Depends(get_sync_operations),
) -> PromptResponse:
    """Get a prompt's LIVE content by path."""
    try:
        doc = await ops.get_prompt(path)
    except LatitudeApiError as e:
        raise _http_error(e)
    return PromptResponse(name=doc.path, version_uuid=doc.version_uuid, content=doc.content)

"""Prompt tools: the seven operations exposed over the tool-call protocol.

Every handler returns exactly one ``ToolResult``; exceptions never cross
the tool boundary.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from latitude_mcp.api.models import (
    AppendPromptsRequest,
    GetPromptRequest,
    ListPromptsRequest,
    PullPromptsRequest,
    PushPromptsRequest,
    ReplacePromptRequest,
    RunPromptRequest,
)
from latitude_mcp.core.errors import LatitudeApiError
from latitude_mcp.core.sync import SyncOperations

logger = structlog.get_logger()

PREVIEW_CHARS = 500


class ToolResult(BaseModel):
    text: str
    is_error: bool = False


@dataclass
class ToolDefinition:
    name: str
    title: str
    description: str
    input_model: type[BaseModel]

    @property
    def input_schema(self) -> dict[str, Any]:
        return self.input_model.model_json_schema(by_alias=True)


def format_success(title: str, content: str) -> ToolResult:
    return ToolResult(text=f"## {title}\n\n{content}")


def format_error(error: BaseException) -> ToolResult:
    if isinstance(error, LatitudeApiError):
        return ToolResult(text=error.to_markdown(), is_error=True)
    return ToolResult(text=f"## Error\n\n{error}", is_error=True)


def _bullets(names: list[str], indent: str = "") -> str:
    return "\n".join(f"{indent}- `{n}`" for n in names)


class PromptTools:
    """Owns the sync workflows and the prompt-name cache for one tool server."""

    def __init__(self, ops: SyncOperations) -> None:
        self.ops = ops
        self.cache = ops.cache
        self._handlers: dict[str, tuple[type[BaseModel], Callable[[Any], Awaitable[ToolResult]]]] = {
            "list_prompts": (ListPromptsRequest, self.list_prompts),
            "get_prompt": (GetPromptRequest, self.get_prompt),
            "run_prompt": (RunPromptRequest, self.run_prompt),
            "push_prompts": (PushPromptsRequest, self.push_prompts),
            "append_prompts": (AppendPromptsRequest, self.append_prompts),
            "pull_prompts": (PullPromptsRequest, self.pull_prompts),
            "replace_prompt": (ReplacePromptRequest, self.replace_prompt),
        }

    async def startup(self) -> None:
        """Warm the name cache before the tools are advertised."""
        await self.cache.refresh()
        logger.info("tools.ready", tools=len(self._handlers), prompts=len(self.cache.names))

    async def definitions(self) -> list[ToolDefinition]:
        names = await self.cache.read()
        replace_desc = "Replace a single prompt in LIVE."
        if names:
            replace_desc += "\n\n**Available prompts:** " + ", ".join(f"`{n}`" for n in names)

        return [
            ToolDefinition(
                "list_prompts", "List Prompts", "List all prompt names in LIVE version",
                ListPromptsRequest,
            ),
            ToolDefinition(
                "get_prompt", "Get Prompt", "Get full prompt content by name", GetPromptRequest
            ),
            ToolDefinition(
                "run_prompt", "Run Prompt", "Execute a prompt with parameters", RunPromptRequest
            ),
            ToolDefinition(
                "push_prompts",
                "Push Prompts",
                "Replace ALL prompts in LIVE with the given prompts. "
                "Creates a version, pushes and publishes it automatically.",
                PushPromptsRequest,
            ),
            ToolDefinition(
                "append_prompts",
                "Append Prompts",
                "Add prompts to LIVE without removing existing ones. "
                "Use overwrite=true to replace prompts with same name.",
                AppendPromptsRequest,
            ),
            ToolDefinition(
                "pull_prompts",
                "Pull Prompts",
                "Download all prompts from LIVE to local ./prompts/*.promptl files",
                PullPromptsRequest,
            ),
            ToolDefinition("replace_prompt", "Replace Prompt", replace_desc, ReplacePromptRequest),
        ]

    async def call(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Validate ``arguments`` and dispatch to the named tool."""
        if name not in self._handlers:
            return format_error(ValueError(f"Unknown tool: {name}"))

        model, handler = self._handlers[name]
        try:
            args = model.model_validate(arguments or {})
        except ValidationError as e:
            return format_error(ValueError(f"Invalid arguments for {name}: {e}"))

        try:
            return await handler(args)
        except Exception as e:
            logger.warning("tools.call_failed", tool=name, error=str(e))
            return format_error(e)

    # --- Handlers ---

    async def list_prompts(self, args: ListPromptsRequest) -> ToolResult:
        names = await self.ops.list_prompts()
        if not names:
            return format_success("No Prompts Found", "The project has no prompts yet.")
        return format_success(
            f"Found {len(names)} Prompt(s)",
            f"**Project ID:** `{self.ops.client.get_project_id()}`\n\n{_bullets(names)}",
        )

    async def get_prompt(self, args: GetPromptRequest) -> ToolResult:
        doc = await self.ops.get_prompt(args.name)
        content = f"**Name:** `{doc.path}`\n\n"
        content += f"**Version:** `{doc.version_uuid}`\n\n"
        content += f"### Content\n\n```promptl\n{doc.content}\n```"
        return format_success(f"Prompt: {doc.path}", content)

    async def run_prompt(self, args: RunPromptRequest) -> ToolResult:
        result = await self.ops.run_prompt(args.name, args.parameters)

        content = f"**Prompt:** `{args.name}`\n\n"
        if args.parameters:
            content += f"**Parameters:**\n```json\n{json.dumps(args.parameters, indent=2)}\n```\n\n"
        content += f"### Response\n\n{result.text or json.dumps(result.raw, indent=2, default=str)}"
        if result.total_tokens is not None:
            content += f"\n\n**Tokens:** {result.total_tokens} total"
        if result.uuid:
            content += f"\n\n**Conversation ID:** `{result.uuid}`"
        return format_success("Prompt Executed", content)

    async def push_prompts(self, args: PushPromptsRequest) -> ToolResult:
        result = await self.ops.push(args.prompts)

        content = f"**Deleted:** {len(result.deleted)} prompt(s)\n"
        content += f"**Added:** {len(result.added)} prompt(s)\n"
        content += f"**Version:** `{result.version.uuid}`\n\n"
        content += "### Deployed Prompts\n\n"
        content += _bullets(result.added)
        return format_success("Prompts Pushed to LIVE", content)

    async def append_prompts(self, args: AppendPromptsRequest) -> ToolResult:
        result = await self.ops.append(args.prompts, overwrite=args.overwrite)

        if not result.deployed:
            return format_success(
                "No Changes Made",
                f"All {len(result.skipped)} prompt(s) already exist. "
                "Use `overwrite: true` to replace.\n\n"
                f"**Skipped:**\n{_bullets(result.skipped, '  ')}",
            )

        content = ""
        if result.added:
            content += f"**Added:** {len(result.added)}\n{_bullets(result.added, '  ')}\n\n"
        if result.updated:
            content += f"**Updated:** {len(result.updated)}\n{_bullets(result.updated, '  ')}\n\n"
        if result.skipped:
            content += f"**Skipped:** {len(result.skipped)} (already exist)\n"
        content += f"\n**Version:** `{result.version.uuid}`"
        return format_success("Prompts Appended to LIVE", content)

    async def pull_prompts(self, args: PullPromptsRequest) -> ToolResult:
        result = await self.ops.pull(args.output_dir)

        if not result.written:
            return format_success(
                "No Prompts to Pull",
                f"The project has no prompts.\n\n**Deleted:** {len(result.deleted)} existing file(s)",
            )

        content = f"**Directory:** `{result.directory}`\n"
        content += f"**Deleted:** {len(result.deleted)} existing file(s)\n"
        content += f"**Written:** {len(result.written)} file(s)\n\n"
        content += "### Files\n\n"
        content += _bullets(result.written)
        return format_success("Prompts Pulled from LIVE", content)

    async def replace_prompt(self, args: ReplacePromptRequest) -> ToolResult:
        result = await self.ops.replace(args.name, args.content)

        action = result.action.capitalize()
        preview = args.content[:PREVIEW_CHARS]
        if len(args.content) > PREVIEW_CHARS:
            preview += "..."
        content = f"**Prompt:** `{args.name}`\n"
        content += f"**Action:** {action}\n"
        content += f"**Version:** `{result.version.uuid}`\n\n"
        content += f"### Content Preview\n\n```promptl\n{preview}\n```"
        return format_success(f"Prompt {action}", content)

"""Pydantic request/response models for the tool and HTTP surfaces."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from latitude_mcp.core.models import PromptInput, Version


# --- Requests (also the tool input schemas) ---


class ListPromptsRequest(BaseModel):
    """List all prompt names in LIVE."""


class GetPromptRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Prompt name/path to retrieve")


class RunPromptRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Prompt name/path to execute")
    parameters: dict[str, Any] = Field(
        default_factory=dict, description="Parameters to pass to the prompt"
    )


class PushPromptsRequest(BaseModel):
    prompts: list[PromptInput] = Field(
        ..., description="Prompts to push (replaces ALL existing prompts in LIVE)"
    )


class AppendPromptsRequest(BaseModel):
    prompts: list[PromptInput] = Field(..., description="Prompts to append")
    overwrite: bool = Field(
        False, description="If true, overwrite existing prompts with same name"
    )


class ReplacePromptRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Prompt name to replace")
    content: str = Field(..., description="New prompt content")


class PullPromptsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    output_dir: str | None = Field(
        None, alias="outputDir", description="Output directory (default: ./prompts)"
    )


# --- Responses ---


class PromptListResponse(BaseModel):
    project_id: str
    names: list[str]


class PromptResponse(BaseModel):
    name: str
    version_uuid: str | None = None
    content: str


class RunPromptResponse(BaseModel):
    name: str
    text: str | None = None
    total_tokens: int | None = None
    conversation_uuid: str | None = None


class PushResponse(BaseModel):
    deleted: list[str]
    added: list[str]
    version: Version


class AppendResponse(BaseModel):
    deployed: bool
    added: list[str]
    updated: list[str]
    skipped: list[str]
    version: Version | None = None


class ReplaceResponse(BaseModel):
    name: str
    action: str
    version: Version


class PullResponse(BaseModel):
    directory: str
    deleted: list[str]
    written: list[str]

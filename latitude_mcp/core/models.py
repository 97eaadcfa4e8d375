"""Domain models for prompt documents, change-sets and versions."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ChangeStatus(str, Enum):
    """Per-path operation in a change-set."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


class PromptInput(BaseModel):
    """A caller-supplied prompt: the desired content for one path."""

    name: str = Field(..., min_length=1, description="Prompt name (without .promptl extension)")
    content: str = Field(..., description="Full prompt content")


class PromptDocument(BaseModel):
    """A document as stored in the remote project."""

    path: str
    content: str = ""
    version_uuid: str | None = None


class DocumentChange(BaseModel):
    """Whole-document replacement (or deletion) of one path."""

    path: str
    content: str = ""
    status: ChangeStatus

    def to_payload(self) -> dict[str, Any]:
        """Wire form expected by the push endpoint."""
        return {
            "path": self.path,
            "content": "" if self.status is ChangeStatus.DELETED else self.content,
            "status": self.status.value,
        }


class Version(BaseModel):
    """A version created by the remote store."""

    uuid: str
    title: str | None = None
    description: str | None = None


class RemoteSnapshot(BaseModel):
    """The LIVE listing a change-set is built from."""

    paths: list[str] = Field(default_factory=list)
    version_uuid: str | None = None

    def path_set(self) -> set[str]:
        return set(self.paths)


class ChangeSetPlan(BaseModel):
    """Output of the change-set builder.

    ``changes`` is what gets deployed; the name lists are reported back to the caller.
    """

    changes: list[DocumentChange] = Field(default_factory=list)
    added: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.changes


class RunResult(BaseModel):
    """Result of executing a document."""

    path: str
    text: str | None = None
    total_tokens: int | None = None
    uuid: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)


# --- Workflow results ---


class PushResult(BaseModel):
    deleted: list[str]
    added: list[str]
    version: Version


class AppendResult(BaseModel):
    added: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    version: Version | None = None

    @property
    def deployed(self) -> bool:
        return self.version is not None


class ReplaceResult(BaseModel):
    name: str
    action: str  # "created" or "replaced"
    version: Version
    content: str


class PullResult(BaseModel):
    directory: str
    deleted: list[str] = Field(default_factory=list)
    written: list[str] = Field(default_factory=list)

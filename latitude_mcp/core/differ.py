"""Change-set builder. Diffs a desired prompt set against the LIVE listing."""

from __future__ import annotations

from collections import Counter

from latitude_mcp.core.errors import InvalidPromptSetError
from latitude_mcp.core.models import (
    ChangeSetPlan,
    ChangeStatus,
    DocumentChange,
    PromptInput,
    RemoteSnapshot,
)


def validate_prompts(prompts: list[PromptInput]) -> None:
    """Reject collections that cannot be deployed unambiguously.

    - Empty collections (a replace-all of nothing would wipe the project)
    - Blank names
    - The same name more than once
    """
    if not prompts:
        raise InvalidPromptSetError("No prompts provided")

    blank = [i for i, p in enumerate(prompts) if not p.name.strip()]
    if blank:
        raise InvalidPromptSetError(f"Prompt names must not be blank (positions {blank})")

    duplicates = sorted(name for name, n in Counter(p.name for p in prompts).items() if n > 1)
    if duplicates:
        raise InvalidPromptSetError(
            "Duplicate prompt names: "
            + ", ".join(f"'{d}'" for d in duplicates)
            + ". Each name may appear only once per call."
        )


class ChangeSetBuilder:
    """Computes per-path operations between a snapshot of LIVE and a desired set."""

    def replace_all(
        self,
        snapshot: RemoteSnapshot,
        prompts: list[PromptInput],
    ) -> ChangeSetPlan:
        """Changes that make LIVE contain exactly ``prompts``.

        Remote paths missing from ``prompts`` are deleted; every desired prompt
        is written as ``added``, whether or not it already exists.
        """
        validate_prompts(prompts)
        desired = {p.name for p in prompts}

        plan = ChangeSetPlan()
        for path in snapshot.paths:
            if path not in desired:
                plan.changes.append(DocumentChange(path=path, status=ChangeStatus.DELETED))
                plan.deleted.append(path)

        for prompt in prompts:
            plan.changes.append(
                DocumentChange(path=prompt.name, content=prompt.content, status=ChangeStatus.ADDED)
            )
            plan.added.append(prompt.name)
        return plan

    def additive_merge(
        self,
        snapshot: RemoteSnapshot,
        prompts: list[PromptInput],
        overwrite: bool = False,
    ) -> ChangeSetPlan:
        """Changes that add ``prompts`` to LIVE without deleting anything.

        Existing names are skipped unless ``overwrite`` is set, in which case
        they become ``modified``. An all-skipped result has no changes.
        """
        validate_prompts(prompts)
        existing = snapshot.path_set()

        plan = ChangeSetPlan()
        for prompt in prompts:
            exists = prompt.name in existing
            if exists and not overwrite:
                plan.skipped.append(prompt.name)
                continue

            status = ChangeStatus.MODIFIED if exists else ChangeStatus.ADDED
            plan.changes.append(
                DocumentChange(path=prompt.name, content=prompt.content, status=status)
            )
            if exists:
                plan.updated.append(prompt.name)
            else:
                plan.added.append(prompt.name)
        return plan

    def single(self, snapshot: RemoteSnapshot, prompt: PromptInput) -> ChangeSetPlan:
        """One-element change-set creating or replacing a single prompt."""
        return self.additive_merge(snapshot, [prompt], overwrite=True)

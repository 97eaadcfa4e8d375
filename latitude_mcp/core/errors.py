"""Error types raised by the sync engine and the remote client."""

from __future__ import annotations

import json
from typing import Any


class InvalidPromptSetError(ValueError):
    """The caller-supplied prompt collection cannot be deployed as given."""


class VersionConflictError(RuntimeError):
    """LIVE moved on since the listing a change-set was built from."""

    def __init__(self, expected: str | None, actual: str | None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"LIVE version changed from '{expected}' to '{actual}' while preparing the deploy. "
            "Re-run the operation against the current state."
        )


class LatitudeApiError(Exception):
    """Failure reported by (or while talking to) the Latitude API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code:
            return f"API error ({self.status_code}): {self.message}"
        return self.message

    def to_markdown(self) -> str:
        """Render the error for a tool result."""
        lines = ["## Latitude API Error", ""]
        if self.status_code:
            lines.append(f"**Status:** {self.status_code}")
        lines.append(f"**Message:** {self.message}")
        if self.details:
            lines.extend(["", "```json", json.dumps(self.details, indent=2, default=str), "```"])
        return "\n".join(lines)

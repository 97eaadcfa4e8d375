"""Local filesystem mirror of the LIVE prompt set."""

from __future__ import annotations

from pathlib import Path

import structlog

from latitude_mcp.core.models import PromptInput

logger = structlog.get_logger()

PATH_SEPARATOR_PLACEHOLDER = "_"


class LocalMirror:
    """One ``<name>.promptl`` file per prompt under a single directory."""

    def __init__(self, directory: str | Path, extension: str = ".promptl") -> None:
        self.directory = Path(directory).resolve()
        self.extension = extension

    def filename_for(self, path: str) -> str:
        """Flatten a prompt path into a file name (``a/b`` → ``a_b.promptl``)."""
        return path.replace("/", PATH_SEPARATOR_PLACEHOLDER) + self.extension

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def existing_files(self) -> list[Path]:
        if not self.directory.is_dir():
            return []
        return sorted(
            p for p in self.directory.iterdir() if p.is_file() and p.name.endswith(self.extension)
        )

    def clear(self) -> list[str]:
        """Delete every mirror file in the directory. Other files are left alone."""
        removed = []
        for file in self.existing_files():
            file.unlink()
            removed.append(file.name)
        if removed:
            logger.debug("mirror.cleared", directory=str(self.directory), removed=len(removed))
        return removed

    def write(self, path: str, content: str) -> str:
        """Write one prompt's content, replacing the file whole. Returns the file name."""
        filename = self.filename_for(path)
        (self.directory / filename).write_text(content, encoding="utf-8")
        return filename

    def load(self) -> list[PromptInput]:
        """Read local mirror files back as prompts, named by file stem."""
        prompts = []
        for file in self.existing_files():
            name = file.name[: -len(self.extension)]
            prompts.append(PromptInput(name=name, content=file.read_text(encoding="utf-8")))
        return prompts

"""Latitude MCP CLI — latitude-mcp command."""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import Awaitable
from typing import Any, TypeVar

import click

from latitude_mcp.config import get_settings
from latitude_mcp.core.errors import InvalidPromptSetError, LatitudeApiError, VersionConflictError
from latitude_mcp.core.mirror import LocalMirror
from latitude_mcp.core.models import PromptInput
from latitude_mcp.core.sync import SyncOperations, get_sync_operations
from latitude_mcp.utils.logging import setup_logging

T = TypeVar("T")


def _format_table(rows: list[dict], columns: list[str]) -> str:
    """Simple table formatter."""
    if not rows:
        return "No results."
    widths = {c: len(c) for c in columns}
    for row in rows:
        for c in columns:
            widths[c] = max(widths[c], len(str(row.get(c, ""))))

    header = "  ".join(c.upper().ljust(widths[c]) for c in columns)
    separator = "  ".join("-" * widths[c] for c in columns)
    lines = [header, separator]
    for row in rows:
        lines.append("  ".join(str(row.get(c, "")).ljust(widths[c]) for c in columns))
    return "\n".join(lines)


def _output(ctx: click.Context, data: Any, columns: list[str] | None = None) -> None:
    fmt = ctx.meta.get("output_format", "table")
    if fmt == "table" and isinstance(data, list) and columns:
        click.echo(_format_table(data, columns))
    else:
        click.echo(json.dumps(data, indent=2, default=str))


def _run(ops: SyncOperations, coro: Awaitable[T]) -> T:
    """Run one workflow, turning expected failures into a CLI error.

    The HTTP client is closed before the event loop goes away.
    """

    async def _closing() -> T:
        try:
            return await coro
        finally:
            await ops.client.close()

    try:
        return asyncio.run(_closing())
    except (InvalidPromptSetError, VersionConflictError, LatitudeApiError) as e:
        raise click.ClickException(str(e))


def _ops(ctx: click.Context) -> SyncOperations:
    """Workflows for the configured project, built on first use."""
    if ctx.obj is None:
        try:
            ctx.obj = get_sync_operations()
        except RuntimeError as e:
            raise click.ClickException(str(e))
    return ctx.obj


@click.group()
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table")
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
@click.pass_context
def cli(ctx: click.Context, output_format: str, log_level: str | None) -> None:
    """Sync and deploy prompts in a Latitude project."""
    setup_logging(log_level or get_settings().log_level)
    ctx.meta["output_format"] = output_format


@cli.command()
def serve() -> None:
    """Serve the prompt tools over stdio."""
    from latitude_mcp.tools.server import main as serve_stdio

    serve_stdio()


@cli.command("list")
@click.pass_context
def list_cmd(ctx: click.Context) -> None:
    """List prompt names in LIVE."""
    ops = _ops(ctx)
    names = _run(ops, ops.list_prompts())
    _output(ctx, [{"name": n} for n in names], ["name"])


@cli.command()
@click.argument("name")
@click.pass_context
def get(ctx: click.Context, name: str) -> None:
    """Print a prompt's LIVE content."""
    ops = _ops(ctx)
    doc = _run(ops, ops.get_prompt(name))
    if ctx.meta.get("output_format") == "json":
        _output(ctx, doc.model_dump())
    else:
        click.echo(doc.content)


@cli.command()
@click.option("--output-dir", "-o", default=None, help="Directory to mirror into (default: ./prompts)")
@click.pass_context
def pull(ctx: click.Context, output_dir: str | None) -> None:
    """Replace local *.promptl files with the LIVE prompt set."""
    ops = _ops(ctx)
    result = _run(ops, ops.pull(output_dir))
    if ctx.meta.get("output_format") == "json":
        _output(ctx, result.model_dump())
        return
    click.echo(f"Deleted {len(result.deleted)} existing file(s) in {result.directory}")
    click.echo(f"Wrote {len(result.written)} file(s)")
    for filename in result.written:
        click.echo(f"  {filename}")


def _load_dir(ops: SyncOperations, directory: str) -> list[PromptInput]:
    prompts = LocalMirror(directory, ops.extension).load()
    if not prompts:
        raise click.ClickException(f"No *{ops.extension} files found in {directory}")
    return prompts


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def push(ctx: click.Context, directory: str, yes: bool) -> None:
    """Replace ALL LIVE prompts with the files in DIRECTORY."""
    ops = _ops(ctx)
    prompts = _load_dir(ops, directory)
    if not yes:
        click.confirm(
            f"Replace every LIVE prompt with {len(prompts)} local prompt(s)?", abort=True
        )
    result = _run(ops, ops.push(prompts))
    if ctx.meta.get("output_format") == "json":
        _output(ctx, result.model_dump())
        return
    click.echo(f"Deleted: {len(result.deleted)}  Added: {len(result.added)}")
    click.echo(f"Version: {result.version.uuid}")


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--overwrite", is_flag=True, help="Replace prompts that already exist")
@click.pass_context
def append(ctx: click.Context, directory: str, overwrite: bool) -> None:
    """Add the prompts in DIRECTORY to LIVE without deleting any."""
    ops = _ops(ctx)
    prompts = _load_dir(ops, directory)
    result = _run(ops, ops.append(prompts, overwrite=overwrite))
    if ctx.meta.get("output_format") == "json":
        _output(ctx, result.model_dump())
        return
    if not result.deployed:
        click.echo(f"No changes: all {len(result.skipped)} prompt(s) already exist.")
        return
    click.echo(
        f"Added: {len(result.added)}  Updated: {len(result.updated)}  "
        f"Skipped: {len(result.skipped)}"
    )
    click.echo(f"Version: {result.version.uuid}")


@cli.command()
@click.argument("name")
@click.option("--file", "-f", "file_path", default=None, help="Read content from file (default: stdin)")
@click.pass_context
def replace(ctx: click.Context, name: str, file_path: str | None) -> None:
    """Create or replace a single prompt."""
    if file_path:
        with open(file_path, encoding="utf-8") as f:
            content = f.read()
    else:
        content = sys.stdin.read()
    ops = _ops(ctx)
    result = _run(ops, ops.replace(name, content))
    if ctx.meta.get("output_format") == "json":
        _output(ctx, result.model_dump(exclude={"content"}))
        return
    click.echo(f"{result.action.capitalize()} '{name}' (version {result.version.uuid})")


if __name__ == "__main__":
    cli()

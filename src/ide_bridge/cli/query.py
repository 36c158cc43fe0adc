import asyncio
from collections.abc import Awaitable, Callable
from typing import Annotated, TypeVar

import typer
from rich.console import Console
from rich.markdown import Markdown

from ide_bridge.client.formatting import (
    format_context,
    format_diagnostics,
    format_failure,
    format_git_status,
    format_open_files,
    format_recent_files,
    format_selection,
    format_symbol,
)
from ide_bridge.client.query import BridgeClient, QueryFailure
from ide_bridge.models import Health

query_app = typer.Typer(help="Query a running IDE bridge.")
console = Console()

T = TypeVar("T")

UrlOption = Annotated[str | None, typer.Option(help="Bridge base URL (default: IDE_BRIDGE_URL or localhost).")]


def _get_client(url: str | None = None) -> BridgeClient:
    from ide_bridge.config import load_settings

    return BridgeClient.from_settings(load_settings(url=url))


def _render(
    action: str,
    fetch: Callable[[BridgeClient], Awaitable[T | QueryFailure]],
    render: Callable[[T], str],
    url: str | None,
) -> None:
    client = _get_client(url)
    result = asyncio.run(fetch(client))
    if isinstance(result, QueryFailure):
        console.print(format_failure(action, result), style="red", markup=False)
        raise typer.Exit(1)
    console.print(Markdown(render(result)))


@query_app.command("selection")
def selection(url: UrlOption = None) -> None:
    """Show the selected text (or the cursor position)."""
    _render("IDE selection", lambda c: c.selection(), format_selection, url)


@query_app.command("context")
def context(url: UrlOption = None) -> None:
    """Show the current file, language and cursor position."""
    _render("IDE context", lambda c: c.selection(), format_context, url)


@query_app.command("errors")
def errors(url: UrlOption = None) -> None:
    """Show errors and warnings for the current file."""
    _render("IDE errors", lambda c: c.errors(), format_diagnostics, url)


@query_app.command("open-files")
def open_files(url: UrlOption = None) -> None:
    """List open editor tabs."""
    _render("open files", lambda c: c.open_files(), format_open_files, url)


@query_app.command("git-status")
def git_status(url: UrlOption = None) -> None:
    """Show the branch and changed files."""
    _render("git status", lambda c: c.git_status(), format_git_status, url)


@query_app.command("recent-files")
def recent_files(url: UrlOption = None) -> None:
    """List recently opened files."""
    _render("recent files", lambda c: c.recent_files(), format_recent_files, url)


@query_app.command("symbol")
def symbol(url: UrlOption = None) -> None:
    """Describe the symbol at the cursor."""
    _render("symbol", lambda c: c.symbol(), format_symbol, url)


@query_app.command("health")
def health(url: UrlOption = None) -> None:
    """Check that the bridge is reachable."""

    def _describe(h: Health) -> str:
        return f"**{h.plugin}** {h.version}: {h.status}"

    _render("bridge health", lambda c: c.health(), _describe, url)

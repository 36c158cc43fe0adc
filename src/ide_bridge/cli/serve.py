import threading
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

serve_app = typer.Typer(help="Start servers.")
console = Console()


@serve_app.command("bridge")
def bridge(
    project: Annotated[Path, typer.Option(help="Directory to open as the current project.")] = Path("."),
    open_files: Annotated[
        list[Path] | None, typer.Option("--open", help="File to open in a tab; repeatable, last one is focused.")
    ] = None,
    host: Annotated[str | None, typer.Option(help="Loopback address to bind.")] = None,
    port: Annotated[int | None, typer.Option(help="Port to bind.")] = None,
) -> None:
    """Serve a directory workspace over the IDE bridge HTTP API."""
    from ide_bridge.api.server import BridgeServer
    from ide_bridge.config import load_settings
    from ide_bridge.workspace.loader import open_directory

    try:
        settings = load_settings(host=host, port=port)
    except ValueError as exc:
        console.print(str(exc), style="red", markup=False)
        raise typer.Exit(1) from None
    try:
        workspace = open_directory(project, files=open_files or [])
    except (FileNotFoundError, NotADirectoryError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None

    server = BridgeServer(workspace, settings)
    server.start()
    if not server.is_running:
        console.print(f"[red]Could not start the bridge on {settings.host}:{settings.port}.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]IDE bridge serving {project.resolve()} on {server.url}[/green]")
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        console.print("Stopping...")
    finally:
        server.stop()


@serve_app.command("mcp")
def mcp(
    transport: str = "stdio",
    url: Annotated[str | None, typer.Option(help="Bridge base URL (default: IDE_BRIDGE_URL or localhost).")] = None,
) -> None:
    """Start the MCP server that turns bridge queries into tool results."""
    from ide_bridge.client.query import BridgeClient
    from ide_bridge.config import load_settings
    from ide_bridge.mcp.server import create_mcp_server

    client = BridgeClient.from_settings(load_settings(url=url))
    server = create_mcp_server(client)
    if transport != "stdio":
        console.print(f"[green]Starting MCP server (transport: {transport})[/green]")
    server.run(transport=transport)  # type: ignore[arg-type]

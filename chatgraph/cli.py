"""chatgraph CLI with Rich output.

Provides commands for:
- Listing a workspace's selectable chats
- Loading a chat's memory graph documents page by page
- Listing workspace members
- Changing chat visibility
- Running the backend server

Usage:
    chatgraph chats WORKSPACE             # Channels available for the graph
    chatgraph graph WORKSPACE --pages 3   # Load documents for the default chat
    chatgraph members WORKSPACE -t TOKEN  # Workspace members
    chatgraph visibility CHAT public      # Make a chat public
    chatgraph serve                       # Start the backend API
"""

import asyncio
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from chatgraph.cache import CacheStore
from chatgraph.client import BackendClient, BackendError
from chatgraph.config import Config
from chatgraph.graph_view import MemoryGraphView
from chatgraph.log_config import log_timing, get_logger
from chatgraph.models import Visibility
from chatgraph.preferences import LocalPreferences
from chatgraph.selection import SelectionSource
from chatgraph.visibility import VisibilitySynchronizer

log = get_logger("cli")

app = typer.Typer(
    name="chatgraph",
    help="chatgraph - memory graph tools for workspace chats",
    rich_markup_mode="rich",
    no_args_is_help=True,
)
console = Console()


def print_banner():
    """Print chatgraph banner."""
    banner = Text()
    banner.append("chat", style="bold cyan")
    banner.append("graph", style="cyan")
    console.print(Panel(banner, border_style="cyan", box=box.ROUNDED))


def _make_client(config: Config, token: Optional[str] = None) -> BackendClient:
    return BackendClient(config=config, session_token=token)


@app.command()
def chats(
    workspace: str = typer.Argument(..., help="Workspace ID"),
    token: Optional[str] = typer.Option(None, "--token", "-t", help="Session token"),
):
    """List the chats shown in the graph's channel selector."""
    config = Config()
    LocalPreferences(config.preferences_path).last_workspace = workspace

    async def _run() -> SelectionSource:
        async with _make_client(config, token) as client:
            source = SelectionSource(
                client,
                reserved_titles=config.reserved_titles,
                history_limit=config.history_limit,
            )
            await source.load(workspace)
            return source

    source = asyncio.run(_run())

    if not source.chats:
        console.print("[yellow]No chats found.[/yellow]")
        return

    table = Table(title=f"Chats in {workspace}", box=box.ROUNDED)
    table.add_column("", justify="center")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Created", style="dim")
    table.add_column("Visibility")
    for chat in source.chats:
        marker = "[green]*[/green]" if chat.id == source.selected_id else ""
        created = chat.created_at.isoformat(timespec="seconds") if chat.created_at else "-"
        table.add_row(marker, chat.id, chat.display_title, created, chat.visibility)
    console.print(table)


@app.command()
def graph(
    workspace: str = typer.Argument(..., help="Workspace ID"),
    chat: Optional[str] = typer.Option(None, "--chat", "-c", help="Chat ID (defaults to the most recent)"),
    pages: int = typer.Option(1, "--pages", "-p", min=1, help="Number of pages to load"),
    token: Optional[str] = typer.Option(None, "--token", "-t", help="Session token"),
):
    """Load memory graph documents for a chat."""
    print_banner()
    config = Config()
    LocalPreferences(config.preferences_path).last_workspace = workspace

    async def _run() -> dict:
        async with _make_client(config, token) as client:
            view = MemoryGraphView.from_config(client, config, workspace_id=workspace, default_chat_id=chat)
            with log_timing("graph load", log, level="info"):
                await view.open()
                for _ in range(pages - 1):
                    if not view.loader.state.has_more:
                        break
                    await view.load_more()
            return view.snapshot()

    snapshot = asyncio.run(_run())

    if snapshot["selected_chat_id"] is None:
        console.print("[yellow]No chat available in this workspace.[/yellow]")
        raise typer.Exit(1)
    if snapshot["error"]:
        console.print(f"[red]Failed to load documents:[/red] {snapshot['error']}")
        raise typer.Exit(1)

    table = Table(title="Memory Graph", box=box.ROUNDED)
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    table.add_row("Chat", snapshot["selected_chat_id"])
    table.add_row("Documents loaded", str(snapshot["total_loaded"]))
    table.add_row("More available", "[green]Yes[/green]" if snapshot["has_more"] else "No")
    console.print(table)


@app.command()
def members(
    workspace: str = typer.Argument(..., help="Workspace ID"),
    token: str = typer.Option(..., "--token", "-t", help="Session token"),
):
    """List the members of a workspace."""
    config = Config()

    async def _run() -> list[dict]:
        async with _make_client(config, token) as client:
            return await client.list_workspace_members(workspace)

    try:
        result = asyncio.run(_run())
    except BackendError as e:
        console.print(f"[red]Failed to fetch workspace members:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Members of {workspace}", box=box.ROUNDED)
    table.add_column("User", style="cyan")
    table.add_column("Email")
    table.add_column("Role")
    for member in result:
        table.add_row(member.get("userId", "-"), member.get("email", "-"), member.get("role", "-"))
    console.print(table)


@app.command()
def visibility(
    chat_id: str = typer.Argument(..., help="Chat ID"),
    value: Visibility = typer.Argument(..., help="New visibility"),
    workspace: Optional[str] = typer.Option(None, "--workspace", "-w", help="Owning workspace"),
    token: Optional[str] = typer.Option(None, "--token", "-t", help="Session token"),
):
    """Change a chat's visibility."""
    config = Config()

    async def _run() -> str:
        async with _make_client(config, token) as client:
            sync = VisibilitySynchronizer(
                CacheStore(),
                client,
                preferences=LocalPreferences(config.preferences_path),
            )
            sync.set(chat_id, value, workspace_id=workspace)
            await sync.drain()
            return sync.get(chat_id).visibility

    resolved = asyncio.run(_run())
    console.print(f"Chat [cyan]{chat_id}[/cyan] is now [bold]{resolved}[/bold]")


@app.command()
def serve():
    """Run the workspace backend API."""
    from chatgraph.backend.main import main as run_backend

    run_backend()


@app.command()
def version():
    """Show chatgraph version."""
    from chatgraph import __version__

    console.print(f"chatgraph [cyan]{__version__}[/cyan]")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()

"""Commands that run the API server and manage its schema."""

import typer
from rich.console import Console

from src.geodir.runtime.context import get_config

console = Console()


def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind (defaults to config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on (defaults to config)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes (development only)"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    config = get_config()
    bind_host = host or config.app.host
    bind_port = port or config.app.port
    console.print(f"[green]🚀 Serving on http://{bind_host}:{bind_port}[/green]")
    uvicorn.run(
        "src.geodir.api.http.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        access_log=False,
    )


def init_database(
    reset: bool = typer.Option(False, "--reset", help="Drop existing tables first"),
) -> None:
    """Create the database tables."""
    from src.geodir.runtime.init_db import init_db

    if reset and not typer.confirm("This deletes every stored user. Continue?"):
        raise typer.Abort()

    try:
        init_db(reset=reset)
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print("[green]✅ Database initialized[/green]")

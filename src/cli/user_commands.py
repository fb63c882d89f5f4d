"""User inspection CLI commands."""

import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from src.geodir.core.exceptions import StoreFailureError
from src.geodir.core.services import DbSessionService
from src.geodir.entities.core.user import UserRepository

console = Console()

users_app = typer.Typer(help="Inspect and remove stored users")


@users_app.command("list")
def list_users() -> None:
    """List all users with their resolved location."""
    database_service = DbSessionService()
    try:
        with database_service.session_scope() as session:
            users = UserRepository(session).list_all()
    except StoreFailureError as e:
        console.print(f"[red]❌ Failed to list users: {e}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        database_service.dispose()

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Zipcode", style="blue")
    table.add_column("Latitude", justify="right")
    table.add_column("Longitude", justify="right")
    table.add_column("Timezone", style="magenta")

    for user in users:
        table.add_row(
            user.id,
            user.name,
            user.zipcode,
            f"{user.latitude:.4f}",
            f"{user.longitude:.4f}",
            user.timezone,
        )

    console.print(table)
    console.print(f"\n[green]Found {len(users)} users[/green]")


@users_app.command("delete")
def delete_user(
    user_id: str = typer.Argument(..., help="ID of the user to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete a user by ID."""
    if not force and not Confirm.ask(f"Delete user {user_id}?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    database_service = DbSessionService()
    try:
        with database_service.session_scope() as session:
            deleted = UserRepository(session).delete(user_id)
    except StoreFailureError as e:
        console.print(f"[red]❌ Failed to delete user: {e}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        database_service.dispose()

    if not deleted:
        console.print(f"[red]❌ User {user_id} not found[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✅ Deleted user {user_id}[/green]")

"""Main CLI application module."""

import typer

from .server_commands import init_database, serve
from .user_commands import users_app

app = typer.Typer(
    help="🌎 Geo User Directory CLI - run the API and inspect stored users",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("serve")(serve)
app.command("init-db")(init_database)
app.add_typer(users_app, name="users")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

"""Main rolegate CLI application."""

import typer
from rich.console import Console

from rolegate import __version__
from rolegate.cli import commands


console = Console()

app = typer.Typer(
    name="rolegate",
    help="Administer a rolegate deployment.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command(name="seed")(commands.seed)
app.command(name="create-user")(commands.create_user)
app.command(name="sweep-tokens")(commands.sweep_tokens)


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
) -> None:
    """rolegate CLI - seed data and maintain the RBAC store."""
    if version:
        console.print(f"[bold cyan]rolegate[/bold cyan] version {__version__}")
        raise typer.Exit()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

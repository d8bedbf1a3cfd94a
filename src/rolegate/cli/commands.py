"""CLI commands operating directly on the configured database."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.config import Settings, get_settings
from rolegate.core.database import create_engine_from_settings, create_session_factory
from rolegate.core.errors import AppException
from rolegate.core.jobs.tasks.cleanup import purge_stale_refresh_tokens
from rolegate.core.logging import configure_logging
from rolegate.core.seeding import SeedReport, create_account, seed_defaults


console = Console()

R = TypeVar("R")


def _run_in_session(work: Callable[[AsyncSession, Settings], Awaitable[R]]) -> R:
    """Run ``work`` in one committed transaction against the configured database."""
    settings = get_settings()
    configure_logging(settings)

    async def runner() -> R:
        engine = create_engine_from_settings(settings)
        try:
            async with create_session_factory(engine)() as session:
                result = await work(session, settings)
                await session.commit()
                return result
        finally:
            await engine.dispose()

    return asyncio.run(runner())


def seed() -> None:
    """Create the default roles, permissions and super admin account.

    Safe to run repeatedly; existing rows are left untouched.
    """
    report: SeedReport = _run_in_session(seed_defaults)

    if not report.changed:
        console.print("[green]✓[/green] Nothing to do, defaults already present.")
        return

    table = Table(title="Seeded")
    table.add_column("Kind", style="cyan")
    table.add_column("Created")
    table.add_row("permissions", ", ".join(report.permissions) or "-")
    table.add_row("roles", ", ".join(report.roles) or "-")
    table.add_row("grants to SuperAdmin", str(report.grants))
    table.add_row("super admin", "yes" if report.super_admin_created else "no")
    console.print(table)


def create_user(
    username: str = typer.Argument(..., help="Login name of the new account"),
    email: str = typer.Option(..., "--email", "-e", help="Email address"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Initial password"
    ),
    roles: list[str] = typer.Option(
        [], "--role", "-r", help="Role name to assign (repeatable)"
    ),
) -> None:
    """Create an active account, optionally with roles."""

    async def work(session: AsyncSession, settings: Settings) -> int:
        user = await create_account(
            session,
            settings,
            username=username,
            email=email,
            password=password,
            role_names=roles,
        )
        return user.id

    try:
        user_id = _run_in_session(work)
    except AppException as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Created user {username} (id {user_id})")


def sweep_tokens() -> None:
    """Delete expired and inactive refresh tokens now."""
    settings = get_settings()
    configure_logging(settings)

    async def runner() -> int:
        engine = create_engine_from_settings(settings)
        try:
            return await purge_stale_refresh_tokens(create_session_factory(engine))
        finally:
            await engine.dispose()

    deleted = asyncio.run(runner())
    console.print(f"[green]✓[/green] Deleted {deleted} refresh token(s)")

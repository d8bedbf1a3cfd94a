"""Cleanup tasks for stale refresh tokens.

Rows are removed once they are expired or no longer active; neither can
ever pass ``is_refresh_token_valid`` again.
"""

from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rolegate.modules.users.repos import RefreshTokenRepository


log = structlog.get_logger()


async def purge_stale_refresh_tokens(
    session_factory: async_sessionmaker[AsyncSession],
    now: datetime | None = None,
) -> int:
    """Delete expired and inactive refresh tokens in one transaction.

    Args:
        session_factory: Factory for the session to run in
        now: Reference time, defaults to the current UTC time

    Returns:
        Number of rows deleted
    """
    now = now or datetime.now(UTC)
    async with session_factory() as session:
        deleted = await RefreshTokenRepository(session).delete_stale(now)
        await session.commit()
    return deleted


async def sweep_refresh_tokens(ctx: dict[str, Any]) -> dict[str, int]:
    """Scheduled job removing refresh tokens that can no longer be used.

    Args:
        ctx: Worker context containing the database session factory

    Returns:
        Dict with the number of deleted tokens
    """
    deleted = await purge_stale_refresh_tokens(ctx["db_session_factory"])
    log.info("sweep_refresh_tokens_complete", refresh_tokens_deleted=deleted)
    return {"refresh_tokens_deleted": deleted}

"""Unit tests for the ARQ worker configuration."""

from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from rolegate.core.jobs.tasks import sweep_refresh_tokens
from rolegate.core.jobs.worker import WorkerSettings, shutdown, startup


pytestmark = pytest.mark.unit


def test_sweep_is_registered():
    assert sweep_refresh_tokens in WorkerSettings.functions
    assert len(WorkerSettings.cron_jobs) == 1
    assert WorkerSettings.cron_jobs[0].coroutine is sweep_refresh_tokens


async def test_startup_and_shutdown_manage_the_engine():
    ctx: dict[str, Any] = {}

    await startup(ctx)

    assert isinstance(ctx["db_engine"], AsyncEngine)
    assert isinstance(ctx["db_session_factory"], async_sessionmaker)

    await shutdown(ctx)


async def test_shutdown_without_startup():
    await shutdown({})

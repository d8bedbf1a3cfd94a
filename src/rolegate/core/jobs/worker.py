"""ARQ worker configuration.

Run the worker with:
    arq rolegate.core.jobs.worker.WorkerSettings
"""

from typing import Any, ClassVar

import structlog
from arq import cron
from arq.connections import RedisSettings

from rolegate.config import get_settings
from rolegate.core.database import create_engine_from_settings, create_session_factory
from rolegate.core.jobs.tasks.cleanup import sweep_refresh_tokens
from rolegate.core.logging import configure_logging


log = structlog.get_logger()


async def startup(ctx: dict[str, Any]) -> None:
    """Build the database engine and session factory shared by all jobs.

    Args:
        ctx: Worker context dict (shared across all jobs)
    """
    settings = get_settings()
    configure_logging(settings)
    log.info("worker_startup", environment=settings.environment)

    engine = create_engine_from_settings(settings)
    ctx["db_engine"] = engine
    ctx["db_session_factory"] = create_session_factory(engine)

    log.info("worker_startup_complete")


async def shutdown(ctx: dict[str, Any]) -> None:
    """Dispose the worker's database engine.

    Args:
        ctx: Worker context dict
    """
    log.info("worker_shutdown")

    engine = ctx.get("db_engine")
    if engine:
        await engine.dispose()
        log.info("database_engine_disposed")


class WorkerSettings:
    """ARQ worker settings."""

    functions: ClassVar[list[Any]] = [
        sweep_refresh_tokens,
    ]

    cron_jobs: ClassVar[list[Any]] = [
        # Nightly at 3 AM
        cron(sweep_refresh_tokens, hour=3, minute=0),
    ]

    on_startup = startup
    on_shutdown = shutdown

    redis_settings = RedisSettings.from_dsn(str(get_settings().redis_url))

    max_jobs = 10
    job_timeout = 300  # 5 minutes per job
    keep_result = 3600
    retry_jobs = True
    max_tries = 3

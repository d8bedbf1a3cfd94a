"""Background job tasks.

Each task module defines async functions registered in the worker.
"""

from rolegate.core.jobs.tasks.cleanup import purge_stale_refresh_tokens, sweep_refresh_tokens


__all__ = [
    "purge_stale_refresh_tokens",
    "sweep_refresh_tokens",
]

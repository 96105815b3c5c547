"""Reconcile command — runs the cross-concept repair job outside the API.

Usage (cron, one-off jobs):
    huddle-reconcile
    python -m huddle.reconcile

Prints the reconciliation report as JSON and exits 0; a database failure
exits 1 after logging.
"""

import asyncio
import json
import logging
import sys

from huddle.config import get_settings
from huddle.core.errors import HuddleError
from huddle.infrastructure.database import DatabaseSessionManager
from huddle.infrastructure.observability import setup_logging
from huddle.services.synchronize import Synchronizations

logger = logging.getLogger(__name__)


async def run(manager: DatabaseSessionManager) -> dict:
    async with manager.session() as db:
        return await Synchronizations(db).reconcile()


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = DatabaseSessionManager(settings.database_url, pool_size=1, max_overflow=0)

    async def _run() -> dict:
        try:
            return await run(manager)
        finally:
            await manager.dispose()

    try:
        report = asyncio.run(_run())
    except HuddleError as e:
        logger.error(f"Reconciliation failed: {e.message}", extra={"error_code": e.code})
        return 1
    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
One-shot expiry sweep, for running from cron or a scheduler.

    secretstore-expire
"""
import asyncio

from .config import get_settings
from .context import SecretsContext
from .logging import get_logger, setup_logging


async def run_expire(context: SecretsContext) -> int:
    """Sweep once and release the context's resources."""
    try:
        return await context.sweeper.sweep()
    finally:
        context.close()


def main() -> int:
    settings = get_settings()
    setup_logging(json_output=settings.LOG_JSON)
    purged = asyncio.run(run_expire(SecretsContext(settings)))
    get_logger().info("expire.finished", purged=purged)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

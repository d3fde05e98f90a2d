"""
YachtBot — Main Entry Point
`api` serves the Slack bot; `refresh` rebuilds the ticker index once, for cron
or any other external scheduler.
"""
import argparse
import asyncio
import sys

import uvicorn

from yachtbot.bootstrap import build_context
from yachtbot.config.settings import get_settings
from yachtbot.errors import FetchError, StorageError
from yachtbot.utils.logger import setup_logging, get_logger

logger = get_logger("main")


def run_api():
    """Run the FastAPI application."""
    settings = get_settings()
    setup_logging()
    logger.info("starting_yachtbot", version=settings.version, port=settings.port)
    uvicorn.run(
        "yachtbot.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


async def refresh_once() -> int:
    ctx = await build_context(get_settings())
    try:
        result = await ctx.refresh.run()
    except (FetchError, StorageError) as e:
        logger.error("refresh_failed", error_type=type(e).__name__, error=str(e))
        return 1
    finally:
        await ctx.close()
    logger.info("refresh_done", **result.to_dict())
    return 0


def run_refresh() -> int:
    """Run the refresh job once; a non-zero exit lets the scheduler alert."""
    setup_logging()
    return asyncio.run(refresh_once())


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="YachtBot crypto price bot")
    parser.add_argument("command", choices=["api", "refresh"], nargs="?", default="api")
    args = parser.parse_args(argv)

    if args.command == "refresh":
        return run_refresh()
    run_api()
    return 0


if __name__ == "__main__":
    sys.exit(main())

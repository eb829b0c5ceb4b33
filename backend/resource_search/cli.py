"""Command-line build entry point.

Runs one embedding build against the configured source and provider and
writes the cache files, without starting the API server:

    resource-search-build            # rebuild only if the cache is stale
    resource-search-build --force    # rebuild regardless of cache age
    resource-search-build --resume   # continue from the partial-progress file

Do not run it while a server sharing the same data directory is refreshing.
"""

import argparse
import asyncio
import logging
import sys

from resource_search.config import get_settings
from resource_search.domain.exceptions import (
    BuildError,
    CacheIOError,
    ConfigurationError,
    SourceFetchError,
)
from resource_search.infrastructure.dependencies import build_container
from resource_search.infrastructure.logging.log_config import setup_logging

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="resource-search-build",
        description="Generate embeddings for the training library and cache them.",
    )
    parser.add_argument(
        "--force", action="store_true", help="rebuild even if the cache is still valid"
    )
    parser.add_argument(
        "--resume", action="store_true", help="resume from the partial-progress file"
    )
    return parser.parse_args(argv)


async def _run(force: bool, resume: bool) -> int:
    settings = get_settings()
    try:
        api_key = settings.require_openai_api_key()
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 2

    container = build_container(settings, api_key)
    try:
        if resume:
            logger.info("Attempting to resume from partial file...")
        records = await container.builder.build(
            force_refresh=force, resume_from_partial=resume
        )
    except (BuildError, SourceFetchError, CacheIOError) as exc:
        logger.error("Error generating embeddings: %s", exc)
        return 1
    finally:
        await container.aclose()

    logger.info("%d embeddings available in %s", len(records), settings.cache_path)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging()
    return asyncio.run(_run(force=args.force, resume=args.resume))


if __name__ == "__main__":
    sys.exit(main())

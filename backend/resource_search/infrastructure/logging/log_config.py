"""Per-category log levels for the server and the build CLI.

Each category in Settings (http, uvicorn, pipeline, provider) controls a
group of logger names, so that e.g. the per-request httpx lines can be
muted while the build pipeline keeps reporting progress.

    from resource_search.infrastructure.logging.log_config import setup_logging
    setup_logging()   # once, from the lifespan or cli.main
"""

import logging
import sys

from resource_search.config import Settings, get_settings

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Settings field -> logger names it governs
_CATEGORY_LOGGERS: dict[str, tuple[str, ...]] = {
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_pipeline": ("EmbeddingBuilder", "resource_search.application.services"),
    "log_level_provider": (
        "resource_search.infrastructure.openai",
        "resource_search.infrastructure.retry",
    ),
}


def setup_logging(settings: Settings | None = None) -> None:
    """Apply the root and per-category levels from settings."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    # uvicorn installs its own handlers; the CLI runs without any
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)

    applied = {}
    for field, names in _CATEGORY_LOGGERS.items():
        level = _parse_level(getattr(settings, field))
        for name in names:
            logging.getLogger(name).setLevel(level)
        applied[field.removeprefix("log_level_")] = logging.getLevelName(level)

    logging.getLogger(__name__).debug("Logging configured: root=%s %s", settings.log_level, applied)


def _parse_level(raw: str) -> int:
    """Level name to logging constant; unknown names fall back to INFO."""
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO

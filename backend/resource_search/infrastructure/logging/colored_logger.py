"""ANSI-colored console logging for embedding builds.

Each build stage has its own color and icon so a long run can be followed
at a glance in a terminal:

    FETCH / COMPLETE  green
    EMBED             blue
    CHECKPOINT        yellow
    CACHE             magenta
    PUBLISH           cyan
    ERROR             red
"""

import logging
import time
from contextlib import contextmanager
from enum import Enum
from typing import Any

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_RED = "\033[91m"
_GREEN = "\033[92m"
_YELLOW = "\033[93m"
_BLUE = "\033[94m"
_MAGENTA = "\033[95m"
_CYAN = "\033[96m"
_GRAY = "\033[90m"


class PipelineStage(Enum):
    """Build stages, each carrying its (color, icon)."""

    FETCH = (_GREEN, "📥")
    EMBED = (_BLUE, "🧮")
    CHECKPOINT = (_YELLOW, "💾")
    CACHE = (_MAGENTA, "🗄️")
    PUBLISH = (_CYAN, "🔁")
    ERROR = (_RED, "❌")
    COMPLETE = (_GREEN, "✅")

    @property
    def color(self) -> str:
        return self.value[0]

    @property
    def icon(self) -> str:
        return self.value[1]

    def tag(self, bold: bool = False) -> str:
        weight = _BOLD if bold else ""
        return f"{self.color}{weight}{self.icon} [{self.name}]{_RESET}"


def _with_fields(text: str, fields: dict[str, Any], color: str = _GRAY) -> str:
    if not fields:
        return text
    rendered = " | ".join(f"{key}={value}" for key, value in fields.items())
    return f"{text} {color}({rendered}){_RESET}"


class PipelineLogger:
    """Stage-tagged logger used by the builder and the refresh service.

    Usage:
        plog = PipelineLogger("EmbeddingBuilder")
        with plog.timed_step(PipelineStage.FETCH, "Fetching training library"):
            ...
        plog.progress(50, 312)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: PipelineStage, message: str, **fields: Any) -> None:
        line = f"{stage.tag(bold=True)} {stage.color}{message}{_RESET}"
        self._logger.info(_with_fields(line, fields))

    def step_complete(self, stage: PipelineStage, message: str, **fields: Any) -> None:
        line = f"{stage.tag()} {_GREEN}✓ {message}{_RESET}"
        self._logger.info(_with_fields(line, fields))

    def step_error(
        self,
        stage: PipelineStage,
        message: str,
        error: BaseException | None = None,
    ) -> None:
        line = f"{PipelineStage.ERROR.tag(bold=True)} {_RED}[{stage.name}] {message}{_RESET}"
        if error is not None:
            line += f" {_DIM}→ {type(error).__name__}: {error}{_RESET}"
        self._logger.error(line)

    def detail(self, message: str, **fields: Any) -> None:
        self._logger.info(_with_fields(f"   {_GRAY}├─ {message}{_RESET}", fields, _DIM))

    def progress(self, done: int, total: int, **fields: Any) -> None:
        """Checkpoint line with a percentage, e.g. ``50/312 (16%)``."""
        percent = (done * 100 // total) if total else 100
        self.step_complete(PipelineStage.CHECKPOINT, f"{done}/{total} ({percent}%)", **fields)

    def stats(self, **fields: Any) -> None:
        parts = " | ".join(f"{key}: {value}" for key, value in fields.items())
        self._logger.info(f"   {_GRAY}📈 {parts}{_RESET}")

    @contextmanager
    def timed_step(self, stage: PipelineStage, message: str, **fields: Any):
        """Log start and end of a block with its elapsed time."""
        self.step_start(stage, message, **fields)
        started = time.perf_counter()
        try:
            yield
        except Exception as e:
            self.step_error(stage, f"{message}: failed after {time.perf_counter() - started:.2f}s", error=e)
            raise
        self.step_complete(stage, f"{message} in {time.perf_counter() - started:.2f}s")

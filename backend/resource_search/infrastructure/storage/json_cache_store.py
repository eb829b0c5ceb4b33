"""JSON-file cache store for embedded training resources.

Storage layout (all under ``data_dir``):
    <cache_file>           : last complete build, list of items with "embedding"
    <cache_file>.partial   : prefix of an interrupted build
    <cache_meta_file>      : {"lastUpdated", "itemCount", "version"}

Snapshot writes go to a temporary file first and are moved into place, so
readers see either the old or the new file, never a truncated one.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from resource_search.application.interfaces.cache_store import CacheStore
from resource_search.domain.entities import CacheMetadata, TrainingResource
from resource_search.domain.exceptions import CacheIOError

logger = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".partial"


def _write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class JsonCacheStore(CacheStore):
    """Infrastructure adapter for the flat-file embedding cache."""

    def __init__(
        self,
        cache_path: str | Path,
        meta_path: str | Path,
        max_age_hours: float = 24.0,
    ):
        self._cache_path = Path(cache_path)
        self._meta_path = Path(meta_path)
        self._partial_path = self._cache_path.with_name(
            self._cache_path.name + PARTIAL_SUFFIX
        )
        self._max_age_hours = max_age_hours

    @property
    def cache_path(self) -> Path:
        return self._cache_path

    @property
    def partial_path(self) -> Path:
        return self._partial_path

    # ── Freshness ───────────────────────────────────────────────────

    def is_valid(self, now: datetime | None = None) -> bool:
        metadata = self.read_metadata()
        if metadata is None or metadata.last_updated is None:
            return False

        age = metadata.age_hours(now or datetime.now(timezone.utc))
        return age < self._max_age_hours and self.has_snapshot()

    def has_snapshot(self) -> bool:
        return self._cache_path.exists()

    # ── Metadata ────────────────────────────────────────────────────

    def read_metadata(self) -> CacheMetadata | None:
        """Read the metadata file; any failure is logged and reads as "none"."""
        if not self._meta_path.exists():
            return None
        try:
            data = json.loads(self._meta_path.read_text("utf-8"))
            return CacheMetadata.from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            logger.warning("Failed to read cache metadata: %s", exc)
            return None

    def write_metadata(self, metadata: CacheMetadata) -> None:
        try:
            _write_json_atomic(self._meta_path, metadata.to_dict())
        except OSError as exc:
            logger.error("Failed to write cache metadata: %s", exc)

    # ── Snapshot ────────────────────────────────────────────────────

    def load(self) -> list[TrainingResource]:
        return self._read_records(self._cache_path)

    def save(self, records: list[TrainingResource], metadata: CacheMetadata) -> None:
        """Write snapshot then metadata.

        The previous metadata is removed first, so a failed metadata write
        leaves the new snapshot without metadata (invalid) instead of paired
        with the old timestamp.
        """
        try:
            self._meta_path.unlink(missing_ok=True)
        except OSError as exc:
            raise CacheIOError(str(self._meta_path), str(exc)) from exc
        self._write_records(self._cache_path, records)
        self.write_metadata(metadata)
        logger.info("Cache snapshot written: %d items -> %s", len(records), self._cache_path)

    # ── Partial progress ────────────────────────────────────────────

    def load_partial(self) -> list[TrainingResource] | None:
        if not self._partial_path.exists():
            return None
        return self._read_records(self._partial_path)

    def save_partial(self, records: list[TrainingResource]) -> None:
        self._write_records(self._partial_path, records)

    def clear_partial(self) -> None:
        try:
            self._partial_path.unlink(missing_ok=True)
        except OSError as exc:
            raise CacheIOError(str(self._partial_path), str(exc)) from exc

    # ── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    def _read_records(path: Path) -> list[TrainingResource]:
        try:
            data = json.loads(path.read_text("utf-8"))
        except (OSError, ValueError) as exc:
            raise CacheIOError(str(path), str(exc)) from exc

        if not isinstance(data, list):
            raise CacheIOError(str(path), "expected a JSON array")
        try:
            return [TrainingResource.from_dict(item) for item in data]
        except (TypeError, ValueError, AttributeError) as exc:
            raise CacheIOError(str(path), f"malformed entry: {exc}") from exc

    @staticmethod
    def _write_records(path: Path, records: list[TrainingResource]) -> None:
        try:
            _write_json_atomic(path, [r.to_dict() for r in records])
        except (OSError, TypeError, ValueError) as exc:
            raise CacheIOError(str(path), str(exc)) from exc

"""Freshness record written next to the cache snapshot."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class CacheMetadata:
    """Describes the last successful build: when, how many items, which schema."""

    last_updated: datetime | None
    item_count: int = 0
    version: str = "1.0"

    @classmethod
    def now(cls, item_count: int, version: str = "1.0") -> "CacheMetadata":
        return cls(
            last_updated=datetime.now(timezone.utc),
            item_count=item_count,
            version=version,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheMetadata":
        raw = data.get("lastUpdated")
        last_updated = None
        if raw:
            last_updated = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
            if last_updated.tzinfo is None:
                last_updated = last_updated.replace(tzinfo=timezone.utc)
        return cls(
            last_updated=last_updated,
            item_count=int(data.get("itemCount", 0)),
            version=str(data.get("version", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
            "itemCount": self.item_count,
            "version": self.version,
        }

    def age_hours(self, now: datetime | None = None) -> float | None:
        """Hours elapsed since ``last_updated``; ``None`` when it was never set."""
        if self.last_updated is None:
            return None
        now = now or datetime.now(timezone.utc)
        return (now - self.last_updated).total_seconds() / 3600

"""Abstract interface (port) for the training library content source."""

from abc import ABC, abstractmethod
from typing import Any


class ResourceSource(ABC):
    """Port for reading the full training-resource collection."""

    @abstractmethod
    async def fetch_all(self) -> list[dict[str, Any]]:
        """Return every raw item in source order.

        Raises:
            SourceFetchError: on any non-success response.
        """
        ...

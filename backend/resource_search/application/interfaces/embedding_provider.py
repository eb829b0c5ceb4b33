"""Abstract interface (port) for embedding generation."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Port for turning text into vectors: implemented in the infrastructure layer."""

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Generate the embedding vector for a single text.

        Raises:
            VectorProviderError: when the provider fails terminally or
                retries are exhausted.
        """
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        ...

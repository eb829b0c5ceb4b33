"""OpenAI embedding infrastructure package."""

from .openai_embedding_provider import OpenAIEmbeddingProvider, default_retry_policy

__all__ = ["OpenAIEmbeddingProvider", "default_retry_policy"]

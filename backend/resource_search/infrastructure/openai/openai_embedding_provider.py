"""OpenAI-compatible embedding provider: calls the /embeddings endpoint.

Each call embeds a single text. Transport failures, 5xx responses and
429 rate limits are retried through a BackoffPolicy; any other error
status fails immediately with the response body captured.
Default model: text-embedding-3-small (1536 dimensions).
"""

import asyncio
import logging
from typing import Any

import httpx

from resource_search.application.interfaces.embedding_provider import EmbeddingProvider
from resource_search.domain.exceptions import VectorProviderError
from resource_search.infrastructure.retry import BackoffPolicy, Sleep

logger = logging.getLogger(__name__)

_PROVIDER = "openai"


def is_retryable(exc: BaseException) -> bool:
    """Retry predicate: only errors the provider flagged as transient."""
    return isinstance(exc, VectorProviderError) and exc.retryable


def default_retry_policy(
    max_attempts: int = 5,
    base_delay_ms: int = 1000,
    cap_ms: int = 30000,
) -> BackoffPolicy:
    return BackoffPolicy(
        max_attempts=max_attempts,
        base_delay=base_delay_ms / 1000,
        max_delay=cap_ms / 1000,
        retry_on=is_retryable,
    )


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Infrastructure adapter: generates embeddings via an OpenAI /embeddings API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "text-embedding-3-small",
        retry_policy: BackoffPolicy | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._retry = retry_policy or default_retry_policy()
        self._http_client = http_client
        self._sleep = sleep

    @property
    def provider_name(self) -> str:
        return _PROVIDER

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=60.0)

    async def embed(self, text: str) -> list[float]:
        """Embed ``text``, retrying transient failures per the backoff policy."""
        try:
            return await self._retry.run(
                lambda: self._embed_once(text),
                sleep=self._sleep,
                description="Embedding request",
            )
        except VectorProviderError as exc:
            if not exc.retryable:
                raise
            raise VectorProviderError(
                provider=_PROVIDER,
                status_code=exc.status_code,
                message=(
                    f"gave up after {self._retry.max_attempts} attempts: {exc.message}"
                ),
            ) from exc

    async def _embed_once(self, text: str) -> list[float]:
        url = f"{self._base_url}/embeddings"
        payload: dict[str, Any] = {
            "model": self._model,
            "input": text,
        }

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.post(
                    url, headers=self._get_headers(), json=payload
                )
            except httpx.TransportError as exc:
                raise VectorProviderError(
                    provider=_PROVIDER,
                    message=f"{type(exc).__name__}: {exc}",
                    retryable=True,
                ) from exc

            if response.status_code != 200:
                error_text = response.text[:500]
                logger.error(
                    "Embedding API error %d: %s", response.status_code, error_text
                )
                raise VectorProviderError(
                    provider=_PROVIDER,
                    status_code=response.status_code,
                    message=error_text or response.reason_phrase,
                    retryable=(
                        response.status_code >= 500 or response.status_code == 429
                    ),
                )

            return self._parse_embedding(response)

        finally:
            if should_close:
                await client.aclose()

    def _parse_embedding(self, response: httpx.Response) -> list[float]:
        """Pull ``data[0].embedding`` out of a successful response."""
        try:
            data = response.json()
            embedding = data["data"][0]["embedding"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise VectorProviderError(
                provider=_PROVIDER,
                status_code=response.status_code,
                message=f"Malformed embedding response: {exc}",
            ) from exc

        logger.debug(
            "Generated embedding (model=%s, dims=%d)", self._model, len(embedding)
        )
        return [float(v) for v in embedding]

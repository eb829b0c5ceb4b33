"""HTTP adapter for the training library endpoint.

The endpoint returns a JSON array of ``{Title, Topic, Description, ...}``
objects. There is no retry here: a failed fetch aborts the build attempt.
"""

import logging
from typing import Any

import httpx

from resource_search.application.interfaces.resource_source import ResourceSource
from resource_search.domain.exceptions import SourceFetchError

logger = logging.getLogger(__name__)


class HttpResourceSource(ResourceSource):
    """Infrastructure adapter: reads the full training library over HTTP."""

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._url = url
        self._timeout = timeout
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def fetch_all(self) -> list[dict[str, Any]]:
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.get(self._url)
            except httpx.TransportError as exc:
                raise SourceFetchError(f"{type(exc).__name__}: {exc}") from exc

            if not response.is_success:
                raise SourceFetchError(
                    response.reason_phrase or response.text[:200],
                    status_code=response.status_code,
                )

            try:
                items = response.json()
            except ValueError as exc:
                raise SourceFetchError(
                    f"Response is not valid JSON: {exc}",
                    status_code=response.status_code,
                ) from exc

            if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
                raise SourceFetchError(
                    "Expected a JSON array of objects",
                    status_code=response.status_code,
                )

            logger.info("Fetched %d training items from %s", len(items), self._url)
            return items

        finally:
            if should_close:
                await client.aclose()

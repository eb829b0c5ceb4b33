"""FastAPI dependency injection: wires infrastructure to application layer.

The long-lived services (served index, refresh guard, scheduler) are built
once per process by ``build_container`` and stored on ``app.state``.
Request dependencies read them from there.
"""

from dataclasses import dataclass

import httpx
from fastapi import Request

from resource_search.application.interfaces.cache_store import CacheStore
from resource_search.application.services import (
    EmbeddingBuilder,
    IndexRefreshService,
    RefreshScheduler,
    SearchIndex,
    SearchService,
)
from resource_search.config import Settings
from resource_search.infrastructure.openai import OpenAIEmbeddingProvider, default_retry_policy
from resource_search.infrastructure.source import HttpResourceSource
from resource_search.infrastructure.storage import JsonCacheStore


@dataclass
class ServiceContainer:
    """Process-wide services shared by the lifespan, the endpoints, and the CLI."""

    search_index: SearchIndex
    cache_store: CacheStore
    builder: EmbeddingBuilder
    refresh_service: IndexRefreshService
    search_service: SearchService
    scheduler: RefreshScheduler
    http_client: httpx.AsyncClient | None = None

    async def aclose(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()


def build_container(settings: Settings, api_key: str) -> ServiceContainer:
    """Build the service graph from settings, sharing one HTTP connection pool."""
    http_client = httpx.AsyncClient(timeout=60.0)

    cache_store = JsonCacheStore(
        cache_path=settings.cache_path,
        meta_path=settings.cache_meta_path,
        max_age_hours=settings.cache_duration_hours,
    )
    build_provider = OpenAIEmbeddingProvider(
        api_key=api_key,
        base_url=settings.openai_base_url,
        model=settings.embedding_model,
        retry_policy=default_retry_policy(
            max_attempts=settings.embed_max_attempts,
            base_delay_ms=settings.embed_backoff_base_ms,
            cap_ms=settings.embed_backoff_cap_ms,
        ),
        http_client=http_client,
    )
    query_provider = OpenAIEmbeddingProvider(
        api_key=api_key,
        base_url=settings.openai_base_url,
        model=settings.embedding_model,
        retry_policy=default_retry_policy(
            max_attempts=settings.query_embed_max_attempts,
            base_delay_ms=settings.embed_backoff_base_ms,
            cap_ms=settings.embed_backoff_cap_ms,
        ),
        http_client=http_client,
    )
    source = HttpResourceSource(
        url=settings.resource_api_url,
        timeout=settings.source_timeout,
        http_client=http_client,
    )

    builder = EmbeddingBuilder(
        source=source,
        embedding_provider=build_provider,
        cache_store=cache_store,
        item_delay_ms=settings.build_item_delay_ms,
        error_delay_step_ms=settings.build_error_delay_step_ms,
        error_delay_cap_ms=settings.build_error_delay_cap_ms,
        checkpoint_interval=settings.checkpoint_interval,
        cache_version=settings.cache_version,
    )
    index = SearchIndex()
    refresh_service = IndexRefreshService(builder=builder, index=index, cache_store=cache_store)

    return ServiceContainer(
        search_index=index,
        cache_store=cache_store,
        builder=builder,
        refresh_service=refresh_service,
        search_service=SearchService(
            embedding_provider=query_provider,
            index=index,
            top_k=settings.search_top_k,
        ),
        scheduler=RefreshScheduler(refresh_service),
        http_client=http_client,
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_search_service(request: Request) -> SearchService:
    """Provides the SearchService bound to the served index."""
    return get_container(request).search_service


def get_refresh_service(request: Request) -> IndexRefreshService:
    """Provides the IndexRefreshService guarding manual and scheduled builds."""
    return get_container(request).refresh_service

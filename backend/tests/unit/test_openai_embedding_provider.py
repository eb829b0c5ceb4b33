"""Unit tests for the OpenAIEmbeddingProvider and its retry behaviour."""

import json

import httpx
import pytest

from resource_search.domain.exceptions import VectorProviderError
from resource_search.infrastructure.openai import OpenAIEmbeddingProvider
from resource_search.infrastructure.retry import BackoffPolicy
from tests.fakes import RecordingSleep


# ── Helpers ──


def _embedding_response(vector: list[float]) -> dict:
    return {
        "object": "list",
        "data": [{"object": "embedding", "index": 0, "embedding": vector}],
        "model": "text-embedding-3-small",
        "usage": {"prompt_tokens": 3, "total_tokens": 3},
    }


def _scripted_transport(responses: list) -> tuple[httpx.MockTransport, list[httpx.Request]]:
    """Transport replaying ``responses`` in order; exceptions are raised."""
    seen: list[httpx.Request] = []
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    return httpx.MockTransport(handler), seen


def _provider(transport: httpx.MockTransport, sleep: RecordingSleep) -> OpenAIEmbeddingProvider:
    return OpenAIEmbeddingProvider(
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=transport),
        sleep=sleep,
    )


# ── Tests ──


@pytest.mark.asyncio
async def test_embed_returns_vector_and_sends_model():
    transport, seen = _scripted_transport([httpx.Response(200, json=_embedding_response([0.1, 0.2]))])
    sleep = RecordingSleep()

    vector = await _provider(transport, sleep).embed("hello world")

    assert vector == [0.1, 0.2]
    assert len(seen) == 1
    body = json.loads(seen[0].content)
    assert body == {"model": "text-embedding-3-small", "input": "hello world"}
    assert seen[0].headers["Authorization"] == "Bearer test-key"
    assert seen[0].url.path.endswith("/embeddings")
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_rate_limit_is_retried_with_exponential_backoff():
    transport, seen = _scripted_transport([
        httpx.Response(429, json={"error": {"message": "Rate limit"}}),
        httpx.Response(429, json={"error": {"message": "Rate limit"}}),
        httpx.Response(200, json=_embedding_response([1.0])),
    ])
    sleep = RecordingSleep()

    vector = await _provider(transport, sleep).embed("q")

    assert vector == [1.0]
    assert len(seen) == 3
    assert sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_server_errors_exhaust_retries():
    transport, seen = _scripted_transport([httpx.Response(503, text="overloaded")])
    sleep = RecordingSleep()

    with pytest.raises(VectorProviderError) as exc_info:
        await _provider(transport, sleep).embed("q")

    assert len(seen) == 5
    # No delay after the final attempt
    assert sleep.delays == [1.0, 2.0, 4.0, 8.0]
    err = exc_info.value
    assert err.status_code == 503
    assert "gave up after 5 attempts" in err.message
    assert isinstance(err.__cause__, VectorProviderError)
    assert "overloaded" in err.__cause__.message


@pytest.mark.asyncio
async def test_client_error_fails_immediately():
    transport, seen = _scripted_transport([httpx.Response(400, text="bad input")])
    sleep = RecordingSleep()

    with pytest.raises(VectorProviderError) as exc_info:
        await _provider(transport, sleep).embed("q")

    assert len(seen) == 1
    assert sleep.delays == []
    assert exc_info.value.status_code == 400
    assert "bad input" in exc_info.value.message


@pytest.mark.asyncio
async def test_transport_errors_are_retried():
    transport, seen = _scripted_transport([
        httpx.ConnectError("connection refused"),
        httpx.Response(200, json=_embedding_response([0.5, 0.5])),
    ])
    sleep = RecordingSleep()

    vector = await _provider(transport, sleep).embed("q")

    assert vector == [0.5, 0.5]
    assert len(seen) == 2
    assert sleep.delays == [1.0]


@pytest.mark.asyncio
async def test_malformed_success_body_is_not_retried():
    transport, seen = _scripted_transport([httpx.Response(200, json={"data": []})])
    sleep = RecordingSleep()

    with pytest.raises(VectorProviderError) as exc_info:
        await _provider(transport, sleep).embed("q")

    assert len(seen) == 1
    assert "Malformed" in exc_info.value.message


@pytest.mark.asyncio
async def test_custom_policy_caps_delay():
    transport, seen = _scripted_transport([httpx.Response(500, text="err")])
    sleep = RecordingSleep()
    provider = OpenAIEmbeddingProvider(
        api_key="k",
        retry_policy=BackoffPolicy(
            max_attempts=4,
            base_delay=10.0,
            max_delay=15.0,
            retry_on=lambda exc: isinstance(exc, VectorProviderError) and exc.retryable,
        ),
        http_client=httpx.AsyncClient(transport=transport),
        sleep=sleep,
    )

    with pytest.raises(VectorProviderError):
        await provider.embed("q")

    assert len(seen) == 4
    assert sleep.delays == [10.0, 15.0, 15.0]


def test_provider_name():
    assert OpenAIEmbeddingProvider(api_key="k").provider_name == "openai"

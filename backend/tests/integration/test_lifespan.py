"""Startup checks run by the application lifespan."""

import pytest

from resource_search.config import get_settings
from resource_search.domain.exceptions import ConfigurationError
from resource_search.main import create_app


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.asyncio
async def test_startup_aborts_without_api_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "  ")
    app = create_app()

    with pytest.raises(ConfigurationError):
        async with app.router.lifespan_context(app):
            pass

    assert not hasattr(app.state, "container")

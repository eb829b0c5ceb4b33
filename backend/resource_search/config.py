from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

from resource_search.domain.exceptions import ConfigurationError

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Training Resource Search API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["*"]
    port: int = 3001

    # Embedding provider (OpenAI-compatible /embeddings endpoint)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    embedding_model: str = "text-embedding-3-small"

    # Training library source
    resource_api_url: str = "https://teamavalonpontoons.com/api/traininglibrary.php"
    source_timeout: float = 30.0

    # Snapshot files (relative to data_dir)
    data_dir: str = "data"
    cache_file: str = "embedded-resources.json"
    cache_meta_file: str = "cache-metadata.json"
    cache_duration_hours: float = 24.0
    cache_version: str = "1.0"

    # Provider retry policy
    embed_max_attempts: int = 5
    embed_backoff_base_ms: int = 1000
    embed_backoff_cap_ms: int = 30000
    query_embed_max_attempts: int = 2

    # Build pacing
    build_item_delay_ms: int = 200
    build_error_delay_step_ms: int = 500
    build_error_delay_cap_ms: int = 5000
    checkpoint_interval: int = 25

    search_top_k: int = 6

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore: outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_pipeline: str = "INFO"         # EmbeddingBuilder pipeline
    log_level_provider: str = "INFO"         # Embedding provider client

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    @property
    def cache_path(self) -> Path:
        return Path(self.data_dir) / self.cache_file

    @property
    def cache_meta_path(self) -> Path:
        return Path(self.data_dir) / self.cache_meta_file

    def require_openai_api_key(self) -> str:
        """Return the provider credential or fail startup when it is missing."""
        key = self.openai_api_key.strip()
        if not key:
            raise ConfigurationError("OPENAI_API_KEY environment variable is required")
        return key


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance: reads .env once."""
    return Settings()

"""Domain-specific exceptions: framework-independent."""


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing."""


class SourceFetchError(Exception):
    """Raised when the training library source cannot be read."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        self.message = message
        prefix = f"{status_code}: " if status_code is not None else ""
        super().__init__(f"Failed to fetch training data: {prefix}{message}")


class VectorProviderError(Exception):
    """Raised when the embedding provider returns an error.

    ``status_code`` is ``None`` for transport failures. ``retryable`` marks
    failures worth another attempt (transport errors, 5xx, 429).
    """

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: int | None = None,
        *,
        retryable: bool = False,
    ):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        self.retryable = retryable
        status = status_code if status_code is not None else "network"
        super().__init__(f"[{provider}] {status}: {message}")


class CacheIOError(Exception):
    """Raised when a snapshot file cannot be read or written."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class BuildError(Exception):
    """Raised when an embedding build aborts part-way through the collection."""

    def __init__(self, completed: int, total: int, cause: Exception):
        self.completed = completed
        self.total = total
        self.cause = cause
        super().__init__(f"Build aborted: {completed}/{total} items completed ({cause})")


class BuildInProgressError(Exception):
    """Raised when a build is requested while another one is still running."""

    def __init__(self) -> None:
        super().__init__("An embedding build is already in progress")


class QueryError(Exception):
    """Base class for search request failures."""


class QueryValidationError(QueryError):
    """The search request carried no usable query text."""


class IndexNotReadyError(QueryError):
    """The served index holds no records yet."""


class QuerySearchError(QueryError):
    """Embedding the query or scoring the index failed."""

from .http_resource_source import HttpResourceSource

__all__ = ["HttpResourceSource"]

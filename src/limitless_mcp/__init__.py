"""Public API for limitless_mcp package."""

__version__ = "0.1.0"

from .client import ApiClient
from .config import LimitlessConfig
from .errors import ConfigurationError, LimitlessError, RemoteRequestError, ValidationError
from .models import ContentItem, ContentKind, Entry, ListParams, Page, PageMeta, SearchParams

__all__ = [
    "ApiClient",
    "ConfigurationError",
    "ContentItem",
    "ContentKind",
    "Entry",
    "LimitlessConfig",
    "LimitlessError",
    "ListParams",
    "Page",
    "PageMeta",
    "RemoteRequestError",
    "SearchParams",
    "ValidationError",
]

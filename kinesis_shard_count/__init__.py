__version__ = "0.1.0"

from .config import ListShardsRequest, PluginOptions, ShardFilter, ShardFilterType
from .counter import ShardCounter
from .exceptions import (
    AccessDeniedError,
    ConfigurationError,
    InvalidRequestError,
    NoMorePagesError,
    RequestCancelledError,
    ShardCountError,
    StalledCursorError,
    StreamNotFoundError,
    ThrottlingError,
)
from .pagination import ListShardsClient, ListShardsPage, ListShardsPaginator
from .plugin import ShardCountPlugin

__all__ = [
    "__version__",
    # Requests and options
    "ListShardsRequest",
    "ShardFilter",
    "ShardFilterType",
    "PluginOptions",
    # Pagination
    "ListShardsClient",
    "ListShardsPage",
    "ListShardsPaginator",
    # Counting and reporting
    "ShardCounter",
    "ShardCountPlugin",
    # Exceptions
    "ShardCountError",
    "ConfigurationError",
    "StreamNotFoundError",
    "ThrottlingError",
    "InvalidRequestError",
    "AccessDeniedError",
    "RequestCancelledError",
    "NoMorePagesError",
    "StalledCursorError",
]

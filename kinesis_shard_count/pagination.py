"""
Pagination support for ListShards.

This module turns the token-based, size-limited ListShards API into two
primitives, ``has_more_pages()`` and ``next_page()``, and hides the cursor
bookkeeping between them.
"""

import threading
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Protocol

from ._logging import logger, redact_token
from .config import ListShardsRequest
from .exceptions import NoMorePagesError, RequestCancelledError, StalledCursorError


class ListShardsClient(Protocol):
    """
    The one capability the paginator needs from a Kinesis client.

    A boto3 ``kinesis`` client satisfies it; tests supply scripted fakes.
    """

    def list_shards(self, **kwargs: Any) -> dict[str, Any]: ...


@dataclass
class ListShardsPage:
    """
    Represents a single ListShards response.

    Attributes:
        shards: Raw shard descriptors for this page (opaque to this package)
        next_token: Cursor for the next page (None or empty if no more pages)
        count: Number of shards in this page
    """

    shards: list[dict[str, Any]]
    next_token: str | None
    count: int

    @property
    def has_more(self) -> bool:
        """Returns True if there are more pages available."""
        return bool(self.next_token)

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> "ListShardsPage":
        shards = list(response.get("Shards") or [])
        return cls(shards=shards, next_token=response.get("NextToken"), count=len(shards))


class ListShardsPaginator:
    """
    Drives repeated ListShards calls until the server stops returning a token.

    One instance serves one sequential traversal and is then discarded.
    A failed ``next_page()`` leaves the cursor untouched, so the caller
    may call it again after a transient failure.

    Usage:
        paginator = ListShardsPaginator(client, ListShardsRequest(stream_name="events"))
        while paginator.has_more_pages():
            page = paginator.next_page()
    """

    def __init__(
        self,
        client: ListShardsClient,
        params: ListShardsRequest | None = None,
        limit: int | None = None,
    ):
        if params is None:
            params = ListShardsRequest()

        # An explicit limit wins over the request's own page-size cap
        if limit is None:
            limit = params.max_results or 0

        self.client = client
        self.params = params
        self.limit = limit

        self._next_token: str | None = params.next_token
        self._first_page = True
        self._pages_fetched = 0

    @property
    def next_token(self) -> str | None:
        return self._next_token

    @property
    def pages_fetched(self) -> int:
        return self._pages_fetched

    def has_more_pages(self) -> bool:
        """Returns True until a fetched page comes back without a continuation token."""
        return self._first_page or bool(self._next_token)

    def next_page(self, cancel_event: threading.Event | None = None) -> ListShardsPage:
        """
        Retrieves the next ListShards page.

        Errors from the client propagate unmodified; no retry happens here.

        Args:
            cancel_event: Optional event; once set, the fetch is abandoned
                          and RequestCancelledError is raised.

        Raises:
            NoMorePagesError: If the previous page was the last one
            RequestCancelledError: If cancel_event is set before or during the call
            StalledCursorError: If the server returns the token it was given
        """
        if not self.has_more_pages():
            raise NoMorePagesError()

        if cancel_event is not None and cancel_event.is_set():
            raise RequestCancelledError()

        sent_token = self._next_token
        request = self.params.with_cursor(
            next_token=sent_token,
            max_results=self.limit if self.limit > 0 else None,
        )

        logger.debug(
            "Fetching shard page",
            extra={
                "stream": self.params.stream_name,
                "page": self._pages_fetched + 1,
                "has_token": sent_token is not None,
                "token_hash": redact_token(sent_token),
            },
        )

        response = self.client.list_shards(**request.to_api_params())

        # Cancelled while the call was in flight: drop the result
        if cancel_event is not None and cancel_event.is_set():
            raise RequestCancelledError()

        page = ListShardsPage.from_response(response)
        if sent_token and page.next_token == sent_token:
            raise StalledCursorError(redact_token(sent_token))

        self._first_page = False
        self._next_token = page.next_token
        self._pages_fetched += 1

        logger.debug(
            "Fetched shard page",
            extra={
                "stream": self.params.stream_name,
                "page": self._pages_fetched,
                "shard_count": page.count,
                "has_token": page.has_more,
            },
        )
        return page

    def pages(self, cancel_event: threading.Event | None = None) -> Iterator[ListShardsPage]:
        """Yields pages until the traversal is exhausted."""
        while self.has_more_pages():
            yield self.next_page(cancel_event)

    def __iter__(self) -> Iterator[ListShardsPage]:
        return self.pages()

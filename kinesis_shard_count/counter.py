import threading

from ._logging import logger
from .config import ListShardsRequest, ShardFilter, ShardFilterType
from .exceptions import StreamNotFoundError, handle_kinesis_errors
from .pagination import ListShardsClient, ListShardsPaginator

DEFAULT_PAGE_SIZE = 100


class ShardCounter:
    """
    Counts the open shards of a Kinesis stream across every ListShards page.
    """

    def __init__(self, client: ListShardsClient, page_size: int = DEFAULT_PAGE_SIZE):
        self.client = client
        self.page_size = page_size

    def count_active_shards(
        self, stream_name: str, cancel_event: threading.Event | None = None
    ) -> float:
        """
        Walks every page of open (AT_LATEST) shards and sums their count.

        A stream that does not exist counts as zero shards, even if earlier
        pages had already been counted.

        Raises:
            ShardCountError: For any failure other than a missing stream
        """
        request = ListShardsRequest(
            stream_name=stream_name,
            shard_filter=ShardFilter(type=ShardFilterType.AT_LATEST),
            max_results=self.page_size,
        )
        paginator = ListShardsPaginator(self.client, request)

        logger.info(
            "Counting active shards",
            extra={"stream": stream_name, "limit": paginator.limit},
        )

        count = 0.0
        try:
            while paginator.has_more_pages():
                with handle_kinesis_errors(stream_name=stream_name):
                    page = paginator.next_page(cancel_event)
                count += page.count
        except StreamNotFoundError:
            logger.warning(
                "Stream not found, reporting zero shards",
                extra={"stream": stream_name, "page": paginator.pages_fetched + 1},
            )
            return 0.0

        logger.info(
            "Counted active shards",
            extra={
                "stream": stream_name,
                "shard_count": count,
                "pages": paginator.pages_fetched,
            },
        )
        return count

    def fetch_metrics(
        self, stream_name: str, cancel_event: threading.Event | None = None
    ) -> dict[str, float]:
        return {"count": self.count_active_shards(stream_name, cancel_event)}

"""
Count the open shards of a stream without going through the Mackerel plugin.

    AWS_REGION=ap-northeast-1 python examples/count_shards.py my-stream
"""

import logging
import sys

import boto3

from kinesis_shard_count import ListShardsPaginator, ListShardsRequest, ShardCounter

logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

stream_name = sys.argv[1]
client = boto3.client("kinesis")

# One number, every page
print(f"open shards: {ShardCounter(client).count_active_shards(stream_name):.0f}")

# The same traversal driven by hand, 10 shards per page
paginator = ListShardsPaginator(client, ListShardsRequest(stream_name=stream_name), limit=10)
while paginator.has_more_pages():
    page = paginator.next_page()
    for shard in page.shards:
        print(shard["ShardId"])

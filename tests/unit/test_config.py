import os
import tempfile
from datetime import datetime, timezone

import pytest

from kinesis_shard_count.config import (
    ListShardsRequest,
    PluginOptions,
    ShardFilter,
    ShardFilterType,
)
from kinesis_shard_count.exceptions import ConfigurationError


@pytest.mark.unit
class TestShardFilter:
    def test_latest_filter(self):
        assert ShardFilter(type=ShardFilterType.AT_LATEST).to_api_params() == {
            "Type": "AT_LATEST"
        }

    def test_accepts_plain_string_type(self):
        assert ShardFilter(type="AT_TRIM_HORIZON").to_api_params() == {"Type": "AT_TRIM_HORIZON"}

    def test_optional_members(self):
        ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
        params = ShardFilter(
            type=ShardFilterType.FROM_TIMESTAMP, shard_id="shardId-000000000001", timestamp=ts
        ).to_api_params()
        assert params == {
            "Type": "FROM_TIMESTAMP",
            "ShardId": "shardId-000000000001",
            "Timestamp": ts,
        }


@pytest.mark.unit
class TestListShardsRequest:
    def test_empty_request_renders_nothing(self):
        assert ListShardsRequest().to_api_params() == {}

    def test_stream_identity_without_token(self):
        request = ListShardsRequest(
            stream_name="events",
            stream_arn="arn:aws:kinesis:us-east-1:123456789012:stream/events",
            exclusive_start_shard_id="shardId-000000000002",
            max_results=100,
        )
        assert request.to_api_params() == {
            "StreamName": "events",
            "StreamARN": "arn:aws:kinesis:us-east-1:123456789012:stream/events",
            "ExclusiveStartShardId": "shardId-000000000002",
            "MaxResults": 100,
        }

    def test_token_replaces_stream_identity(self):
        request = ListShardsRequest(
            stream_name="events",
            exclusive_start_shard_id="shardId-000000000002",
            shard_filter=ShardFilter(type=ShardFilterType.AT_LATEST),
            next_token="t1",
        )
        assert request.to_api_params() == {
            "NextToken": "t1",
            "ShardFilter": {"Type": "AT_LATEST"},
        }

    def test_empty_stream_name_is_sent_as_is(self):
        assert ListShardsRequest(stream_name="").to_api_params() == {"StreamName": ""}

    @pytest.mark.parametrize("max_results", [None, 0, -5])
    def test_non_positive_cap_is_omitted(self, max_results):
        params = ListShardsRequest(stream_name="events", max_results=max_results).to_api_params()
        assert "MaxResults" not in params

    def test_with_cursor_returns_copy(self):
        request = ListShardsRequest(stream_name="events", max_results=100)
        clone = request.with_cursor(next_token="t1", max_results=None)

        assert clone is not request
        assert clone.next_token == "t1"
        assert clone.max_results is None
        assert clone.stream_name == "events"
        assert request.next_token is None
        assert request.max_results == 100


@pytest.mark.unit
class TestPluginOptions:
    def test_defaults(self):
        options = PluginOptions.load(stream_name="events")
        assert options.stream_name == "events"
        assert options.region is None
        assert options.metric_key_prefix == "kinesis"
        assert options.tempfile is None

    def test_empty_cli_values_fall_back(self):
        options = PluginOptions.load(
            stream_name="events", region="", metric_key_prefix="", tempfile=""
        )
        assert options.region is None
        assert options.metric_key_prefix == "kinesis"
        assert options.tempfile is None

    def test_custom_values(self):
        options = PluginOptions.load(
            stream_name=" events ",
            region="ap-northeast-1",
            metric_key_prefix="orders",
            tempfile="/var/tmp/orders",
        )
        assert options.stream_name == "events"
        assert options.region == "ap-northeast-1"
        assert options.metric_key_prefix == "orders"

    @pytest.mark.parametrize("values", [{}, {"stream_name": ""}, {"stream_name": "   "}])
    def test_stream_name_is_required(self, values):
        with pytest.raises(ConfigurationError, match="stream-name is required"):
            PluginOptions.load(**values)

    def test_options_are_frozen(self):
        options = PluginOptions.load(stream_name="events")
        with pytest.raises(Exception):
            options.stream_name = "other"

    def test_resolve_tempfile_default(self):
        options = PluginOptions.load(stream_name="events", metric_key_prefix="orders")
        assert options.resolve_tempfile() == os.path.join(
            tempfile.gettempdir(), "mackerel-plugin-orders"
        )

    def test_resolve_tempfile_explicit(self):
        options = PluginOptions.load(stream_name="events", tempfile="/var/tmp/state")
        assert options.resolve_tempfile() == "/var/tmp/state"

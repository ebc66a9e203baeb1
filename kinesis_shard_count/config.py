import os
import tempfile
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import ConfigurationError

DEFAULT_METRIC_KEY_PREFIX = "kinesis"


class ShardFilterType(str, Enum):
    """Shard lifecycle states understood by ListShards' ShardFilter."""

    AFTER_SHARD_ID = "AFTER_SHARD_ID"
    AT_TRIM_HORIZON = "AT_TRIM_HORIZON"
    FROM_TRIM_HORIZON = "FROM_TRIM_HORIZON"
    AT_LATEST = "AT_LATEST"
    AT_TIMESTAMP = "AT_TIMESTAMP"
    FROM_TIMESTAMP = "FROM_TIMESTAMP"


@dataclass(frozen=True)
class ShardFilter:
    """
    Selects which shards ListShards enumerates.

    AT_LATEST returns only the currently open shards.
    """

    type: ShardFilterType
    shard_id: str | None = None
    timestamp: datetime | None = None

    def to_api_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"Type": ShardFilterType(self.type).value}
        if self.shard_id:
            params["ShardId"] = self.shard_id
        if self.timestamp is not None:
            params["Timestamp"] = self.timestamp
        return params


@dataclass(frozen=True)
class ListShardsRequest:
    """
    Immutable parameters of one ListShards traversal.

    Nothing is validated here: an empty stream name surfaces as the
    remote call failing.

    Attributes:
        stream_name: Name of the stream to enumerate
        stream_arn: ARN of the stream, alternative to stream_name
        shard_filter: Optional lifecycle filter
        max_results: Page-size cap; None or <= 0 lets the server choose
        next_token: Continuation token to start from
        exclusive_start_shard_id: Start listing after this shard
    """

    stream_name: str | None = None
    stream_arn: str | None = None
    shard_filter: ShardFilter | None = None
    max_results: int | None = None
    next_token: str | None = None
    exclusive_start_shard_id: str | None = None

    def with_cursor(self, next_token: str | None, max_results: int | None) -> "ListShardsRequest":
        """Returns a copy carrying the given continuation token and page-size cap."""
        return replace(self, next_token=next_token, max_results=max_results)

    def to_api_params(self) -> dict[str, Any]:
        """
        Renders the keyword arguments for ``client.list_shards``.

        Kinesis rejects StreamName, StreamARN and ExclusiveStartShardId
        alongside a NextToken, so those are left out once a token is set.
        """
        params: dict[str, Any] = {}
        if self.next_token:
            params["NextToken"] = self.next_token
        else:
            if self.stream_name is not None:
                params["StreamName"] = self.stream_name
            if self.stream_arn is not None:
                params["StreamARN"] = self.stream_arn
            if self.exclusive_start_shard_id is not None:
                params["ExclusiveStartShardId"] = self.exclusive_start_shard_id

        if self.max_results is not None and self.max_results > 0:
            params["MaxResults"] = self.max_results
        if self.shard_filter is not None:
            params["ShardFilter"] = self.shard_filter.to_api_params()
        return params


class PluginOptions(BaseModel):
    """
    Process-wide options, built once from the command line and passed down.
    """

    model_config = ConfigDict(frozen=True)

    stream_name: str
    region: str | None = None
    metric_key_prefix: str = DEFAULT_METRIC_KEY_PREFIX
    tempfile: str | None = None

    @field_validator("stream_name")
    @classmethod
    def _require_stream_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("stream-name is required")
        return value

    @field_validator("metric_key_prefix", mode="before")
    @classmethod
    def _default_prefix(cls, value: str | None) -> str:
        return value or DEFAULT_METRIC_KEY_PREFIX

    @field_validator("region", "tempfile", mode="before")
    @classmethod
    def _empty_as_none(cls, value: str | None) -> str | None:
        return value or None

    @classmethod
    def load(cls, **values: Any) -> "PluginOptions":
        """
        Validates raw option values.

        Raises:
            ConfigurationError: If a required option is missing or invalid
        """
        try:
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0]
            message = str(first.get("ctx", {}).get("error") or first["msg"])
            if first["type"] in ("missing", "string_type"):
                message = f"{first['loc'][0]} is required".replace("_", "-")
            raise ConfigurationError(message, original_error=e) from e

    def resolve_tempfile(self) -> str:
        """Path of the agent state file, defaulting to one per metric prefix."""
        if self.tempfile:
            return self.tempfile
        return os.path.join(tempfile.gettempdir(), f"mackerel-plugin-{self.metric_key_prefix}")

"""
Shared pytest fixtures and configuration for the shard count tests.

This module provides common fixtures used across unit and integration tests,
including a Stubber-wrapped boto3 Kinesis client, scripted in-memory clients,
and LocalStack helpers.
"""

import os
import uuid
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.stub import Stubber

from kinesis_shard_count import PluginOptions

if TYPE_CHECKING:
    from tests.helpers.localstack import LocalStackHelper


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line("markers", "integration: Integration tests against LocalStack")


@pytest.fixture
def kinesis_client():
    """
    Creates a real boto3 Kinesis client that never leaves the process.

    Pair it with the ``stubber`` fixture to script responses.
    """
    return boto3.client(
        "kinesis",
        region_name="us-east-1",
        aws_access_key_id="test",
        aws_secret_access_key="test",
    )


@pytest.fixture
def stubber(kinesis_client):
    """
    Activates a botocore Stubber on ``kinesis_client``.

    Requests and responses are validated against the Kinesis service model,
    and every queued response must be consumed by the test.
    """
    with Stubber(kinesis_client) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def mock_client():
    """Creates a fully mocked Kinesis client."""
    client = MagicMock()
    client.list_shards.return_value = {"Shards": []}
    return client


@pytest.fixture
def plugin_options() -> PluginOptions:
    """Options for a stream called 'events' with the default prefix."""
    return PluginOptions.load(stream_name="events")


# Integration Test Fixtures


@pytest.fixture(scope="session")
def localstack_endpoint() -> str:
    """Get LocalStack endpoint URL from environment or default."""
    return os.getenv("LOCALSTACK_ENDPOINT", "http://localhost:4566")


@pytest.fixture(scope="session")
def localstack_helper(localstack_endpoint: str) -> "LocalStackHelper":
    """Provides a LocalStackHelper, skipping the test when LocalStack is not running."""
    from tests.helpers.localstack import LocalStackHelper

    helper = LocalStackHelper(endpoint_url=localstack_endpoint)
    if not helper.is_available():
        pytest.skip(f"LocalStack is not reachable at {localstack_endpoint}")
    return helper


@pytest.fixture
def integration_stream(localstack_helper, request):
    """
    Creates a fresh stream for each test and deletes it afterwards.

    The shard count defaults to 2 and can be overridden with indirect parametrization:

        @pytest.mark.parametrize("integration_stream", [{"shard_count": 4}], indirect=True)
    """
    shard_count = getattr(request, "param", {}).get("shard_count", 2)
    stream_name = f"shard-count-it-{uuid.uuid4().hex[:8]}"

    localstack_helper.create_stream(stream_name, shard_count)
    yield stream_name
    localstack_helper.delete_stream(stream_name)

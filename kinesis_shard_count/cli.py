import argparse
import logging
import os
import platform
import signal
import sys
import threading
from collections.abc import Sequence
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from . import __version__
from ._logging import logger
from .config import PluginOptions
from .counter import ShardCounter
from .exceptions import ConfigurationError, RequestCancelledError, ShardCountError
from .plugin import ShardCountPlugin

PROGRAM_NAME = "kinesis-shard-count"

# Retries and timeouts live underneath the client, never in the paginator
CLIENT_CONFIG = Config(
    retries={"max_attempts": 5, "mode": "standard"},
    connect_timeout=5,
    read_timeout=10,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Report the open shard count of a Kinesis data stream to mackerel-agent",
    )
    parser.add_argument("--metric-key-prefix", default="", help="Metric key prefix")
    parser.add_argument("--tempfile", default="", help="Temp file name")
    parser.add_argument("--stream-name", default="", help="Kinesis Stream name")
    parser.add_argument("--region", default="", help="AWS Region")
    parser.add_argument("--version", action="store_true", help="Show version")
    return parser


def build_client(options: PluginOptions) -> Any:
    """
    Creates the boto3 Kinesis client for the configured region.

    Raises:
        ConfigurationError: If no region can be resolved or the profile is unknown
    """
    try:
        session = boto3.session.Session(region_name=options.region)
        return session.client("kinesis", config=CLIENT_CONFIG)
    except BotoCoreError as e:
        raise ConfigurationError(f"failed to load AWS config: {e}", original_error=e) from e


def install_interrupt_handler(cancel_event: threading.Event) -> None:
    """
    Turns SIGINT into a cancellation of the running traversal.

    Raising from the handler aborts a blocking socket read in the main
    thread, so an in-flight ListShards call returns straight away.
    """

    def _cancel(signum: int, frame: Any) -> None:
        logger.info("Interrupt received, cancelling", extra={"signal": signum})
        cancel_event.set()
        raise RequestCancelledError("Request cancelled by interrupt")

    signal.signal(signal.SIGINT, _cancel)


def configure_logging() -> None:
    # stdout is reserved for the agent protocol
    level = os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run(argv: Sequence[str] | None = None) -> None:
    """
    Parses the arguments and runs the plugin once.

    Raises:
        ShardCountError: On any unrecovered error
    """
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"{PROGRAM_NAME} version: {__version__}")
        print(f"python version: {platform.python_version()}")
        return

    options = PluginOptions.load(
        stream_name=args.stream_name,
        region=args.region,
        metric_key_prefix=args.metric_key_prefix,
        tempfile=args.tempfile,
    )
    logger.debug(
        "Loaded options",
        extra={"stream": options.stream_name, "tempfile": options.resolve_tempfile()},
    )

    cancel_event = threading.Event()
    install_interrupt_handler(cancel_event)

    plugin = ShardCountPlugin(ShardCounter(build_client(options)), options)
    plugin.run(sys.stdout, cancel_event=cancel_event)


def main(argv: Sequence[str] | None = None) -> int:
    configure_logging()
    try:
        run(argv)
    except ShardCountError as e:
        print(e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

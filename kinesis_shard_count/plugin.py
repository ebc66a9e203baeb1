"""
Mackerel agent plugin output.

The agent runs the plugin and reads stdout: either the graph definition
(when MACKEREL_AGENT_PLUGIN_META is set) or one tab separated line per metric.
"""

import json
import os
import re
import threading
import time
from dataclasses import asdict, dataclass, field
from typing import Any, TextIO

from ._logging import logger
from .config import PluginOptions
from .counter import ShardCounter

PLUGIN_META_ENV = "MACKEREL_AGENT_PLUGIN_META"
PLUGIN_META_HEADER = "# mackerel-agent-plugin"


@dataclass
class Metric:
    name: str
    label: str
    stacked: bool = False


@dataclass
class Graph:
    label: str
    unit: str
    metrics: list[Metric] = field(default_factory=list)


def title_case(value: str) -> str:
    """Upper-cases the first letter of every word and leaves the rest untouched."""
    return re.sub(r"(^|[^A-Za-z0-9'])([a-z])", lambda m: m.group(1) + m.group(2).upper(), value)


class ShardCountPlugin:
    """Reports the open shard count of one stream as ``<prefix>.shards.count``."""

    def __init__(self, counter: ShardCounter, options: PluginOptions):
        self.counter = counter
        self.options = options

    def metric_key_prefix(self) -> str:
        return self.options.metric_key_prefix

    def graph_definition(self) -> dict[str, Graph]:
        label_prefix = title_case(self.metric_key_prefix())
        return {
            "shards": Graph(
                label=f"{label_prefix} Shards",
                unit="float",
                metrics=[Metric(name="count", label="Count")],
            )
        }

    def fetch_metrics(self, cancel_event: threading.Event | None = None) -> dict[str, float]:
        return self.counter.fetch_metrics(self.options.stream_name, cancel_event)

    def print_graph_definition(self, out: TextIO) -> None:
        prefix = self.metric_key_prefix()
        graphs: dict[str, Any] = {}
        for key, graph in self.graph_definition().items():
            graphs[f"{prefix}.{key}"] = asdict(graph)

        out.write(PLUGIN_META_HEADER + "\n")
        out.write(json.dumps({"graphs": graphs}) + "\n")

    def print_metrics(
        self,
        out: TextIO,
        now: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        """
        Fetches the metrics and writes them in the agent's text format.

        Raises:
            ShardCountError: If the shard count could not be fetched
        """
        values = self.fetch_metrics(cancel_event)
        timestamp = int(now if now is not None else time.time())
        prefix = self.metric_key_prefix()

        for key, graph in self.graph_definition().items():
            for metric in graph.metrics:
                if metric.name not in values:
                    continue
                out.write(f"{prefix}.{key}.{metric.name}\t{values[metric.name]:f}\t{timestamp}\n")

        logger.debug(
            "Reported metrics",
            extra={"stream": self.options.stream_name, "metrics": sorted(values)},
        )

    def run(self, out: TextIO, cancel_event: threading.Event | None = None) -> None:
        if os.environ.get(PLUGIN_META_ENV):
            self.print_graph_definition(out)
            return
        self.print_metrics(out, cancel_event=cancel_event)

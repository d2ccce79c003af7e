"""Check if nodes are within CPU and memory usage thresholds.

Usage samples come from an ordered chain of strategies. The first strategy
that returns samples wins:

1. the metrics API (``oc get --raw /apis/metrics.k8s.io/v1beta1/nodes``)
   combined with node allocatable capacity,
2. ``oc adm top nodes``.
"""

import re
from typing import Callable, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from cluster_health_checks.checks.common import bullet_list, name_of, percentage
from cluster_health_checks.exceptions import ClusterAccessError
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import CheckCategory
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import Status

METRICS_PATH = "/apis/metrics.k8s.io/v1beta1/nodes"

_CPU_SUFFIXES = {"n": 1e-9, "u": 1e-6, "m": 1e-3, "": 1.0}
_MEMORY_SUFFIXES = {
    "Ki": 1024,
    "Mi": 1024 ** 2,
    "Gi": 1024 ** 3,
    "Ti": 1024 ** 4,
    "K": 1000,
    "k": 1000,
    "M": 1000 ** 2,
    "G": 1000 ** 3,
    "T": 1000 ** 4,
    "": 1,
}
_QUANTITY = re.compile(r"^([0-9.]+)([A-Za-z]*)$")


class NodeUsage(BaseModel):
    """Usage sample for one node, as percentages of allocatable capacity."""

    node: str
    cpu_percent: float = Field(..., ge=0)
    memory_percent: float = Field(..., ge=0)
    source: str = Field(..., description="The strategy that produced the sample")


def parse_cpu(quantity: str) -> float:
    """Convert a CPU quantity (e.g. "250m", "2", "123456n") to cores."""
    match = _QUANTITY.match(str(quantity).strip())
    if not match or match.group(2) not in _CPU_SUFFIXES:
        raise ValueError(f"invalid CPU quantity: {quantity!r}")
    return float(match.group(1)) * _CPU_SUFFIXES[match.group(2)]


def parse_memory(quantity: str) -> float:
    """Convert a memory quantity (e.g. "512Mi", "16Gi", "1000") to bytes."""
    match = _QUANTITY.match(str(quantity).strip())
    if not match or match.group(2) not in _MEMORY_SUFFIXES:
        raise ValueError(f"invalid memory quantity: {quantity!r}")
    return float(match.group(1)) * _MEMORY_SUFFIXES[match.group(2)]


def usage_from_metrics_api(accessor) -> Optional[List[NodeUsage]]:
    """Samples from the metrics API, None if it is unavailable."""
    try:
        metrics = accessor.get_raw(METRICS_PATH).get("items", [])
        nodes = {name_of(node): node for node in accessor.get_resources("nodes")}
    except ClusterAccessError as e:
        logger.debug(f"[CHECK] node-usage: metrics API unavailable: {e}")
        return None

    samples = []
    for item in metrics:
        name = name_of(item)
        allocatable = nodes.get(name, {}).get("status", {}).get("allocatable", {})
        try:
            cpu_total = parse_cpu(allocatable["cpu"])
            memory_total = parse_memory(allocatable["memory"])
            cpu_used = parse_cpu(item["usage"]["cpu"])
            memory_used = parse_memory(item["usage"]["memory"])
        except (KeyError, ValueError) as e:
            logger.debug(f"[CHECK] node-usage: skipping {name}: {e}")
            continue
        samples.append(
            NodeUsage(
                node=name,
                cpu_percent=100.0 * cpu_used / cpu_total if cpu_total else 0.0,
                memory_percent=100.0 * memory_used / memory_total if memory_total else 0.0,
                source="metrics-api",
            )
        )
    return samples or None


def usage_from_adm_top(accessor) -> Optional[List[NodeUsage]]:
    """Samples parsed from ``oc adm top nodes``, None if the command fails."""
    try:
        output = accessor.run_command(["adm", "top", "nodes", "--no-headers"])
    except ClusterAccessError as e:
        logger.debug(f"[CHECK] node-usage: 'oc adm top nodes' failed: {e}")
        return None

    samples = []
    for line in output.splitlines():
        fields = line.split()
        # NAME CPU(cores) CPU% MEMORY(bytes) MEMORY%
        if len(fields) < 5 or not fields[2].endswith("%") or not fields[4].endswith("%"):
            continue
        try:
            samples.append(
                NodeUsage(
                    node=fields[0],
                    cpu_percent=float(fields[2].rstrip("%")),
                    memory_percent=float(fields[4].rstrip("%")),
                    source="adm-top",
                )
            )
        except ValueError:
            continue
    return samples or None


DEFAULT_STRATEGIES: List[Callable] = [usage_from_metrics_api, usage_from_adm_top]


class NodeUsageCheck(CheckBaseModel):
    """Flags nodes whose CPU or memory usage exceeds the thresholds."""

    def __init__(
        self,
        accessor,
        cpu_threshold: float = 80,
        memory_threshold: float = 80,
        strategies: Optional[List[Callable]] = None,
    ):
        super().__init__(
            "node-usage",
            "Node Usage",
            CheckCategory.PERFORMANCE,
            "Checks if nodes are within CPU and memory usage thresholds",
        )
        self.accessor = accessor
        self.cpu_threshold = float(cpu_threshold)
        self.memory_threshold = float(memory_threshold)
        self.strategies = strategies or DEFAULT_STRATEGIES

    def collect(self) -> Optional[List[NodeUsage]]:
        for strategy in self.strategies:
            samples = strategy(self.accessor)
            if samples:
                return samples
        return None

    def run(self) -> CheckResult:
        samples = self.collect()
        if not samples:
            return self._create_result(
                Status.UNKNOWN,
                "Unable to collect node usage metrics",
                recommendations=[
                    "Verify that cluster monitoring is healthy and the metrics API is served",
                    "Run 'oc adm top nodes' to confirm metrics are available",
                ],
            )

        high_cpu = [
            f"{s.node} ({s.cpu_percent:.2f}%)" for s in samples if s.cpu_percent > self.cpu_threshold
        ]
        high_memory = [
            f"{s.node} ({s.memory_percent:.2f}%)"
            for s in samples
            if s.memory_percent > self.memory_threshold
        ]

        rows = "\n".join(
            f"{s.node:<40} {s.cpu_percent:>6.2f}% {s.memory_percent:>6.2f}%" for s in samples
        )
        detail = "=== Node Usage Analysis ===\n\n"
        detail += f"Source: {samples[0].source}\n"
        detail += f"CPU threshold: {self.cpu_threshold:g}%\n"
        detail += f"Memory threshold: {self.memory_threshold:g}%\n\n"
        detail += f"{'NODE':<40} {'CPU':>7} {'MEMORY':>7}\n{rows}\n\n"
        metadata = {
            "nodes": len(samples),
            "high_cpu": len(high_cpu),
            "high_memory": len(high_memory),
            "max_cpu_percent": f"{max(s.cpu_percent for s in samples):.2f}",
            "max_memory_percent": f"{max(s.memory_percent for s in samples):.2f}",
        }

        if not high_cpu and not high_memory:
            return self._create_result(
                Status.OK,
                "All nodes are within resource usage thresholds",
                detail=detail,
                metadata=metadata,
            )

        if high_cpu and high_memory:
            message = f"{len(high_cpu)} nodes with high CPU usage and {len(high_memory)} nodes with high memory usage"
        elif high_cpu:
            message = f"{len(high_cpu)} nodes with high CPU usage"
        else:
            message = f"{len(high_memory)} nodes with high memory usage"

        recommendations = []
        if high_cpu:
            detail += "High CPU usage:\n" + bullet_list(high_cpu)
            recommendations.append(f"Investigate nodes with high CPU usage: {', '.join(high_cpu)}")
        if high_memory:
            detail += "High memory usage:\n" + bullet_list(high_memory)
            recommendations.append(
                f"Investigate nodes with high memory usage: {', '.join(high_memory)}"
            )
        recommendations.append("Consider adding more nodes or optimizing workload placement")
        overloaded_nodes = {
            s.node
            for s in samples
            if s.cpu_percent > self.cpu_threshold or s.memory_percent > self.memory_threshold
        }
        overloaded = percentage(len(overloaded_nodes), len(samples))
        metadata["overloaded_percent"] = f"{overloaded:.1f}"

        return self._create_result(
            Status.WARNING,
            message,
            detail=detail,
            recommendations=recommendations,
            metadata=metadata,
        )


def create_check(accessor, settings=None) -> NodeUsageCheck:
    settings = settings or {}
    return NodeUsageCheck(
        accessor,
        cpu_threshold=settings.get("cpu_threshold", 80),
        memory_threshold=settings.get("memory_threshold", 80),
    )

"""Check if all nodes are ready."""

from cluster_health_checks.checks.common import (
    bullet_list,
    condition_true,
    name_of,
    source_block,
)
from cluster_health_checks.exceptions import ClusterAccessError
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import CheckCategory
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import Status


class NodeStatusCheck(CheckBaseModel):
    """Verifies that every node reports the Ready condition."""

    def __init__(self, accessor):
        super().__init__(
            "node-status",
            "Node Status",
            CheckCategory.CLUSTER_CONFIG,
            "Checks if all nodes are ready",
        )
        self.accessor = accessor

    def run(self) -> CheckResult:
        try:
            nodes = self.accessor.get_resources("nodes")
        except ClusterAccessError as e:
            raise self._create_error("Failed to retrieve nodes", e) from e

        not_ready = [name_of(node) for node in nodes if not condition_true(node, "Ready")]

        try:
            overview = self.accessor.run_command(["get", "nodes", "-o", "wide"])
        except ClusterAccessError:
            overview = ""

        detail = "=== Node Status Analysis ===\n\n"
        detail += source_block("Node Overview", overview)
        detail += "=== Node Status Summary ===\n\n"
        detail += f"Total Nodes: {len(nodes)}\n"
        detail += f"Ready Nodes: {len(nodes) - len(not_ready)}\n"
        detail += f"Not Ready Nodes: {len(not_ready)}\n\n"

        if not not_ready:
            return self._create_result(
                Status.OK, f"All {len(nodes)} nodes are ready", detail=detail
            )

        detail += "Nodes Not Ready:\n" + bullet_list(not_ready)
        return self._create_result(
            Status.CRITICAL,
            f"{len(not_ready)} nodes are not ready: {', '.join(not_ready)}",
            detail=detail,
            recommendations=[
                "Investigate why the nodes are not ready",
                "Check node logs using 'oc adm node-logs <node-name>'",
                "Check node diagnostics using 'oc debug node/<node-name>'",
            ],
            metadata={"total_nodes": len(nodes), "not_ready": len(not_ready)},
        )


def create_check(accessor, settings=None) -> NodeStatusCheck:
    """Create the node-status check.

    Returns:
        NodeStatusCheck: The configured check.
    """
    return NodeStatusCheck(accessor)

"""Check if all cluster operators are available and not degraded."""

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


class ClusterOperatorsCheck(CheckBaseModel):
    """Verifies the Available and Degraded conditions of every cluster operator."""

    def __init__(self, accessor):
        super().__init__(
            "cluster-operators",
            "Cluster Operators",
            CheckCategory.CLUSTER_CONFIG,
            "Checks if all cluster operators are available",
        )
        self.accessor = accessor

    def run(self) -> CheckResult:
        try:
            operators = self.accessor.get_resources("clusteroperators")
        except ClusterAccessError as e:
            raise self._create_error("Failed to retrieve cluster operators", e) from e

        unavailable = [name_of(co) for co in operators if not condition_true(co, "Available")]
        degraded = [
            name_of(co)
            for co in operators
            if condition_true(co, "Degraded") and name_of(co) not in unavailable
        ]

        try:
            overview = self.accessor.run_command(["get", "clusteroperators"])
        except ClusterAccessError:
            overview = ""

        detail = "=== Cluster Operators Status ===\n\n"
        detail += source_block("Cluster Operators Overview", overview)
        detail += "=== Operator Analysis ===\n\n"
        detail += f"Total Cluster Operators: {len(operators)}\n\n"
        detail += "Unavailable Operators:\n" + bullet_list(unavailable, "None")
        detail += "Degraded Operators:\n" + bullet_list(degraded, "None")

        if unavailable:
            return self._create_result(
                Status.CRITICAL,
                f"Some cluster operators are not available: {', '.join(unavailable)}",
                detail=detail,
                recommendations=[
                    "Investigate why the operators are not available",
                    "Check operator logs using 'oc logs deployment/<operator-name> -n <operator-namespace>'",
                    "Consult the OpenShift documentation or Red Hat support",
                ],
            )

        if degraded:
            return self._create_result(
                Status.WARNING,
                f"Some cluster operators are degraded: {', '.join(degraded)}",
                detail=detail,
                recommendations=[
                    "Review the operator conditions using 'oc describe clusteroperator <name>'",
                ],
            )

        return self._create_result(
            Status.OK, "All cluster operators are available", detail=detail
        )


def create_check(accessor, settings=None) -> ClusterOperatorsCheck:
    return ClusterOperatorsCheck(accessor)

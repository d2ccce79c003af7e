"""Check if user workloads define readiness and liveness probes."""

from cluster_health_checks.checks.common import (
    bullet_list,
    name_of,
    namespace_of,
    percentage,
    pod_spec,
    user_workloads,
)
from cluster_health_checks.exceptions import ClusterAccessError
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import CheckCategory
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import ResultKey, Status


class ProbesCheck(CheckBaseModel):
    """Counts workloads whose containers lack readiness or liveness probes."""

    def __init__(self, accessor):
        super().__init__(
            "application-probes",
            "Application Probes",
            CheckCategory.APPLICATIONS,
            "Checks if applications have readiness and liveness probes configured",
        )
        self.accessor = accessor

    def run(self) -> CheckResult:
        try:
            workloads = user_workloads(self.accessor)
        except ClusterAccessError as e:
            raise self._create_error("Failed to retrieve workloads", e) from e

        if not workloads:
            return self._create_result(
                Status.NOT_APPLICABLE, "No user workloads found in the cluster"
            )

        missing_readiness, missing_liveness, missing_both = [], [], []
        for workload in workloads:
            containers = pod_spec(workload).get("containers", []) or []
            readiness = all(c.get("readinessProbe") for c in containers)
            liveness = all(c.get("livenessProbe") for c in containers)
            label = f"{workload['kind']} '{name_of(workload)}' in namespace '{namespace_of(workload)}'"
            if not readiness and not liveness:
                missing_both.append(f"{label} is missing both readiness and liveness probes")
            elif not readiness:
                missing_readiness.append(f"{label} is missing readiness probe")
            elif not liveness:
                missing_liveness.append(f"{label} is missing liveness probe")

        total = len(workloads)
        no_readiness = len(missing_readiness) + len(missing_both)
        no_liveness = len(missing_liveness) + len(missing_both)

        detail = "=== Probe Analysis ===\n\n"
        detail += f"- Total User Workloads: {total}\n"
        detail += f"- Workloads Missing Readiness Probes: {no_readiness} ({percentage(no_readiness, total):.1f}%)\n"
        detail += f"- Workloads Missing Liveness Probes: {no_liveness} ({percentage(no_liveness, total):.1f}%)\n"
        detail += f"- Workloads Missing Both Probes: {len(missing_both)} ({percentage(len(missing_both), total):.1f}%)\n\n"
        detail += bullet_list(missing_both + missing_readiness + missing_liveness)
        metadata = {
            "total_workloads": total,
            "missing_readiness": no_readiness,
            "missing_liveness": no_liveness,
        }

        if not no_readiness and not no_liveness:
            return self._create_result(
                Status.OK,
                f"All {total} user workloads have readiness and liveness probes configured",
                detail=detail,
                metadata=metadata,
            )

        both_pct = percentage(len(missing_both), total)
        if both_pct > 50:
            message = (
                f"{both_pct:.1f}% of user workloads ({len(missing_both)} out of {total}) "
                "are missing both readiness and liveness probes"
            )
            result_key = ResultKey.REQUIRED
        elif percentage(no_readiness, total) > 30 or percentage(no_liveness, total) > 30:
            message = (
                "Many user workloads are missing probes: "
                f"{percentage(no_readiness, total):.1f}% missing readiness probes, "
                f"{percentage(no_liveness, total):.1f}% missing liveness probes"
            )
            result_key = ResultKey.RECOMMENDED
        else:
            message = (
                f"Some user workloads are missing probes: {no_readiness} missing readiness probes, "
                f"{no_liveness} missing liveness probes"
            )
            result_key = ResultKey.ADVISORY

        return self._create_result(
            Status.WARNING,
            message,
            result_key,
            detail=detail,
            recommendations=[
                "Configure readiness and liveness probes for all user workloads",
                "Follow the Kubernetes documentation on probes: https://kubernetes.io/docs/tasks/configure-pod-container/configure-liveness-readiness-startup-probes/",
            ],
            metadata=metadata,
        )


def create_check(accessor, settings=None) -> ProbesCheck:
    return ProbesCheck(accessor)

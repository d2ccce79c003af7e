"""Check if user workloads rely on emptyDir volumes."""

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


class EmptyDirVolumeCheck(CheckBaseModel):
    def __init__(self, accessor):
        super().__init__(
            "emptydir-volumes",
            "EmptyDir Volumes",
            CheckCategory.APPLICATIONS,
            "Checks if applications are using emptyDir volumes for persistent data",
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

        using = [
            f"{w['kind']} '{name_of(w)}' in namespace '{namespace_of(w)}' is using emptyDir volume"
            for w in workloads
            if any("emptyDir" in volume for volume in pod_spec(w).get("volumes", []) or [])
        ]
        total = len(workloads)
        share = percentage(len(using), total)

        detail = f"Total user workloads analyzed: {total}\n"
        detail += f"Workloads using emptyDir volumes: {len(using)}\n"
        detail += f"EmptyDir usage: {share:.1f}%\n\n"
        detail += bullet_list(using)
        metadata = {"total_workloads": total, "emptydir_workloads": len(using)}

        if not using:
            return self._create_result(
                Status.OK,
                "No user workloads are using emptyDir volumes",
                detail=detail,
                metadata=metadata,
            )

        if share > 50:
            message = f"{share:.1f}% of user workloads ({len(using)} out of {total}) are using emptyDir volumes"
            result_key = ResultKey.RECOMMENDED
        else:
            message = f"{len(using)} user workloads are using emptyDir volumes"
            result_key = ResultKey.ADVISORY

        return self._create_result(
            Status.WARNING,
            message,
            result_key,
            detail=detail,
            recommendations=[
                "Use persistent volumes instead of emptyDir for data that needs to persist",
                "Review existing workloads using emptyDir to ensure they don't store important data",
                "Follow the Kubernetes documentation on volumes: https://kubernetes.io/docs/concepts/storage/volumes/",
            ],
            metadata=metadata,
        )


def create_check(accessor, settings=None) -> EmptyDirVolumeCheck:
    return EmptyDirVolumeCheck(accessor)

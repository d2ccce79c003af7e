"""Check the phase of persistent volumes."""

from cluster_health_checks.checks.common import bullet_list, name_of, source_block
from cluster_health_checks.exceptions import ClusterAccessError
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import CheckCategory
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import ResultKey, Status


class PersistentVolumeCheck(CheckBaseModel):
    """Reports failed, pending and released persistent volumes."""

    def __init__(self, accessor):
        super().__init__(
            "persistent-volumes",
            "Persistent Volumes",
            CheckCategory.STORAGE,
            "Checks the health of persistent volumes",
        )
        self.accessor = accessor

    def run(self) -> CheckResult:
        try:
            volumes = self.accessor.get_resources("persistentvolumes")
        except ClusterAccessError as e:
            raise self._create_error("Failed to retrieve persistent volumes", e) from e

        if not volumes:
            return self._create_result(
                Status.NOT_APPLICABLE, "No persistent volumes found in the cluster"
            )

        failed, pending, released = [], [], []
        for pv in volumes:
            phase = pv.get("status", {}).get("phase", "")
            if phase == "Failed":
                reason = pv.get("status", {}).get("reason", "unknown")
                failed.append(f"{name_of(pv)} (Reason: {reason})")
            elif phase == "Pending":
                pending.append(name_of(pv))
            elif phase == "Released":
                released.append(name_of(pv))

        try:
            overview = self.accessor.run_command(["get", "pv", "-o", "wide"])
        except ClusterAccessError:
            overview = ""

        detail = ""
        if failed:
            detail += "Failed persistent volumes:\n" + bullet_list(failed)
        if pending:
            detail += "Pending persistent volumes:\n" + bullet_list(pending)
        if released:
            detail += "Released persistent volumes:\n" + bullet_list(released)
        detail += source_block("Persistent Volumes", overview)
        metadata = {
            "total": len(volumes),
            "failed": len(failed),
            "pending": len(pending),
            "released": len(released),
        }

        if failed:
            return self._create_result(
                Status.WARNING,
                f"Found {len(failed)} failed persistent volumes",
                ResultKey.RECOMMENDED,
                detail=detail,
                recommendations=[
                    "Investigate and fix the failed persistent volumes",
                    "Consider manually deleting and recreating the volumes if appropriate",
                ],
                metadata=metadata,
            )
        if pending:
            return self._create_result(
                Status.WARNING,
                f"Found {len(pending)} pending persistent volumes",
                ResultKey.ADVISORY,
                detail=detail,
                recommendations=["Check why persistent volumes are in pending state"],
                metadata=metadata,
            )
        if released:
            return self._create_result(
                Status.WARNING,
                f"Found {len(released)} released persistent volumes that could be reclaimed",
                ResultKey.ADVISORY,
                detail=detail,
                recommendations=[
                    "Consider reclaiming or deleting released volumes that are no longer needed"
                ],
                metadata=metadata,
            )

        return self._create_result(
            Status.OK,
            f"All {len(volumes)} persistent volumes are healthy",
            detail=detail,
            metadata=metadata,
        )


def create_check(accessor, settings=None) -> PersistentVolumeCheck:
    return PersistentVolumeCheck(accessor)

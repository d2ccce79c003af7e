"""Check if the cluster runs the latest known OpenShift release."""

import json
import re
from typing import List, Optional

from cluster_health_checks.checks.common import source_block
from cluster_health_checks.exceptions import ClusterAccessError
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import CheckCategory
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import ResultKey, Status

LATEST_OPENSHIFT_VERSION = "4.18"


def parse_version(version: str) -> List[int]:
    """Split a release string into numeric parts, ignoring pre-release suffixes.

    Example: "4.14.3-rc.1" gives [4, 14, 3].
    """
    parts = []
    for part in version.strip().split("."):
        match = re.match(r"\d+", part)
        parts.append(int(match.group()) if match else 0)
        if "-" in part:
            break
    while len(parts) < 2:
        parts.append(0)
    return parts


def compare_versions(current: str, reference: str) -> int:
    """Compare two releases on the parts both carry.

    Returns:
        int: -1 if current is older, 0 if equal, 1 if newer.
    """
    a, b = parse_version(current), parse_version(reference)
    for x, y in zip(a, b):
        if x != y:
            return -1 if x < y else 1
    return 0


class ClusterVersionCheck(CheckBaseModel):
    """Compares the installed release against a reference release."""

    def __init__(self, accessor, latest_version: str = LATEST_OPENSHIFT_VERSION):
        super().__init__(
            "cluster-version",
            "Cluster Version",
            CheckCategory.CLUSTER_CONFIG,
            "Checks if the cluster is running the latest version of OpenShift",
        )
        self.accessor = accessor
        self.latest_version = str(latest_version)

    def _current_version(self, data) -> Optional[str]:
        history = data.get("status", {}).get("history") or []
        if history and history[0].get("version"):
            return history[0]["version"]
        return (data.get("status", {}).get("desired") or {}).get("version")

    def run(self) -> CheckResult:
        try:
            data = self.accessor.get_resource("clusterversion", "version")
        except ClusterAccessError as e:
            raise self._create_error("Failed to get cluster version", e) from e

        current = self._current_version(data or {})
        if not current:
            return self._create_result(
                Status.UNKNOWN,
                "No cluster version found",
                ResultKey.ADVISORY,
                recommendations=["Verify the ClusterVersion resource with 'oc get clusterversion'"],
            )

        history = (data.get("status", {}).get("history") or [])[:5]
        detail = "=== Cluster Version Analysis ===\n\n"
        detail += f"Current Version: {current}\n"
        detail += f"Latest Available Version: {self.latest_version}\n\n"
        detail += source_block("Update History", json.dumps(history, indent=2), "json")

        comparison = compare_versions(current, self.latest_version)
        metadata = {"current_version": current, "latest_version": self.latest_version}

        if comparison < 0:
            detail += (
                f"The cluster version {current} is older than the latest available "
                f"version {self.latest_version}.\n"
            )
            return self._create_result(
                Status.WARNING,
                f"Cluster version {current} is not the latest version ({self.latest_version})",
                ResultKey.REQUIRED,
                detail=detail,
                recommendations=[
                    f"Update to the latest version {self.latest_version}",
                    "Follow the upgrade documentation at https://docs.openshift.com/container-platform/latest/updating/updating-cluster.html",
                ],
                metadata=metadata,
            )

        detail += f"The cluster is running version {current}.\n"
        return self._create_result(
            Status.OK,
            f"Cluster version {current} is up to date",
            detail=detail,
            metadata=metadata,
        )


def create_check(accessor, settings=None) -> ClusterVersionCheck:
    settings = settings or {}
    return ClusterVersionCheck(
        accessor, settings.get("latest_version", LATEST_OPENSHIFT_VERSION)
    )

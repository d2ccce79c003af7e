"""Check if monitoring for user-defined projects is enabled."""

import yaml

from cluster_health_checks.checks.common import cluster_minor_version, doc_url, source_block
from cluster_health_checks.exceptions import ClusterAccessError
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import CheckCategory
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import ResultKey, Status

MONITORING_NAMESPACE = "openshift-monitoring"
USER_WORKLOAD_NAMESPACE = "openshift-user-workload-monitoring"
MONITORING_CONFIGMAP = "cluster-monitoring-config"


class UserWorkloadMonitoringCheck(CheckBaseModel):
    """Reads enableUserWorkload from the cluster monitoring config map."""

    def __init__(self, accessor, required: bool = False):
        super().__init__(
            "user-workload-monitoring",
            "User Workload Monitoring",
            CheckCategory.OP_READY,
            "Checks if user workload monitoring is enabled",
        )
        self.accessor = accessor
        self.required = required

    def _enabled(self, configmap) -> bool:
        raw = (configmap or {}).get("data", {}).get("config.yaml", "")
        if not raw:
            return False
        try:
            config = yaml.safe_load(raw) or {}
        except yaml.YAMLError:
            return False
        return isinstance(config, dict) and config.get("enableUserWorkload") is True

    def run(self) -> CheckResult:
        try:
            configmap = self.accessor.get_resource(
                "configmap", MONITORING_CONFIGMAP, namespace=MONITORING_NAMESPACE
            )
            namespace = self.accessor.get_resource("namespace", USER_WORKLOAD_NAMESPACE)
        except ClusterAccessError as e:
            raise self._create_error("Failed to read the monitoring configuration", e) from e

        detail = source_block(
            f"{MONITORING_CONFIGMAP} config.yaml",
            (configmap or {}).get("data", {}).get("config.yaml", ""),
            "yaml",
        )

        if self._enabled(configmap) and namespace is not None:
            return self._create_result(
                Status.OK,
                "User workload monitoring is enabled",
                detail=detail,
            )

        version = cluster_minor_version(self.accessor)
        return self._create_result(
            Status.WARNING,
            "User workload monitoring is not enabled",
            ResultKey.RECOMMENDED if self.required else ResultKey.ADVISORY,
            detail=detail,
            recommendations=[
                "Enable monitoring for user-defined projects",
                "Refer to "
                + doc_url(version, "html-single/monitoring/index#enabling-monitoring-for-user-defined-projects"),
            ],
        )


def create_check(accessor, settings=None) -> UserWorkloadMonitoringCheck:
    settings = settings or {}
    return UserWorkloadMonitoringCheck(accessor, bool(settings.get("required", False)))

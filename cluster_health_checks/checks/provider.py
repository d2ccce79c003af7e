"""Assembly of the check sets."""

from typing import List, Optional, Union

from cluster_health_checks.checks import (
    cluster_operators_check,
    cluster_version_check,
    emptydir_check,
    etcd_encryption_check,
    ingress_controller_replica_check,
    kubeadmin_user_check,
    limit_range_check,
    node_status_check,
    node_usage_check,
    persistent_volume_check,
    probes_check,
    resource_quotas_check,
    self_provisioner_check,
    user_workload_monitoring_check,
)
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.run_config import CheckSet

# Check ID to factory module, in report order.
OPENSHIFT_CHECK_MODULES = {
    # Cluster Config
    "node-status": node_status_check,
    "cluster-operators": cluster_operators_check,
    "cluster-version": cluster_version_check,
    # Performance
    "node-usage": node_usage_check,
    # Networking
    "ingress-controller-replica": ingress_controller_replica_check,
    # Storage
    "persistent-volumes": persistent_volume_check,
    # Security
    "kubeadmin-user": kubeadmin_user_check,
    "self-provisioner": self_provisioner_check,
    "etcd-encryption": etcd_encryption_check,
    # Op-Ready
    "user-workload-monitoring": user_workload_monitoring_check,
}

APPLICATION_CHECK_MODULES = {
    "application-probes": probes_check,
    "resource-quotas": resource_quotas_check,
    "emptydir-volumes": emptydir_check,
    "limit-range": limit_range_check,
}


def _create(modules, accessor, config_manager) -> List[CheckBaseModel]:
    checks = []
    for check_id, module in modules.items():
        settings = config_manager.get_check_settings(check_id) if config_manager else None
        checks.append(module.create_check(accessor, settings))
    return checks


def get_openshift_checks(accessor, config_manager=None) -> List[CheckBaseModel]:
    """Checks covering the cluster platform."""
    return _create(OPENSHIFT_CHECK_MODULES, accessor, config_manager)


def get_application_checks(accessor, config_manager=None) -> List[CheckBaseModel]:
    """Checks covering user workloads."""
    return _create(APPLICATION_CHECK_MODULES, accessor, config_manager)


def get_all_checks(accessor, config_manager=None) -> List[CheckBaseModel]:
    return get_openshift_checks(accessor, config_manager) + get_application_checks(
        accessor, config_manager
    )


def build_checks(
    check_set: Union[CheckSet, str], accessor, config_manager: Optional[object] = None
) -> List[CheckBaseModel]:
    """Build the checks of a set, configured from the settings file when given.

    Args:
        check_set: openshift, application or all.
        accessor: The ClusterAccessor handed to every check.
        config_manager: Source of per-check thresholds.

    Raises:
        ValueError: If the check set is unknown.
    """
    builders = {
        CheckSet.OPENSHIFT: get_openshift_checks,
        CheckSet.APPLICATION: get_application_checks,
        CheckSet.ALL: get_all_checks,
    }
    return builders[CheckSet(check_set)](accessor, config_manager)

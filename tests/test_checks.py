"""Tests for the concrete cluster checks against canned cluster data."""

import pytest

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
from cluster_health_checks.checks.provider import build_checks
from cluster_health_checks.config_manager import ConfigManager
from cluster_health_checks.exceptions import CheckError
from cluster_health_checks.models.status import ResultKey, Status
from fakes import FakeAccessor, command_error


def _node(name, ready=True, cpu="4", memory="16Gi"):
    return {
        "metadata": {"name": name},
        "status": {
            "conditions": [{"type": "Ready", "status": "True" if ready else "False"}],
            "allocatable": {"cpu": cpu, "memory": memory},
        },
    }


def _workload(name, namespace, probes=True, volumes=None):
    container = {"name": "app"}
    if probes:
        container["readinessProbe"] = {"httpGet": {"path": "/"}}
        container["livenessProbe"] = {"httpGet": {"path": "/"}}
    return {
        "metadata": {"name": name, "namespace": namespace},
        "spec": {"template": {"spec": {"containers": [container], "volumes": volumes or []}}},
    }


def _namespaces(*names):
    return [{"metadata": {"name": n}} for n in names]


def test_node_status_all_ready() -> None:
    accessor = FakeAccessor(resources={"nodes": [_node("n1"), _node("n2")]})
    result = node_status_check.create_check(accessor).run()

    assert result.status is Status.OK
    assert result.message == "All 2 nodes are ready"


def test_node_status_not_ready() -> None:
    accessor = FakeAccessor(resources={"nodes": [_node("n1"), _node("n2", ready=False)]})
    result = node_status_check.create_check(accessor).run()

    assert result.status is Status.CRITICAL
    assert "n2" in result.message
    assert result.result_key is ResultKey.REQUIRED


def test_lookup_failure_raises_check_error_with_result() -> None:
    accessor = FakeAccessor(resources={"nodes": command_error()})
    with pytest.raises(CheckError) as excinfo:
        node_status_check.create_check(accessor).run()

    assert excinfo.value.result.status is Status.CRITICAL
    assert excinfo.value.result.message == "Failed to retrieve nodes"


def test_cluster_operators_unavailable_and_degraded() -> None:
    operators = [
        {"metadata": {"name": "dns"}, "status": {"conditions": [{"type": "Available", "status": "True"}]}},
        {
            "metadata": {"name": "ingress"},
            "status": {
                "conditions": [
                    {"type": "Available", "status": "True"},
                    {"type": "Degraded", "status": "True"},
                ]
            },
        },
    ]
    accessor = FakeAccessor(resources={"clusteroperators": operators})
    assert cluster_operators_check.create_check(accessor).run().status is Status.WARNING

    operators[0]["status"]["conditions"][0]["status"] = "False"
    assert cluster_operators_check.create_check(accessor).run().status is Status.CRITICAL


def test_cluster_version_comparison() -> None:
    assert cluster_version_check.compare_versions("4.14.3", "4.18") == -1
    assert cluster_version_check.compare_versions("4.18.2", "4.18") == 0
    assert cluster_version_check.compare_versions("4.19.0-rc.1", "4.18") == 1


def test_cluster_version_outdated() -> None:
    version = {"status": {"history": [{"version": "4.12.9"}], "desired": {"version": "4.12.9"}}}
    accessor = FakeAccessor(objects={("clusterversion", "version"): version})
    result = cluster_version_check.create_check(accessor, {"latest_version": "4.16"}).run()

    assert result.status is Status.WARNING
    assert result.metadata["current_version"] == "4.12.9"


def test_node_usage_from_metrics_api() -> None:
    accessor = FakeAccessor(
        resources={"nodes": [_node("n1", cpu="4", memory="16Gi"), _node("n2", cpu="4", memory="16Gi")]},
        raw={
            node_usage_check.METRICS_PATH: {
                "items": [
                    {"metadata": {"name": "n1"}, "usage": {"cpu": "3800m", "memory": "4Gi"}},
                    {"metadata": {"name": "n2"}, "usage": {"cpu": "1", "memory": "2Gi"}},
                ]
            }
        },
    )
    result = node_usage_check.create_check(accessor, {"cpu_threshold": 80}).run()

    assert result.status is Status.WARNING
    assert result.message == "1 nodes with high CPU usage"
    assert "Source: metrics-api" in result.detail


def test_node_usage_falls_back_to_adm_top() -> None:
    accessor = FakeAccessor(
        commands={
            "adm top nodes --no-headers": "n1   500m   12%   3000Mi   20%\nn2   900m   22%   14000Mi   91%\n"
        }
    )
    result = node_usage_check.create_check(accessor).run()

    assert result.status is Status.WARNING
    assert "high memory usage" in result.message
    assert "Source: adm-top" in result.detail


def test_node_usage_without_metrics_is_unknown() -> None:
    result = node_usage_check.create_check(FakeAccessor()).run()
    assert result.status is Status.UNKNOWN


def test_quantity_parsing() -> None:
    assert node_usage_check.parse_cpu("250m") == pytest.approx(0.25)
    assert node_usage_check.parse_cpu("1500000000n") == pytest.approx(1.5)
    assert node_usage_check.parse_memory("1Ki") == 1024
    with pytest.raises(ValueError):
        node_usage_check.parse_memory("12Qi")


@pytest.mark.parametrize(
    "replicas, status",
    [(3, Status.OK), (2, Status.WARNING), (None, Status.WARNING)],
)
def test_ingress_controller_replicas(replicas, status) -> None:
    spec = {} if replicas is None else {"replicas": replicas}
    accessor = FakeAccessor(objects={("ingresscontroller", "default"): {"spec": spec}})
    assert ingress_controller_replica_check.create_check(accessor).run().status is status


def test_ingress_min_replicas_from_settings() -> None:
    accessor = FakeAccessor(objects={("ingresscontroller", "default"): {"spec": {"replicas": 3}}})
    result = ingress_controller_replica_check.create_check(accessor, {"min_replicas": 4}).run()
    assert result.status is Status.WARNING


def test_persistent_volumes() -> None:
    volumes = [
        {"metadata": {"name": "pv1"}, "status": {"phase": "Bound"}},
        {"metadata": {"name": "pv2"}, "status": {"phase": "Released"}},
    ]
    accessor = FakeAccessor(resources={"persistentvolumes": volumes})
    result = persistent_volume_check.create_check(accessor).run()

    assert result.status is Status.WARNING
    assert "released" in result.message
    assert persistent_volume_check.create_check(FakeAccessor()).run().status is Status.NOT_APPLICABLE


def test_kubeadmin_user() -> None:
    present = FakeAccessor(objects={("secret", "kubeadmin"): {"metadata": {"name": "kubeadmin"}}})
    assert kubeadmin_user_check.create_check(present).run().status is Status.WARNING
    assert kubeadmin_user_check.create_check(FakeAccessor()).run().status is Status.OK


def test_self_provisioner() -> None:
    binding = {"subjects": [{"kind": "Group", "name": "system:authenticated:oauth"}]}
    accessor = FakeAccessor(objects={("clusterrolebinding", "self-provisioners"): binding})
    assert self_provisioner_check.create_check(accessor).run().status is Status.WARNING

    binding["subjects"] = []
    assert self_provisioner_check.create_check(accessor).run().status is Status.OK


def test_etcd_encryption() -> None:
    enabled = FakeAccessor(objects={("apiserver", "cluster"): {"spec": {"encryption": {"type": "aescbc"}}}})
    assert etcd_encryption_check.create_check(enabled).run().status is Status.OK
    assert etcd_encryption_check.create_check(FakeAccessor(objects={("apiserver", "cluster"): {}})).run().status is Status.WARNING


def test_user_workload_monitoring() -> None:
    configmap = {"data": {"config.yaml": "enableUserWorkload: true\n"}}
    accessor = FakeAccessor(
        objects={
            ("configmap", "cluster-monitoring-config"): configmap,
            ("namespace", "openshift-user-workload-monitoring"): {"metadata": {}},
        }
    )
    assert user_workload_monitoring_check.create_check(accessor).run().status is Status.OK

    result = user_workload_monitoring_check.create_check(FakeAccessor()).run()
    assert result.status is Status.WARNING
    assert result.result_key is ResultKey.ADVISORY


def test_probes_ignore_platform_namespaces() -> None:
    accessor = FakeAccessor(
        resources={
            "deployments": [
                _workload("web", "shop"),
                _workload("router", "openshift-ingress", probes=False),
            ],
            "statefulsets": [],
        }
    )
    result = probes_check.create_check(accessor).run()

    assert result.status is Status.OK
    assert result.metadata["total_workloads"] == "1"


def test_probes_missing() -> None:
    accessor = FakeAccessor(
        resources={"deployments": [_workload("web", "shop", probes=False)], "statefulsets": []}
    )
    result = probes_check.create_check(accessor).run()

    assert result.status is Status.WARNING
    assert result.result_key is ResultKey.REQUIRED


def test_no_user_workloads_not_applicable() -> None:
    assert probes_check.create_check(FakeAccessor()).run().status is Status.NOT_APPLICABLE
    assert emptydir_check.create_check(FakeAccessor()).run().status is Status.NOT_APPLICABLE


def test_emptydir_usage() -> None:
    accessor = FakeAccessor(
        resources={
            "deployments": [_workload("cache", "shop", volumes=[{"name": "tmp", "emptyDir": {}}])],
            "statefulsets": [_workload("db", "shop")],
        }
    )
    result = emptydir_check.create_check(accessor).run()

    assert result.status is Status.WARNING
    assert result.message == "1 user workloads are using emptyDir volumes"


def test_limit_ranges_and_quotas() -> None:
    accessor = FakeAccessor(
        resources={
            "namespaces": _namespaces("shop", "blog", "openshift-monitoring", "default"),
            "limitranges": [{"metadata": {"name": "lr", "namespace": "shop"}}],
            "resourcequotas": [
                {"metadata": {"name": "q", "namespace": "shop"}},
                {"metadata": {"name": "q", "namespace": "blog"}},
            ],
        }
    )
    limits = limit_range_check.create_check(accessor).run()
    quotas = resource_quotas_check.create_check(accessor).run()

    assert limits.status is Status.WARNING
    assert limits.metadata == {"user_namespaces": "2", "with_limit_ranges": "1"}
    assert quotas.status is Status.WARNING


def test_build_checks_sets() -> None:
    accessor = FakeAccessor()
    openshift = build_checks("openshift", accessor)
    application = build_checks("application", accessor)
    everything = build_checks("all", accessor, ConfigManager())

    assert len(everything) == len(openshift) + len(application)
    assert len({c.id for c in everything}) == len(everything)
    assert {c.category for c in application} == {"Applications"}
    assert len({c.category for c in everything}) == 7
    with pytest.raises(ValueError):
        build_checks("bogus", accessor)

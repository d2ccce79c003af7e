"""Helpers shared by the cluster checks."""

from typing import Any, Dict, Iterable, List, Optional

from cluster_health_checks.exceptions import ClusterAccessError

DEFAULT_DOC_VERSION = "4.10"

SYSTEM_NAMESPACE_PREFIXES = ("openshift-", "kube-")
SYSTEM_NAMESPACES = {"default", "openshift", "kube-system", "kube-public", "kube-node-lease"}


def doc_url(version: str, path: str) -> str:
    """Link into the product documentation for a minor version."""
    return f"https://access.redhat.com/documentation/en-us/openshift_container_platform/{version}/{path}"


def cluster_minor_version(accessor) -> str:
    """Major.minor version of the cluster, used for documentation links."""
    try:
        data = accessor.get_resource("clusterversion", "version")
    except ClusterAccessError:
        return DEFAULT_DOC_VERSION
    version = ((data or {}).get("status", {}).get("desired") or {}).get("version", "")
    parts = version.split(".")
    if len(parts) < 2:
        return DEFAULT_DOC_VERSION
    return f"{parts[0]}.{parts[1]}"


def condition_true(resource: Dict[str, Any], condition_type: str) -> bool:
    """Whether a status condition of the given type is True."""
    for condition in resource.get("status", {}).get("conditions", []) or []:
        if condition.get("type") == condition_type:
            return condition.get("status") == "True"
    return False


def name_of(resource: Dict[str, Any]) -> str:
    return resource.get("metadata", {}).get("name", "")


def namespace_of(resource: Dict[str, Any]) -> str:
    return resource.get("metadata", {}).get("namespace", "")


def is_user_namespace(name: str) -> bool:
    """Whether a namespace holds user workloads rather than platform components."""
    if name in SYSTEM_NAMESPACES:
        return False
    return not name.startswith(SYSTEM_NAMESPACE_PREFIXES)


def user_namespaces(accessor) -> List[str]:
    return sorted(
        name for name in (name_of(ns) for ns in accessor.get_resources("namespaces"))
        if is_user_namespace(name)
    )


WORKLOAD_KINDS = ("Deployment", "StatefulSet")


def user_workloads(accessor) -> List[Dict[str, Any]]:
    """Deployments and stateful sets in user namespaces, each tagged with its kind."""
    workloads = []
    for kind in WORKLOAD_KINDS:
        for item in accessor.get_resources(kind.lower() + "s", all_namespaces=True):
            if is_user_namespace(namespace_of(item)):
                workloads.append(dict(item, kind=kind))
    return workloads


def pod_spec(workload: Dict[str, Any]) -> Dict[str, Any]:
    return workload.get("spec", {}).get("template", {}).get("spec", {}) or {}


def percentage(part: int, total: int) -> float:
    return 100.0 * part / total if total else 0.0


def source_block(title: str, content: str, language: str = "bash") -> str:
    """Format command output as a titled listing inside a detail."""
    if not content.strip():
        return f"{title}: No information available\n\n"
    return f"{title}:\n[source, {language}]\n----\n{content.rstrip()}\n----\n\n"


def bullet_list(items: Iterable[str], empty: Optional[str] = None) -> str:
    lines = [f"- {item}" for item in items]
    if not lines:
        return f"{empty}\n\n" if empty else ""
    return "\n".join(lines) + "\n\n"

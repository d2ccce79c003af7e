"""Check if the default ingress controller runs enough replicas."""

import json

from cluster_health_checks.checks.common import cluster_minor_version, doc_url, source_block
from cluster_health_checks.exceptions import ClusterAccessError
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import CheckCategory
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import ResultKey, Status

INGRESS_NAMESPACE = "openshift-ingress-operator"
INGRESS_DOC_PATH = "html-single/networking/index#configuring-ingress"


class IngressControllerReplicaCheck(CheckBaseModel):
    """Compares the default ingress controller replica count with a minimum."""

    def __init__(self, accessor, min_replicas: int = 3):
        super().__init__(
            "ingress-controller-replica",
            "Ingress Controller Replicas",
            CheckCategory.NETWORKING,
            "Checks if the ingress controller has sufficient replicas",
        )
        self.accessor = accessor
        self.min_replicas = int(min_replicas)

    def run(self) -> CheckResult:
        try:
            controller = self.accessor.get_resource(
                "ingresscontroller", "default", namespace=INGRESS_NAMESPACE
            )
        except ClusterAccessError as e:
            raise self._create_error("Failed to get ingress controller replicas", e) from e

        if controller is None:
            return self._create_result(
                Status.CRITICAL,
                "Default ingress controller not found",
                recommendations=[
                    f"Verify the ingress operator in namespace {INGRESS_NAMESPACE}"
                ],
            )

        docs = doc_url(cluster_minor_version(self.accessor), INGRESS_DOC_PATH)
        detail = source_block(
            "Ingress Controller Spec", json.dumps(controller.get("spec", {}), indent=2), "json"
        )
        replicas = controller.get("spec", {}).get("replicas")

        if replicas is None:
            return self._create_result(
                Status.WARNING,
                "Ingress controller is using default replica configuration, which may not be optimal",
                ResultKey.ADVISORY,
                detail=detail,
                recommendations=[
                    "Configure a specific replica count for better control over the ingress controller scaling",
                    f"Refer to {docs}",
                ],
            )

        replicas = int(replicas)
        if replicas >= self.min_replicas:
            return self._create_result(
                Status.OK,
                f"Ingress controller has sufficient replicas: {replicas}",
                detail=detail,
                metadata={"replicas": replicas},
            )

        return self._create_result(
            Status.WARNING,
            f"Ingress controller has insufficient replicas: {replicas} (recommended: >= {self.min_replicas})",
            detail=detail,
            recommendations=[
                f"Increase the number of ingress controller replicas to at least {self.min_replicas} for high availability",
                f"Refer to {docs}",
            ],
            metadata={"replicas": replicas},
        )


def create_check(accessor, settings=None) -> IngressControllerReplicaCheck:
    settings = settings or {}
    return IngressControllerReplicaCheck(accessor, settings.get("min_replicas", 3))

"""Check if the temporary kubeadmin user has been removed."""

from cluster_health_checks.checks.common import cluster_minor_version, doc_url
from cluster_health_checks.exceptions import ClusterAccessError
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import CheckCategory
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import ResultKey, Status


class KubeadminUserCheck(CheckBaseModel):
    """Looks for the kubeadmin secret in kube-system."""

    def __init__(self, accessor):
        super().__init__(
            "kubeadmin-user",
            "Kubeadmin User",
            CheckCategory.SECURITY,
            "Checks if the kubeadmin user has been removed",
        )
        self.accessor = accessor

    def run(self) -> CheckResult:
        try:
            secret = self.accessor.get_resource("secret", "kubeadmin", namespace="kube-system")
        except ClusterAccessError as e:
            raise self._create_error("Failed to look up the kubeadmin secret", e) from e

        if secret is None:
            return self._create_result(
                Status.OK,
                "The kubeadmin user has been removed",
                detail="The kubeadmin secret does not exist in the kube-system namespace.\n",
            )

        version = cluster_minor_version(self.accessor)
        return self._create_result(
            Status.WARNING,
            "The kubeadmin user still exists",
            ResultKey.RECOMMENDED,
            detail="The kubeadmin secret exists in the kube-system namespace.\n",
            recommendations=[
                "This user is for temporary post-installation steps and should be removed to avoid potential security breaches",
                "Refer to "
                + doc_url(version, "html-single/authentication_and_authorization/removing-kubeadmin"),
            ],
        )


def create_check(accessor, settings=None) -> KubeadminUserCheck:
    return KubeadminUserCheck(accessor)

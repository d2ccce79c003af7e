"""Check if all authenticated users may create projects."""

import json

from cluster_health_checks.checks.common import cluster_minor_version, doc_url, source_block
from cluster_health_checks.exceptions import ClusterAccessError
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import CheckCategory
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import Status

OAUTH_GROUP = "system:authenticated:oauth"
SELF_PROVISIONING_DOC_PATH = (
    "html-single/building_applications/index"
    "#disabling-project-self-provisioning_configuring-project-creation"
)


class SelfProvisionerCheck(CheckBaseModel):
    """Inspects the subjects of the self-provisioners cluster role binding."""

    def __init__(self, accessor):
        super().__init__(
            "self-provisioner",
            "Self Provisioner",
            CheckCategory.SECURITY,
            "Checks if self-provisioner role is properly configured",
        )
        self.accessor = accessor

    def run(self) -> CheckResult:
        try:
            binding = self.accessor.get_resource("clusterrolebinding", "self-provisioners")
        except ClusterAccessError as e:
            raise self._create_error("Failed to get the self-provisioners role binding", e) from e

        if binding is None:
            return self._create_result(
                Status.OK,
                "Self-provisioner role binding not found, which may indicate it has been removed or renamed",
            )

        subjects = binding.get("subjects") or []
        detail = "=== Self-Provisioner Role Binding Analysis ===\n\n"
        detail += source_block("Subjects", json.dumps(subjects, indent=2), "json")

        if any(subject.get("name") == OAUTH_GROUP for subject in subjects):
            detail += (
                f"The role binding includes the '{OAUTH_GROUP}' group, which allows all "
                "authenticated users to create new projects.\n"
            )
            version = cluster_minor_version(self.accessor)
            return self._create_result(
                Status.WARNING,
                f"Self-provisioner role binding includes {OAUTH_GROUP}, allowing uncontrolled namespace creation",
                detail=detail,
                recommendations=[
                    f"Remove the self-provisioner role from the {OAUTH_GROUP} group",
                    f"Refer to {doc_url(version, SELF_PROVISIONING_DOC_PATH)}",
                ],
            )

        return self._create_result(
            Status.OK,
            "Self-provisioner role binding is properly configured to prevent uncontrolled namespace creation",
            detail=detail,
        )


def create_check(accessor, settings=None) -> SelfProvisionerCheck:
    return SelfProvisionerCheck(accessor)

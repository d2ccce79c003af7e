"""Check if etcd encryption is enabled."""

from cluster_health_checks.exceptions import ClusterAccessError
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import CheckCategory
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import ResultKey, Status

ENCRYPTED_TYPES = {"aescbc", "aesgcm", "kms"}


class EtcdEncryptionCheck(CheckBaseModel):
    def __init__(self, accessor):
        super().__init__(
            "etcd-encryption",
            "ETCD Encryption",
            CheckCategory.SECURITY,
            "Checks if etcd encryption is enabled",
        )
        self.accessor = accessor

    def run(self) -> CheckResult:
        try:
            apiserver = self.accessor.get_resource("apiserver", "cluster")
        except ClusterAccessError as e:
            raise self._create_error("Failed to get API server configuration", e) from e

        encryption = ((apiserver or {}).get("spec", {}).get("encryption") or {}).get("type", "")
        detail = f"API server encryption type: {encryption or 'identity (none)'}\n"

        if encryption.lower() in ENCRYPTED_TYPES:
            return self._create_result(
                Status.OK,
                f"ETCD encryption is enabled with type: {encryption}",
                detail=detail,
            )

        return self._create_result(
            Status.WARNING,
            "ETCD encryption is not enabled",
            ResultKey.RECOMMENDED,
            detail=detail,
            recommendations=[
                "Enable etcd encryption to protect sensitive data",
                "Follow the documentation at https://docs.openshift.com/container-platform/latest/security/encrypting-etcd.html",
            ],
        )


def create_check(accessor, settings=None) -> EtcdEncryptionCheck:
    return EtcdEncryptionCheck(accessor)

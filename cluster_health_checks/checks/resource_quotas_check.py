"""Check if user namespaces carry resource quotas and limit ranges."""

from cluster_health_checks.checks.common import (
    bullet_list,
    namespace_of,
    percentage,
    user_namespaces,
)
from cluster_health_checks.exceptions import ClusterAccessError
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import CheckCategory
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import ResultKey, Status


class ResourceQuotasCheck(CheckBaseModel):
    def __init__(self, accessor):
        super().__init__(
            "resource-quotas",
            "Resource Quotas",
            CheckCategory.APPLICATIONS,
            "Checks if resource quotas and limits are configured",
        )
        self.accessor = accessor

    def run(self) -> CheckResult:
        try:
            namespaces = user_namespaces(self.accessor)
            with_quota = {
                namespace_of(q)
                for q in self.accessor.get_resources("resourcequotas", all_namespaces=True)
            }
            with_limits = {
                namespace_of(lr)
                for lr in self.accessor.get_resources("limitranges", all_namespaces=True)
            }
        except ClusterAccessError as e:
            raise self._create_error("Failed to retrieve resource constraints", e) from e

        if not namespaces:
            return self._create_result(
                Status.NOT_APPLICABLE, "No user namespaces found in the cluster"
            )

        total = len(namespaces)
        quota_count = sum(1 for ns in namespaces if ns in with_quota)
        limit_count = sum(1 for ns in namespaces if ns in with_limits)
        missing_both = [ns for ns in namespaces if ns not in with_quota and ns not in with_limits]
        both = sum(1 for ns in namespaces if ns in with_quota and ns in with_limits)

        detail = "=== Resource Constraint Analysis ===\n\n"
        detail += f"- Total User Namespaces: {total}\n"
        detail += f"- Namespaces with Resource Quotas: {quota_count} ({percentage(quota_count, total):.1f}%)\n"
        detail += f"- Namespaces with Limit Ranges: {limit_count} ({percentage(limit_count, total):.1f}%)\n"
        detail += f"- Namespaces with Both: {both} ({percentage(both, total):.1f}%)\n\n"
        if missing_both:
            detail += "Namespaces without any resource constraints:\n" + bullet_list(missing_both)
        metadata = {"user_namespaces": total, "with_quotas": quota_count, "with_limit_ranges": limit_count}

        if both == total:
            return self._create_result(
                Status.OK,
                f"All {total} user namespaces have both resource quotas and limit ranges configured",
                detail=detail,
                metadata=metadata,
            )

        both_pct = percentage(both, total)
        if both_pct < 50:
            message = (
                f"Only {both_pct:.1f}% of user namespaces ({both} out of {total}) have both "
                "resource quotas and limit ranges configured"
            )
            result_key = ResultKey.RECOMMENDED
        else:
            message = (
                f"Some user namespaces are missing resource constraints: {total - quota_count} "
                f"missing resource quotas, {total - limit_count} missing limit ranges"
            )
            result_key = ResultKey.ADVISORY

        return self._create_result(
            Status.WARNING,
            message,
            result_key,
            detail=detail,
            recommendations=[
                "Configure resource quotas and limit ranges for all user namespaces",
                "Follow the Kubernetes documentation on resource quotas: https://kubernetes.io/docs/concepts/policy/resource-quotas/",
                "Follow the Kubernetes documentation on limit ranges: https://kubernetes.io/docs/concepts/policy/limit-range/",
            ],
            metadata=metadata,
        )


def create_check(accessor, settings=None) -> ResourceQuotasCheck:
    return ResourceQuotasCheck(accessor)

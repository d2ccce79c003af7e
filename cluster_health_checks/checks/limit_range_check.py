"""Check if LimitRanges are configured in user namespaces."""

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


class LimitRangeCheck(CheckBaseModel):
    def __init__(self, accessor):
        super().__init__(
            "limit-range",
            "LimitRange Configuration",
            CheckCategory.APPLICATIONS,
            "Checks if LimitRange is configured in user namespaces",
        )
        self.accessor = accessor

    def run(self) -> CheckResult:
        try:
            namespaces = user_namespaces(self.accessor)
            covered = {
                namespace_of(lr)
                for lr in self.accessor.get_resources("limitranges", all_namespaces=True)
            }
        except ClusterAccessError as e:
            raise self._create_error("Failed to retrieve limit ranges", e) from e

        if not namespaces:
            return self._create_result(
                Status.NOT_APPLICABLE, "No user namespaces found in the cluster"
            )

        total = len(namespaces)
        missing = [ns for ns in namespaces if ns not in covered]
        count = total - len(missing)
        coverage = percentage(count, total)

        detail = f"Total User Namespaces: {total}\n"
        detail += f"Namespaces with LimitRanges: {count}\n"
        detail += f"LimitRange Coverage: {coverage:.1f}%\n\n"
        if missing:
            detail += "Namespaces without LimitRange:\n" + bullet_list(missing)
        metadata = {"user_namespaces": total, "with_limit_ranges": count}

        if not missing:
            return self._create_result(
                Status.OK,
                f"All {total} user namespaces have LimitRange configured",
                detail=detail,
                metadata=metadata,
            )
        if count == 0:
            return self._create_result(
                Status.WARNING,
                "No namespaces have LimitRange configured",
                ResultKey.RECOMMENDED,
                detail=detail,
                recommendations=[
                    "Configure LimitRange resources in your namespaces to control resource usage",
                    "Follow best practices for resource management: https://kubernetes.io/docs/concepts/policy/limit-range/",
                ],
                metadata=metadata,
            )
        if coverage < 50:
            return self._create_result(
                Status.WARNING,
                f"Only {coverage:.1f}% of user namespaces ({count} out of {total}) have LimitRange configured",
                ResultKey.RECOMMENDED,
                detail=detail,
                recommendations=[
                    "Configure LimitRange resources in all namespaces to control resource usage",
                    "Set up a default project template including LimitRange",
                ],
                metadata=metadata,
            )
        return self._create_result(
            Status.WARNING,
            f"{coverage:.1f}% of user namespaces ({count} out of {total}) have LimitRange configured",
            ResultKey.ADVISORY,
            detail=detail,
            recommendations=["Configure LimitRange resources in all remaining namespaces"],
            metadata=metadata,
        )


def create_check(accessor, settings=None) -> LimitRangeCheck:
    return LimitRangeCheck(accessor)

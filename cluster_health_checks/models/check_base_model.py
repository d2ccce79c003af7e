"""Base class for all cluster checks."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional, Union

from cluster_health_checks.exceptions import CheckError
from cluster_health_checks.models.check_category import CheckCategory, category_label
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import ResultKey, Status


class CheckBaseModel(ABC):
    """Base class for all cluster checks."""

    def __init__(
        self,
        check_id: str,
        name: str,
        category: Union[CheckCategory, str],
        description: str,
    ):
        """Initialize a check.

        Args:
            check_id: The unique, stable check identifier (e.g., "node-status")
            name: The display name for reports (e.g., "Node Status")
            category: The category of the check, any label is accepted
            description: The human-readable description
        """
        self.id = check_id
        self.name = name
        self.category = category_label(category)
        self.description = description

    @abstractmethod
    def run(self) -> CheckResult:
        """Execute the check against the cluster.

        Raises:
            CheckError: If the check could not complete. The error may carry
                the result built so far.

        Returns:
            CheckResult: The result of the check.
        """
        pass

    def _create_result(
        self,
        status: Status,
        message: str = "",
        result_key: Optional[ResultKey] = None,
        detail: str = "",
        recommendations: Optional[Iterable[str]] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> CheckResult:
        """Create a CheckResult for this check.

        Args:
            status: The severity verdict.
            message: A short summary, defaults to the check description.
            result_key: The follow-up class, derived from status when omitted.
            detail: Long-form detail text.
            recommendations: Ordered recommendations.
            metadata: Additional key/value information.

        Returns:
            CheckResult: The formatted result.
        """
        if not message:
            message = self.description

        if result_key is None:
            result_key = default_result_key(status)

        return CheckResult(
            check_id=self.id,
            status=status,
            message=message,
            result_key=result_key,
            detail=detail,
            recommendations=list(recommendations or []),
            metadata={str(k): str(v) for k, v in (metadata or {}).items()},
        )

    def _create_error(self, message: str, error: Exception) -> CheckError:
        """Build a CheckError carrying a Critical result for a failed lookup.

        Args:
            message: The message shown in the report.
            error: The underlying cause.
        """
        return CheckError(
            f"{message}: {error}",
            result=self._create_result(Status.CRITICAL, message, ResultKey.REQUIRED),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} category={self.category!r}>"


def default_result_key(status: Status) -> ResultKey:
    """Map a status to the result key it usually co-occurs with."""
    return {
        Status.OK: ResultKey.NO_CHANGE,
        Status.WARNING: ResultKey.RECOMMENDED,
        Status.CRITICAL: ResultKey.REQUIRED,
        Status.UNKNOWN: ResultKey.ADVISORY,
        Status.NOT_APPLICABLE: ResultKey.NOT_APPLICABLE,
    }[status]

"""Read-only views over the results of a run."""

from typing import Dict, List, Sequence

from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.status import STATUS_ORDER, Status


class ResultAggregator:
    """Groups and counts results.

    Every view is recomputed from the underlying lists on each call. Results
    are always presented in check order so the output does not depend on the
    order in which a parallel run completed them.
    """

    def __init__(self, checks: Sequence[CheckBaseModel], results: Sequence[CheckResult]):
        self._checks: Dict[str, CheckBaseModel] = {check.id: check for check in checks}
        self._results = list(results)

    @classmethod
    def from_runner(cls, runner) -> "ResultAggregator":
        """Build an aggregator from a finished runner."""
        return cls(runner.checks, runner.results)

    @property
    def total(self) -> int:
        return len(self._results)

    def get_check(self, check_id: str) -> CheckBaseModel:
        """Get the check that produced a result.

        Raises:
            KeyError: If the check is not part of the run.
        """
        if check_id not in self._checks:
            raise KeyError(f"Check '{check_id}' not found")
        return self._checks[check_id]

    def get_results(self) -> List[CheckResult]:
        """Get every result ordered by check order."""
        position = {check_id: i for i, check_id in enumerate(self._checks)}
        return sorted(
            self._results, key=lambda r: position.get(r.check_id, len(position))
        )

    def count_by_status(self) -> Dict[Status, int]:
        """Count results per status, only for statuses that occur."""
        counts: Dict[Status, int] = {}
        for result in self._results:
            counts[result.status] = counts.get(result.status, 0) + 1
        return {status: counts[status] for status in STATUS_ORDER if status in counts}

    def get_results_by_status(self) -> Dict[Status, List[CheckResult]]:
        grouped: Dict[Status, List[CheckResult]] = {}
        for result in self.get_results():
            grouped.setdefault(result.status, []).append(result)
        return {status: grouped[status] for status in STATUS_ORDER if status in grouped}

    def get_results_by_category(self) -> Dict[str, List[CheckResult]]:
        """Group results by category, in order of first appearance."""
        grouped: Dict[str, List[CheckResult]] = {}
        for result in self.get_results():
            check = self._checks.get(result.check_id)
            category = check.category if check else "Uncategorized"
            grouped.setdefault(category, []).append(result)
        return grouped

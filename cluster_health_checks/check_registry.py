"""Registry of the checks selected for a run."""

from typing import Dict, Iterable, List, Optional

from loguru import logger

from cluster_health_checks.exceptions import DuplicateCheckError
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import category_label


class CheckRegistry:
    """Ordered collection of checks keyed by check ID."""

    def __init__(self, checks: Optional[Iterable[CheckBaseModel]] = None):
        """Initialize the registry.

        Args:
            checks: Checks to register immediately, in order.

        Raises:
            DuplicateCheckError: If two checks share an ID.
        """
        self._checks: Dict[str, CheckBaseModel] = {}
        if checks:
            self.add_all(checks)

    def add(self, check: CheckBaseModel) -> None:
        """Register a check.

        Args:
            check: The check instance.

        Raises:
            DuplicateCheckError: If a check with the same ID is registered.
        """
        if check.id in self._checks:
            raise DuplicateCheckError(check.id)
        self._checks[check.id] = check
        logger.debug(f"[REGISTRY] Registered {check.id} ({check.category})")

    def add_all(self, checks: Iterable[CheckBaseModel]) -> None:
        """Register several checks in order."""
        for check in checks:
            self.add(check)

    def filter(self, categories: Optional[Iterable[str]] = None) -> List[CheckBaseModel]:
        """Get the checks belonging to any of the given categories.

        Args:
            categories: Category labels. None or empty selects every check.

        Returns:
            A new list of checks in registration order.
        """
        wanted = {category_label(c) for c in (categories or [])}
        if not wanted:
            return list(self._checks.values())
        return [check for check in self._checks.values() if check.category in wanted]

    def get_check(self, check_id: str) -> CheckBaseModel:
        """Get a check by ID.

        Args:
            check_id: The ID of the check (e.g., "node-status").

        Returns:
            CheckBaseModel: The check instance.

        Raises:
            KeyError: If the check is not found.
        """
        if check_id not in self._checks:
            raise KeyError(f"Check '{check_id}' not found in registry")
        return self._checks[check_id]

    def get_all_checks(self) -> Dict[str, CheckBaseModel]:
        """Get all registered checks.

        Returns:
            A dictionary of all checks, in registration order.
        """
        return self._checks.copy()

    def categories(self) -> List[str]:
        """Get the distinct categories in registration order."""
        seen: List[str] = []
        for check in self._checks.values():
            if check.category not in seen:
                seen.append(check.category)
        return seen

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, check_id: object) -> bool:
        return check_id in self._checks

    def __iter__(self):
        return iter(list(self._checks.values()))

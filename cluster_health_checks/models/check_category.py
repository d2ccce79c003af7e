"""Check category definitions."""

from enum import Enum


class CheckCategory(str, Enum):
    """Built-in categories for health checks.

    Categories are plain labels; checks may use any other string as well.
    """

    CLUSTER_CONFIG = "Cluster Config"
    NETWORKING = "Networking"
    STORAGE = "Storage"
    APPLICATIONS = "Applications"
    SECURITY = "Security"
    OP_READY = "Op-Ready"
    PERFORMANCE = "Performance"


CATEGORY_ALIASES = {
    "Cluster": CheckCategory.CLUSTER_CONFIG,
    "Infra": CheckCategory.CLUSTER_CONFIG,
    "Infrastructure": CheckCategory.CLUSTER_CONFIG,
    "Network": CheckCategory.NETWORKING,
    "App Dev": CheckCategory.APPLICATIONS,
    "Monitoring": CheckCategory.OP_READY,
}


def category_label(category) -> str:
    """Return the plain string label of a category, resolving legacy names."""
    if isinstance(category, Enum):
        return str(category.value)
    label = str(category).strip()
    if label in CATEGORY_ALIASES:
        return CATEGORY_ALIASES[label].value
    return label

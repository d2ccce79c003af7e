"""Status and result key definitions."""

from enum import Enum


class Status(str, Enum):
    """Severity verdict of a check result."""

    OK = "OK"
    WARNING = "Warning"
    CRITICAL = "Critical"
    UNKNOWN = "Unknown"
    NOT_APPLICABLE = "NotApplicable"

    @property
    def severity(self) -> int:
        """Rank used for sorting, higher is worse."""
        return _SEVERITY[self]

    @property
    def color(self) -> str:
        """Badge colour used by the rendered documents."""
        return _STATUS_COLORS[self]


_SEVERITY = {
    Status.NOT_APPLICABLE: 0,
    Status.OK: 1,
    Status.UNKNOWN: 2,
    Status.WARNING: 3,
    Status.CRITICAL: 4,
}

_STATUS_COLORS = {
    Status.OK: "#00FF00",
    Status.WARNING: "#FEFE20",
    Status.CRITICAL: "#FF0000",
    Status.UNKNOWN: "#FFFFFF",
    Status.NOT_APPLICABLE: "#A6B9BF",
}

# Display order for summary tables.
STATUS_ORDER = [
    Status.OK,
    Status.WARNING,
    Status.CRITICAL,
    Status.UNKNOWN,
    Status.NOT_APPLICABLE,
]


class ResultKey(str, Enum):
    """Recommended follow-up class, orthogonal to Status."""

    NO_CHANGE = "NoChange"
    ADVISORY = "Advisory"
    RECOMMENDED = "Recommended"
    REQUIRED = "Required"
    NOT_APPLICABLE = "NotApplicable"

    @property
    def label(self) -> str:
        """Text shown in the report key and status badges."""
        return _RESULT_KEY_LABELS[self]

    @property
    def color(self) -> str:
        return _RESULT_KEY_COLORS[self]


_RESULT_KEY_LABELS = {
    ResultKey.NO_CHANGE: "No Change",
    ResultKey.ADVISORY: "Advisory",
    ResultKey.RECOMMENDED: "Changes Recommended",
    ResultKey.REQUIRED: "Changes Required",
    ResultKey.NOT_APPLICABLE: "Not Applicable",
}

_RESULT_KEY_COLORS = {
    ResultKey.NO_CHANGE: "#00FF00",
    ResultKey.ADVISORY: "#80E5FF",
    ResultKey.RECOMMENDED: "#FEFE20",
    ResultKey.REQUIRED: "#FF0000",
    ResultKey.NOT_APPLICABLE: "#A6B9BF",
}

RESULT_KEY_DESCRIPTIONS = {
    ResultKey.REQUIRED: "Indicates Changes Required for system stability, subscription compliance, or other reason.",
    ResultKey.RECOMMENDED: "Indicates Changes Recommended to align with recommended practices, but not urgently required.",
    ResultKey.NOT_APPLICABLE: "No advice given on line item. For line items which are data-only to provide context.",
    ResultKey.ADVISORY: "No change required or recommended, but additional information provided.",
    ResultKey.NO_CHANGE: "No change required. In alignment with recommended practices.",
}

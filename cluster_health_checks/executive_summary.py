"""Executive summary generated from a rendered AsciiDoc report.

The summary re-reads the item markers written by the AsciiDoc renderer, scores
every category and lists the checks that need attention.
"""

import os
import re
from enum import Enum
from typing import Dict, List, Optional, Union

from jinja2 import Environment, FileSystemLoader
from loguru import logger
from pydantic import BaseModel, Field

from cluster_health_checks.exceptions import (
    ConfigurationError,
    ReportError,
    ReportParseError,
)
from cluster_health_checks.models.status import STATUS_ORDER, Status
from cluster_health_checks.reporter import (
    ITEM_CATEGORY_PREFIX,
    ITEM_END,
    ITEM_SOURCE_PREFIX,
    ITEM_SOURCE_SUFFIX,
    ITEM_START,
    MESSAGE_PREFIX,
    RECOMMENDATIONS_HEADER,
    STATUS_PREFIX,
    TEMPLATE_DIR,
)

SUMMARY_FILENAME = "070_executive-summary"

_DELIMITER = re.compile(r"^-{4,}$")


class SummaryFormat(str, Enum):
    ASCIIDOC = "asciidoc"
    JSON = "json"

    @property
    def extension(self) -> str:
        return ".adoc" if self is SummaryFormat.ASCIIDOC else ".json"


class ReportEntry(BaseModel):
    """One check item read back from a report."""

    check_id: str = Field(..., description="The check ID from the item source marker")
    name: str = Field("", description="The check display name")
    category: str = Field("Uncategorized", description="The check category")
    status: Status = Field(..., description="The reported status")
    message: str = Field("", description="The reported message")
    recommendations: List[str] = Field(default_factory=list)
    position: int = Field(0, description="Order of the item in the document")


class CategoryScore(BaseModel):
    """Score of one category."""

    category: str
    total: int
    counts: Dict[str, int] = Field(default_factory=dict, description="Entries per status")
    score: float = Field(..., ge=0, le=100)


class ExecutiveSummary(BaseModel):
    """Scored rollup of a health check report."""

    cluster_name: str
    customer_name: str
    total_checks: int
    status_counts: Dict[str, int] = Field(default_factory=dict)
    categories: List[CategoryScore] = Field(default_factory=list)
    overall_score: float = Field(..., ge=0, le=100)
    attention: List[ReportEntry] = Field(
        default_factory=list, description="Non-OK entries, most severe first"
    )


# -----------------------------------------------------------------------
# Parsing
# -----------------------------------------------------------------------
def _read_report(path: str) -> str:
    if not path.endswith(".adoc"):
        raise ReportParseError(f"Report must be an AsciiDoc (.adoc) file: {path}")
    if not os.path.isfile(path):
        raise ReportParseError(f"Report file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise ReportParseError(f"Failed to read report {path}: {e}") from e


def parse_report(path_or_text: str) -> List[ReportEntry]:
    """Extract the check items from a rendered AsciiDoc report.

    Args:
        path_or_text: A path to an .adoc file, or the document text itself.
            Anything spanning more than one line is treated as text.

    Returns:
        The entries in document order.

    Raises:
        ReportParseError: If the file is unusable or holds no check items.
    """
    if "\n" in path_or_text:
        text = path_or_text
    else:
        text = _read_report(path_or_text)

    entries: List[ReportEntry] = []
    current: Optional[Dict] = None
    delimiter: Optional[str] = None
    in_recommendations = False

    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.rstrip()

        # Markers inside a listing block are content, not structure.
        if delimiter is not None:
            if line == delimiter:
                delimiter = None
            continue
        if _DELIMITER.match(line):
            delimiter = line
            in_recommendations = False
            continue

        if line == ITEM_START:
            if current is not None:
                raise ReportParseError(f"Line {number}: item started before the previous one ended")
            current = {"recommendations": [], "position": len(entries)}
            in_recommendations = False
            continue
        if current is None:
            continue

        if line == ITEM_END:
            entries.append(_finish_entry(current, number))
            current = None
        elif line.startswith(ITEM_SOURCE_PREFIX):
            check_id = line[len(ITEM_SOURCE_PREFIX):]
            if check_id.endswith(ITEM_SOURCE_SUFFIX):
                check_id = check_id[: -len(ITEM_SOURCE_SUFFIX)]
            current["check_id"] = check_id
        elif line.startswith(ITEM_CATEGORY_PREFIX):
            current["category"] = line[len(ITEM_CATEGORY_PREFIX):].strip()
        elif line.startswith("==== "):
            current["name"] = line[5:].strip()
        elif line.startswith(STATUS_PREFIX):
            current["status"] = line[len(STATUS_PREFIX):].strip()
        elif line.startswith(MESSAGE_PREFIX):
            current["message"] = line[len(MESSAGE_PREFIX):].strip()
        elif line == RECOMMENDATIONS_HEADER:
            in_recommendations = True
        elif in_recommendations:
            if line.startswith("* "):
                current["recommendations"].append(line[2:].strip())
            elif line:
                in_recommendations = False

    if current is not None:
        raise ReportParseError("Report ended inside a check item")
    if not entries:
        raise ReportParseError("No check items found in report")

    logger.debug(f"[SUMMARY] Parsed {len(entries)} check item(s)")
    return entries


def _finish_entry(item: Dict, line_number: int) -> ReportEntry:
    if "check_id" not in item:
        raise ReportParseError(f"Line {line_number}: check item without a source marker")
    if "status" not in item:
        raise ReportParseError(f"Line {line_number}: check item '{item['check_id']}' has no status")
    try:
        status = Status(item["status"])
    except ValueError as e:
        raise ReportParseError(
            f"Line {line_number}: unknown status '{item['status']}' for '{item['check_id']}'"
        ) from e

    return ReportEntry(
        check_id=item["check_id"],
        name=item.get("name") or item["check_id"],
        category=item.get("category") or "Uncategorized",
        status=status,
        message=item.get("message", ""),
        recommendations=item["recommendations"],
        position=item["position"],
    )


# -----------------------------------------------------------------------
# Scoring
# -----------------------------------------------------------------------
def category_score(entries: List[ReportEntry]) -> float:
    """Score a group of entries: OK counts fully, Warning counts half."""
    if not entries:
        return 0.0
    ok = sum(1 for e in entries if e.status is Status.OK)
    warning = sum(1 for e in entries if e.status is Status.WARNING)
    score = 100.0 * (ok + 0.5 * warning) / len(entries)
    return min(100.0, max(0.0, score))


def _count(entries: List[ReportEntry]) -> Dict[str, int]:
    counts = {status.value: 0 for status in STATUS_ORDER}
    for entry in entries:
        counts[entry.status.value] += 1
    return {k: v for k, v in counts.items() if v}


def summarize(
    entries: List[ReportEntry], cluster_name: str, customer_name: str
) -> ExecutiveSummary:
    """Score the entries of a report."""
    by_category: Dict[str, List[ReportEntry]] = {}
    for entry in entries:
        by_category.setdefault(entry.category, []).append(entry)

    categories = [
        CategoryScore(
            category=category,
            total=len(group),
            counts=_count(group),
            score=round(category_score(group), 2),
        )
        for category, group in by_category.items()
    ]
    for item in categories:
        logger.debug(f"[SUMMARY] {item.category}: {item.total} item(s), score {item.score:.2f}%")

    overall = sum(c.score for c in categories) / len(categories) if categories else 0.0
    attention = sorted(
        (e for e in entries if e.status is not Status.OK),
        key=lambda e: (-e.status.severity, e.position),
    )

    return ExecutiveSummary(
        cluster_name=cluster_name,
        customer_name=customer_name,
        total_checks=len(entries),
        status_counts=_count(entries),
        categories=categories,
        overall_score=round(overall, 2),
        attention=attention,
    )


# -----------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------
def _summary_format(output_format: Union[SummaryFormat, str]) -> SummaryFormat:
    try:
        return SummaryFormat(output_format)
    except ValueError as e:
        raise ConfigurationError(
            f"Unsupported executive summary format '{output_format}', use asciidoc or json"
        ) from e


def render_executive_summary(
    summary: ExecutiveSummary, output_format: Union[SummaryFormat, str] = SummaryFormat.ASCIIDOC
) -> str:
    """Render a summary as AsciiDoc or JSON."""
    fmt = _summary_format(output_format)
    if fmt is SummaryFormat.JSON:
        return summary.model_dump_json(indent=2) + "\n"

    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    template = env.get_template("executive_summary.adoc.j2")
    return template.render(summary=summary)


def executive_summary_path(
    output_dir: str, output_format: Union[SummaryFormat, str] = SummaryFormat.ASCIIDOC
) -> str:
    return os.path.join(output_dir, SUMMARY_FILENAME + _summary_format(output_format).extension)


def generate_executive_summary(
    report_path: str,
    cluster_name: str,
    customer_name: str,
    output_dir: str,
    output_format: Union[SummaryFormat, str] = SummaryFormat.ASCIIDOC,
) -> ExecutiveSummary:
    """Parse a report, score it and write the executive summary.

    Raises:
        ReportParseError: If the report cannot be parsed.
        ConfigurationError: If the output format is not supported.
        ReportError: If the summary cannot be written.
    """
    output_path = executive_summary_path(output_dir, output_format)
    entries = parse_report(report_path)
    summary = summarize(entries, cluster_name, customer_name)
    content = render_executive_summary(summary, output_format)

    try:
        os.makedirs(output_dir, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise ReportError(f"Failed to write executive summary to {output_path}: {e}") from e

    logger.info(
        f"[SUMMARY] Executive summary written to {output_path} (score: {summary.overall_score:.2f}%)"
    )
    return summary

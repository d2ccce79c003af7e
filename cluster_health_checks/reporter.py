"""Report rendering for health check results.

Four formats are supported: an AsciiDoc document (the structured document the
executive summary re-reads), HTML rendered from a Jinja2 template, JSON and a
plain-text summary for the terminal.
"""

import json
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger
from tabulate import tabulate

from cluster_health_checks.aggregator import ResultAggregator
from cluster_health_checks.exceptions import ReportError
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.report_config import ReportConfig, ReportFormat
from cluster_health_checks.models.status import (
    RESULT_KEY_DESCRIPTIONS,
    ResultKey,
    Status,
)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")

# Item markers shared with the executive summary parser.
ITEM_START = "// ------------------------ITEM START"
ITEM_END = "// ------------------------ITEM END"
ITEM_SOURCE_PREFIX = "// ----ITEM SOURCE:  ./content/healthcheck-items/"
ITEM_SOURCE_SUFFIX = ".item"
ITEM_CATEGORY_PREFIX = "// ----ITEM CATEGORY: "
STATUS_PREFIX = "*Status:* "
MESSAGE_PREFIX = "*Message:* "
RECOMMENDATIONS_HEADER = "*Recommendations:*"

KEY_ORDER = [
    ResultKey.REQUIRED,
    ResultKey.RECOMMENDED,
    ResultKey.NOT_APPLICABLE,
    ResultKey.ADVISORY,
    ResultKey.NO_CHANGE,
]


# -----------------------------------------------------------------------
# Colors
# -----------------------------------------------------------------------
class Colors:
    """ANSI color codes for terminal output."""

    GREEN = "\033[32m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    GREY = "\033[90m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def for_status(cls, status: Status) -> str:
        return {
            Status.OK: cls.GREEN,
            Status.WARNING: cls.YELLOW,
            Status.CRITICAL: cls.RED,
            Status.UNKNOWN: cls.BLUE,
            Status.NOT_APPLICABLE: cls.GREY,
        }[status]


def single_line(text: str) -> str:
    """Collapse text onto one line so it fits a prefixed document line."""
    return " ".join(text.split())


def detail_delimiter(detail: str) -> str:
    """Pick a listing delimiter longer than any dash-only line in the detail."""
    longest = 0
    for line in detail.splitlines():
        stripped = line.strip()
        if stripped and set(stripped) == {"-"}:
            longest = max(longest, len(stripped))
    return "-" * max(4, longest + 1)


# -----------------------------------------------------------------------
# Reporter
# -----------------------------------------------------------------------
class Reporter:
    """Renders aggregated results into one report artifact."""

    def __init__(self, config: ReportConfig, aggregator: ResultAggregator):
        self.config = config
        self.aggregator = aggregator

    def output_path(self, now: Optional[datetime] = None) -> str:
        """Build the artifact path for the configured format."""
        stem, extension = os.path.splitext(self.config.filename)
        if self.config.include_timestamp:
            stem = f"{stem}-{(now or datetime.now()).strftime('%Y%m%d-%H%M%S')}"
        return os.path.join(self.config.output_dir, stem + (extension or self.config.format.extension))

    def generate(self) -> str:
        """Render the report and write it to disk.

        Returns:
            str: The path of the written artifact.

        Raises:
            ReportError: If the report cannot be rendered or written.
        """
        now = datetime.now()
        content = self.render(now)
        output_path = self.output_path(now)

        try:
            os.makedirs(self.config.output_dir, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise ReportError(f"Failed to write report to {output_path}: {e}") from e

        logger.info(f"[REPORT] {self.config.format.value} report written to {output_path}")
        return output_path

    def render(self, now: Optional[datetime] = None) -> str:
        """Render the report content without writing it.

        Args:
            now: The generation time shown when timestamps are enabled.
        """
        generated_at = None
        if self.config.include_timestamp:
            generated_at = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")

        renderers = {
            ReportFormat.ASCIIDOC: self._render_asciidoc,
            ReportFormat.HTML: self._render_html,
            ReportFormat.JSON: self._render_json,
            ReportFormat.SUMMARY: self._render_summary,
        }
        logger.debug(
            f"[REPORT] Rendering {self.aggregator.total} result(s) as {self.config.format.value}"
        )
        return renderers[self.config.format](generated_at)

    def _sections(self) -> Dict[str, List[CheckResult]]:
        """Results grouped by category, or one untitled section."""
        if self.config.group_by_category:
            return self.aggregator.get_results_by_category()
        return {"": self.aggregator.get_results()}

    # AsciiDoc
    # =====================================================================
    def _render_asciidoc(self, generated_at: Optional[str]) -> str:
        lines: List[str] = [f"= {self.config.title}", ":toc:", ":toclevels: 3", ""]
        if generated_at:
            lines += [f"Generated: {generated_at}", ""]

        lines += ["== Key", "", '[cols="1,3", options="header"]', "|===", "|Value |Description"]
        for key in KEY_ORDER:
            lines += [
                f"|{{set:cellbgcolor:{key.color}}}",
                key.label,
                "|{set:cellbgcolor!}",
                RESULT_KEY_DESCRIPTIONS[key],
            ]
        lines += ["|===", ""]

        lines += ["== Summary", "", '[cols="1,1", options="header"]', "|===", "|Status |Count"]
        for status, count in self.aggregator.count_by_status().items():
            lines.append(f"|{status.value} |{count}")
        lines += [f"|Total |{self.aggregator.total}", "|===", ""]

        lines += ["== Health Check Results", ""]
        for category, results in self._sections().items():
            if category:
                lines += [f"=== {category}", ""]
            for result in results:
                lines += self._asciidoc_item(result)

        return "\n".join(lines) + "\n"

    def _asciidoc_item(self, result: CheckResult) -> List[str]:
        check = self.aggregator.get_check(result.check_id)
        lines = [
            ITEM_START,
            f"{ITEM_SOURCE_PREFIX}{check.id}{ITEM_SOURCE_SUFFIX}",
            f"{ITEM_CATEGORY_PREFIX}{check.category}",
            f"[[{check.id}]]",
            f"==== {check.name}",
            "",
            '[cols="^"]',
            "|===",
            f"|{{set:cellbgcolor:{result.result_key.color}}}",
            result.result_key.label,
            "|===",
            "",
            f"{STATUS_PREFIX}{result.status.value}",
            "",
            f"{MESSAGE_PREFIX}{single_line(result.message)}",
            "",
        ]
        if result.recommendations:
            lines += [RECOMMENDATIONS_HEADER, ""]
            lines += [f"* {single_line(rec)}" for rec in result.recommendations]
            lines.append("")

        if self.config.include_detailed_results:
            lines += [f"*Execution Time:* {result.execution_time}", ""]
            if result.detail:
                delimiter = detail_delimiter(result.detail)
                lines += [".Detail", delimiter, result.detail.rstrip("\n"), delimiter, ""]

        lines += [ITEM_END, ""]
        return lines

    # HTML
    # =====================================================================
    def _render_html(self, generated_at: Optional[str]) -> str:
        env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(["html", "j2"]),
        )
        template = env.get_template("report.html.j2")

        sections = []
        for category, results in self._sections().items():
            sections.append(
                {
                    "category": category,
                    "items": [
                        self._item_context(result) for result in results
                    ],
                }
            )

        return template.render(
            title=self.config.title,
            generated_at=generated_at,
            counts=[
                {"status": status.value, "css": status.name.lower(), "count": count}
                for status, count in self.aggregator.count_by_status().items()
            ],
            total=self.aggregator.total,
            result_keys=[
                {"label": key.label, "color": key.color, "description": RESULT_KEY_DESCRIPTIONS[key]}
                for key in KEY_ORDER
            ],
            sections=sections,
            include_detailed_results=self.config.include_detailed_results,
        )

    def _item_context(self, result: CheckResult) -> Dict[str, Any]:
        check = self.aggregator.get_check(result.check_id)
        return {
            "id": check.id,
            "name": check.name,
            "description": check.description,
            "status": result.status.value,
            "css": result.status.name.lower(),
            "key_label": result.result_key.label,
            "key_color": result.result_key.color,
            "message": result.message,
            "recommendations": result.recommendations,
            "detail": result.detail,
            "execution_time": result.execution_time,
        }

    # JSON
    # =====================================================================
    def _render_json(self, generated_at: Optional[str]) -> str:
        records = []
        for result in self.aggregator.get_results():
            check = self.aggregator.get_check(result.check_id)
            records.append(
                {
                    "check_id": check.id,
                    "check_name": check.name,
                    "description": check.description,
                    "category": check.category,
                    "status": result.status.value,
                    "message": result.message,
                    "result_key": result.result_key.value,
                    "detail": result.detail,
                    "recommendations": list(result.recommendations),
                    "execution_time": result.execution_time,
                    "metadata": dict(result.metadata),
                }
            )

        payload: Dict[str, Any] = {"title": self.config.title}
        if generated_at:
            payload["generated_at"] = generated_at
        payload["results_by_status"] = {
            status.value: count for status, count in self.aggregator.count_by_status().items()
        }
        payload["results"] = records
        return json.dumps(payload, indent=2) + "\n"

    # Summary
    # =====================================================================
    def _paint(self, text: str, color: str) -> str:
        if not self.config.color_output:
            return text
        return f"{color}{text}{Colors.RESET}"

    def _render_summary(self, generated_at: Optional[str]) -> str:
        out = ["=" * 80, self._paint(self.config.title, Colors.BOLD), "=" * 80]
        if generated_at:
            out.append(f"Generated: {generated_at}")

        rows = [
            [self._paint(status.value, Colors.for_status(status)), count]
            for status, count in self.aggregator.count_by_status().items()
        ]
        rows.append(["Total", self.aggregator.total])
        out += ["", tabulate(rows, headers=["Status", "Count"], tablefmt="pretty", colalign=("left", "right"))]

        attention = [
            result
            for result in self.aggregator.get_results()
            if result.status in (Status.CRITICAL, Status.WARNING)
        ]
        attention.sort(key=lambda r: -r.status.severity)
        if attention:
            rows = []
            for result in attention:
                check = self.aggregator.get_check(result.check_id)
                rows.append(
                    [
                        check.name,
                        check.category,
                        self._paint(result.status.value, Colors.for_status(result.status)),
                        single_line(result.message),
                    ]
                )
            out += [
                "",
                "Checks requiring attention:",
                tabulate(
                    rows,
                    headers=["Check", "Category", "Status", "Message"],
                    tablefmt="pretty",
                    colalign=("left", "left", "center", "left"),
                ),
            ]
        else:
            out += ["", self._paint("All checks passed.", Colors.GREEN)]

        return "\n".join(out) + "\n"

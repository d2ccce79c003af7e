"""Tests for report rendering."""

import json
import os
from datetime import datetime

import pytest

from cluster_health_checks.aggregator import ResultAggregator
from cluster_health_checks.check_registry import CheckRegistry
from cluster_health_checks.exceptions import ReportError
from cluster_health_checks.models.report_config import ReportConfig, ReportFormat
from cluster_health_checks.models.run_config import RunConfig
from cluster_health_checks.models.status import Status
from cluster_health_checks.reporter import ITEM_END, ITEM_START, Reporter, detail_delimiter
from cluster_health_checks.runner import Runner
from fakes import FakeCheck


def _timeout_aggregator():
    checks = [
        FakeCheck("a", "Cluster Config", Status.OK, name="Check A"),
        FakeCheck("b", "Networking", Status.WARNING, recommendations=["first", "second"], name="Check B"),
        FakeCheck("c", "Security", Status.OK, delay=2.0, name="Check C"),
    ]
    runner = Runner(CheckRegistry(checks), RunConfig(timeout=0.5))
    runner.run()
    return ResultAggregator.from_runner(runner)


def _static_aggregator(detail=""):
    checks = [
        FakeCheck("a", "Security", Status.OK, name="Check A"),
        FakeCheck("b", "Security", Status.WARNING, recommendations=["Do <this>"], detail=detail, name="Check B"),
        FakeCheck("c", "Storage", Status.CRITICAL, message="Disk & volume failing", name="Check C"),
    ]
    runner = Runner(CheckRegistry(checks), RunConfig())
    runner.run()
    return ResultAggregator.from_runner(runner)


def _config(fmt, tmp_path, **kwargs):
    return ReportConfig(format=fmt, output_dir=str(tmp_path), include_timestamp=False, **kwargs)


def test_asciidoc_has_one_subsection_per_check(tmp_path) -> None:
    content = Reporter(_config(ReportFormat.ASCIIDOC, tmp_path), _timeout_aggregator()).render()

    assert content.count("\n==== ") == 3
    assert content.count(ITEM_START) == 3
    assert content.count(ITEM_END) == 3
    assert "=== Networking" in content
    assert "*Status:* Warning" in content
    assert "* first\n* second" in content
    assert "Check timed out after 0.5s" in content
    assert "{set:cellbgcolor:#FF0000}" in content


def test_asciidoc_ungrouped_has_no_category_headings(tmp_path) -> None:
    content = Reporter(
        _config(ReportFormat.ASCIIDOC, tmp_path, group_by_category=False), _static_aggregator()
    ).render()

    assert "=== Security" not in content
    assert "// ----ITEM CATEGORY: Security" in content


def test_json_records(tmp_path) -> None:
    payload = json.loads(
        Reporter(_config(ReportFormat.JSON, tmp_path), _timeout_aggregator()).render()
    )

    assert len(payload["results"]) == 3
    assert "generated_at" not in payload
    record = {r["check_id"]: r for r in payload["results"]}["c"]
    assert set(record) == {
        "check_id",
        "check_name",
        "description",
        "category",
        "status",
        "message",
        "result_key",
        "detail",
        "recommendations",
        "execution_time",
        "metadata",
    }
    assert record["status"] == "Critical"
    assert "timed out" in record["message"]
    assert payload["results_by_status"] == {"OK": 1, "Warning": 1, "Critical": 1}


def test_html_is_autoescaped(tmp_path) -> None:
    content = Reporter(_config(ReportFormat.HTML, tmp_path), _static_aggregator()).render()

    assert "Disk &amp; volume failing" in content
    assert "Do &lt;this&gt;" in content
    assert 'class="status critical"' in content


def test_summary_lists_problem_checks(tmp_path) -> None:
    content = Reporter(_config(ReportFormat.SUMMARY, tmp_path), _static_aggregator()).render()

    assert "Checks requiring attention:" in content
    assert content.index("Check C") < content.index("Check B")
    assert "\033[" not in content


def test_summary_colors_when_enabled(tmp_path) -> None:
    content = Reporter(
        _config(ReportFormat.SUMMARY, tmp_path, color_output=True), _static_aggregator()
    ).render()
    assert "\033[31m" in content


@pytest.mark.parametrize("fmt", list(ReportFormat))
def test_output_is_idempotent_without_timestamp(fmt, tmp_path) -> None:
    aggregator = _static_aggregator()
    first = Reporter(_config(fmt, tmp_path), aggregator).render()
    second = Reporter(_config(fmt, tmp_path), aggregator).render()
    assert first == second


def test_generate_writes_file(tmp_path) -> None:
    out_dir = tmp_path / "reports"
    path = Reporter(_config(ReportFormat.JSON, out_dir), _static_aggregator()).generate()

    assert path == os.path.join(str(out_dir), "health-check-report.json")
    assert os.path.isfile(path)


def test_timestamped_filename(tmp_path) -> None:
    config = ReportConfig(format=ReportFormat.ASCIIDOC, output_dir=str(tmp_path))
    name = os.path.basename(Reporter(config, _static_aggregator()).generate())

    assert name.startswith("health-check-report-")
    assert name.endswith(".adoc")
    assert len(name) == len("health-check-report-20240101-120000.adoc")


def test_generate_write_failure(tmp_path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    config = _config(ReportFormat.JSON, blocker)

    with pytest.raises(ReportError):
        Reporter(config, _static_aggregator()).generate()


def test_detail_delimiter_outgrows_dash_lines() -> None:
    assert detail_delimiter("plain text") == "----"
    assert detail_delimiter("a\n----\nb\n------\n") == "-------"


def test_json_keeps_detail_without_detailed_results(tmp_path) -> None:
    aggregator = _static_aggregator(detail="long detail")
    payload = json.loads(
        Reporter(
            _config(ReportFormat.JSON, tmp_path, include_detailed_results=False), aggregator
        ).render()
    )

    record = {r["check_id"]: r for r in payload["results"]}["b"]
    assert record["detail"] == "long detail"


def test_timestamp_goes_before_existing_extension(tmp_path) -> None:
    config = ReportConfig(format=ReportFormat.ASCIIDOC, output_dir=str(tmp_path), filename="cluster.adoc")
    reporter = Reporter(config, _static_aggregator())
    now = datetime(2024, 1, 2, 3, 4, 5)

    assert reporter.output_path(now) == os.path.join(str(tmp_path), "cluster-20240102-030405.adoc")
    plain = Reporter(config.model_copy(update={"include_timestamp": False}), _static_aggregator())
    assert plain.output_path(now) == os.path.join(str(tmp_path), "cluster.adoc")

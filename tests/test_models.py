"""Tests for the result and configuration models."""

import pytest
from pydantic import ValidationError

from cluster_health_checks.models.check_base_model import default_result_key
from cluster_health_checks.models.check_category import CheckCategory, category_label
from cluster_health_checks.models.check_result import CheckResult, format_duration
from cluster_health_checks.models.report_config import ReportConfig, ReportFormat
from cluster_health_checks.models.run_config import RunConfig
from cluster_health_checks.models.status import ResultKey, Status
from fakes import FakeCheck


def test_status_severity_order() -> None:
    """Severity ranks NotApplicable lowest and Critical highest."""

    ordered = sorted(Status, key=lambda s: s.severity)
    assert ordered == [
        Status.NOT_APPLICABLE,
        Status.OK,
        Status.UNKNOWN,
        Status.WARNING,
        Status.CRITICAL,
    ]


def test_result_key_labels_and_colors() -> None:
    assert ResultKey.REQUIRED.label == "Changes Required"
    assert ResultKey.RECOMMENDED.label == "Changes Recommended"
    assert ResultKey.NO_CHANGE.color == "#00FF00"
    assert ResultKey.ADVISORY.color == "#80E5FF"


def test_check_result_is_frozen() -> None:
    result = CheckResult(check_id="a", status=Status.OK)
    with pytest.raises(ValidationError):
        result.message = "changed"


def test_with_execution_time_returns_copy() -> None:
    result = CheckResult(check_id="a", status=Status.OK)
    timed = result.with_execution_time(1.2041)

    assert timed.execution_time == "1.204s"
    assert result.execution_time == "0s"


@pytest.mark.parametrize(
    "seconds, expected",
    [(0.25, "250ms"), (1.5, "1.500s"), (75.0, "1m15.000s"), (-1, "0ms")],
)
def test_format_duration(seconds, expected) -> None:
    assert format_duration(seconds) == expected


def test_create_result_defaults() -> None:
    """Message falls back to the description and the key is derived from status."""

    check = FakeCheck("a", status=Status.WARNING)
    result = check.run()

    assert result.check_id == "a"
    assert result.message == "Fake check a"
    assert result.result_key is ResultKey.RECOMMENDED


def test_default_result_key_mapping() -> None:
    assert default_result_key(Status.CRITICAL) is ResultKey.REQUIRED
    assert default_result_key(Status.NOT_APPLICABLE) is ResultKey.NOT_APPLICABLE


def test_category_is_an_open_label() -> None:
    assert category_label(CheckCategory.SECURITY) == "Security"
    assert category_label("Custom Things") == "Custom Things"
    assert category_label("Monitoring") == "Op-Ready"
    assert category_label("Infra") == "Cluster Config"
    assert FakeCheck("a", category=CheckCategory.OP_READY).category == "Op-Ready"


def test_run_config_rejects_negative_timeout() -> None:
    with pytest.raises(ValidationError):
        RunConfig(timeout=-1)


def test_report_format_extensions() -> None:
    assert ReportFormat.ASCIIDOC.extension == ".adoc"
    assert ReportFormat.SUMMARY.extension == ".txt"
    assert ReportConfig().format is ReportFormat.ASCIIDOC

"""Tests for the hc-runner command line."""

import json
import sys

import pytest
from loguru import logger
from typer.testing import CliRunner

from cluster_health_checks import cli
from cluster_health_checks.cluster_accessor import ClusterAccessor
from cluster_health_checks.exceptions import ClusterAccessError
from cluster_health_checks.models.status import Status
from fakes import FakeCheck

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def fake_cluster(monkeypatch):
    checks = [
        FakeCheck("a", "Security", Status.OK, name="Check A"),
        FakeCheck("b", "Networking", Status.WARNING, name="Check B"),
    ]
    monkeypatch.setattr(cli, "build_checks", lambda *args, **kwargs: checks)
    monkeypatch.setattr(ClusterAccessor, "verify_access", lambda self: "tester")
    return checks


def test_run_writes_report(fake_cluster, tmp_path) -> None:
    result = runner.invoke(
        cli.app,
        ["--output-dir", str(tmp_path), "--format", "json", "--no-progress"],
    )

    assert result.exit_code == 0, result.output
    (report,) = list(tmp_path.glob("health-check-report-*.json"))
    payload = json.loads(report.read_text())
    assert [r["check_id"] for r in payload["results"]] == ["a", "b"]
    assert "Check B" in result.output


def test_unknown_category_exits_1(fake_cluster, tmp_path) -> None:
    result = runner.invoke(
        cli.app,
        ["--output-dir", str(tmp_path), "--category", "Storage", "--no-progress"],
    )

    assert result.exit_code == 1
    assert not any(tmp_path.iterdir())
    assert all(check.calls == 0 for check in fake_cluster)


def test_missing_credentials_exits_1(monkeypatch, tmp_path) -> None:
    def refuse(self):
        raise ClusterAccessError("no kubeconfig found")

    monkeypatch.setattr(ClusterAccessor, "verify_access", refuse)
    result = runner.invoke(cli.app, ["--output-dir", str(tmp_path), "--no-progress"])

    assert result.exit_code == 1
    assert not any(tmp_path.iterdir())


def test_bad_format_is_a_usage_error() -> None:
    result = runner.invoke(cli.app, ["--format", "pdf"])
    assert result.exit_code == 2


def test_exec_summary(fake_cluster, tmp_path) -> None:
    report_dir = tmp_path / "run"
    runner.invoke(
        cli.app,
        ["--output-dir", str(report_dir), "--format", "asciidoc", "--no-progress"],
    )
    (report,) = list(report_dir.glob("*.adoc"))

    result = runner.invoke(
        cli.app,
        [
            "exec-summary",
            "--report",
            str(report),
            "--cluster",
            "prod-1",
            "--customer",
            "ACME",
            "--output-dir",
            str(tmp_path / "summary"),
        ],
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "summary" / "070_executive-summary.adoc").is_file()


def test_exec_summary_rejects_bad_report(tmp_path) -> None:
    bogus = tmp_path / "report.adoc"
    bogus.write_text("= Nothing\n")
    result = runner.invoke(
        cli.app,
        ["exec-summary", "--report", str(bogus), "--cluster", "c", "--customer", "c"],
    )
    assert result.exit_code == 1


def test_list_checks() -> None:
    result = runner.invoke(cli.app, ["list-checks"])

    assert result.exit_code == 0
    assert "node-status" in result.output
    assert "emptydir-volumes" in result.output


def test_partially_unknown_category_exits_1(fake_cluster, tmp_path) -> None:
    result = runner.invoke(
        cli.app,
        ["--output-dir", str(tmp_path), "--category", "Security,Bogus", "--no-progress"],
    )

    assert result.exit_code == 1
    assert not any(tmp_path.iterdir())
    assert all(check.calls == 0 for check in fake_cluster)


def test_flags_switch_off_settings_file_defaults(fake_cluster, tmp_path, monkeypatch) -> None:
    settings = tmp_path / "settings.yaml"
    settings.write_text(
        "health_check:\n  defaults:\n    parallel: true\n    fail_fast: true\n    format: json\n"
    )
    seen = {}

    def execute(registry, run_config):
        seen["config"] = run_config
        run = cli.Runner(registry, run_config)
        run.run()
        return run

    monkeypatch.setattr(cli, "execute", execute)
    result = runner.invoke(
        cli.app,
        [
            "--config", str(settings),
            "--output-dir", str(tmp_path / "out"),
            "--sequential",
            "--no-fail-fast",
            "--no-progress",
        ],
    )

    assert result.exit_code == 0, result.output
    assert seen["config"].parallel is False
    assert seen["config"].fail_fast is False
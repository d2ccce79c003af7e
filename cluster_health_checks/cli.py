"""Command line interface for the cluster health check runner."""

import sys
from typing import List, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from tabulate import tabulate

from cluster_health_checks.aggregator import ResultAggregator
from cluster_health_checks.check_registry import CheckRegistry
from cluster_health_checks.checks.provider import build_checks
from cluster_health_checks.cluster_accessor import ClusterAccessor
from cluster_health_checks.config_manager import ConfigManager
from cluster_health_checks.exceptions import HealthCheckError, ReportError
from cluster_health_checks.executive_summary import (
    SummaryFormat,
    executive_summary_path,
    generate_executive_summary,
)
from cluster_health_checks.models.report_config import ReportFormat
from cluster_health_checks.models.run_config import CheckSet, RunConfig
from cluster_health_checks.reporter import Reporter
from cluster_health_checks.runner import Runner, RunState

app = typer.Typer(
    name="hc-runner",
    help="Run health checks against an OpenShift cluster and report the results.",
    add_completion=False,
)
console = Console()


def configure_logging(verbose: bool) -> None:
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG")
    else:
        logger.add(sys.stderr, level="INFO")


def parse_categories(values: Optional[List[str]]) -> List[str]:
    """Flatten repeated and comma-separated --category values."""
    categories: List[str] = []
    for value in values or []:
        for part in value.split(","):
            part = part.strip()
            if part and part not in categories:
                categories.append(part)
    return categories


def execute(registry: CheckRegistry, run_config: RunConfig) -> Runner:
    """Run the registry, with a progress bar when enabled."""
    if not run_config.show_progress:
        runner = Runner(registry, run_config)
        runner.run()
        return runner

    total = len(registry.filter(run_config.categories))
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Running health checks", total=total)

        def advance(check, result) -> None:
            progress.update(task, advance=1, description=f"{check.name}: {result.status.value}")

        runner = Runner(registry, run_config, progress_callback=advance)
        runner.run()
    return runner


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    check: CheckSet = typer.Option(CheckSet.ALL, "--check", help="Check set to run"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", help="Directory for the report"),
    report_format: Optional[ReportFormat] = typer.Option(None, "--format", help="Report format"),
    detailed: Optional[bool] = typer.Option(
        None, "--detailed/--no-detailed", help="Include detail blocks in the report"
    ),
    parallel: Optional[bool] = typer.Option(
        None, "--parallel/--sequential", help="Run checks concurrently or one at a time"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", min=0, help="Per-check timeout in seconds, 0 for none"
    ),
    progress: Optional[bool] = typer.Option(
        None, "--progress/--no-progress", help="Show a progress bar"
    ),
    category: Optional[List[str]] = typer.Option(
        None, "--category", help="Only run these categories (repeatable, comma-separated)"
    ),
    max_workers: Optional[int] = typer.Option(
        None, "--max-workers", min=1, help="Concurrent worker cap in parallel mode"
    ),
    verbose: Optional[bool] = typer.Option(
        None, "--verbose/--quiet", "-v", help="Log every result"
    ),
    fail_fast: Optional[bool] = typer.Option(
        None, "--fail-fast/--no-fail-fast", help="Stop after the first Critical result"
    ),
    config: Optional[str] = typer.Option(None, "--config", help="Settings YAML file"),
    kubeconfig: Optional[str] = typer.Option(None, "--kubeconfig", help="Kubeconfig file"),
) -> None:
    """Run the health checks and write a report."""
    if ctx.invoked_subcommand is not None:
        return

    configure_logging(bool(verbose))

    try:
        config_manager = ConfigManager(config)
        run_config = config_manager.run_config(
            output_dir=output_dir,
            categories=parse_categories(category) or None,
            timeout=timeout,
            parallel=parallel,
            fail_fast=fail_fast,
            verbose=verbose,
            show_progress=progress,
            max_workers=max_workers,
        )
        configure_logging(run_config.verbose)
        report_config = config_manager.report_config(
            format=report_format,
            output_dir=run_config.output_dir,
            include_detailed_results=detailed,
        )

        accessor = ClusterAccessor(kubeconfig)
        registry = CheckRegistry(build_checks(check, accessor, config_manager))
        Runner(registry, run_config).select_checks()
        accessor.verify_access()

        runner = execute(registry, run_config)
    except HealthCheckError as e:
        logger.error(f"Health check failed: {e}")
        raise typer.Exit(1)

    aggregator = ResultAggregator.from_runner(runner)
    terminal_summary = Reporter(
        report_config.model_copy(
            update={
                "format": ReportFormat.SUMMARY,
                "include_timestamp": False,
                "color_output": sys.stdout.isatty(),
            }
        ),
        aggregator,
    ).render()

    try:
        report_path = Reporter(report_config, aggregator).generate()
    except ReportError as e:
        typer.echo(terminal_summary)
        logger.error(f"Report generation failed: {e}")
        raise typer.Exit(1)

    typer.echo(terminal_summary)
    if runner.state is RunState.ABORTED:
        console.print(
            f"[yellow]Run aborted by --fail-fast: {len(runner.skipped)} check(s) not started[/]"
        )
    console.print(f"Report written to [bold]{report_path}[/] in {runner.duration:.2f}s")


@app.command("exec-summary")
def exec_summary(
    report: str = typer.Option(..., "--report", help="AsciiDoc report produced by a run"),
    cluster: str = typer.Option(..., "--cluster", help="Cluster name shown in the summary"),
    customer: str = typer.Option(..., "--customer", help="Customer name shown in the summary"),
    output_dir: str = typer.Option("resources", "--output-dir", help="Directory for the summary"),
    output_format: SummaryFormat = typer.Option(
        SummaryFormat.ASCIIDOC, "--format", help="Summary format"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Score a rendered report and write an executive summary."""
    configure_logging(verbose)

    try:
        summary = generate_executive_summary(
            report, cluster, customer, output_dir, output_format
        )
    except HealthCheckError as e:
        logger.error(f"Executive summary failed: {e}")
        raise typer.Exit(1)

    console.print(
        f"Executive summary generated: [bold]{executive_summary_path(output_dir, output_format)}[/] "
        f"(score: {summary.overall_score:.2f}%)"
    )


@app.command("list-checks")
def list_checks(
    check: CheckSet = typer.Option(CheckSet.ALL, "--check", help="Check set to list"),
) -> None:
    """List the available checks."""
    registry = CheckRegistry(build_checks(check, ClusterAccessor()))
    rows = [[c.id, c.name, c.category, c.description] for c in registry]
    typer.echo(
        tabulate(
            rows,
            headers=["Check ID", "Display Name", "Category", "Description"],
            tablefmt="pretty",
            colalign=("left", "left", "left", "left"),
        )
    )


if __name__ == "__main__":
    app()

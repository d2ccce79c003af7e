"""Runner that executes the selected checks and collects their results.

Checks run either sequentially in registry order or concurrently on a thread
pool. Each check is bounded by the configured timeout; a check that times out
or raises is recorded as a Critical result and the run continues, unless
fail-fast is enabled, in which case no further checks are dispatched.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger

from cluster_health_checks.check_registry import CheckRegistry
from cluster_health_checks.exceptions import (
    CheckError,
    ConfigurationError,
    RunnerStateError,
)
from cluster_health_checks.models.check_base_model import CheckBaseModel
from cluster_health_checks.models.check_category import category_label
from cluster_health_checks.models.check_result import CheckResult
from cluster_health_checks.models.run_config import RunConfig
from cluster_health_checks.models.status import ResultKey, Status

ProgressCallback = Callable[[CheckBaseModel, CheckResult], None]


class RunState(str, Enum):
    """Lifecycle of a run."""

    IDLE = "Idle"
    RUNNING = "Running"
    COMPLETED = "Completed"
    ABORTED = "Aborted"


class Runner:
    """Executes health checks under a RunConfig and collects the results."""

    def __init__(
        self,
        registry: CheckRegistry,
        config: RunConfig,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        """Initialize the runner.

        Args:
            registry: The registry holding every available check.
            config: The run configuration.
            progress_callback: Called with (check, result) after each result is recorded.
        """
        self.registry = registry
        self.config = config
        self.progress_callback = progress_callback
        self.state = RunState.IDLE
        self.duration = 0.0

        self._checks: List[CheckBaseModel] = []
        self._results: List[CheckResult] = []
        self._dispatched: List[CheckBaseModel] = []
        self._errors: Dict[str, Exception] = {}
        self._lock = threading.Lock()
        self._abort = threading.Event()

    # Accessors
    # =====================================================================
    @property
    def checks(self) -> List[CheckBaseModel]:
        """Checks selected for the run after category filtering."""
        return list(self._checks)

    @property
    def dispatched(self) -> List[CheckBaseModel]:
        """Checks that were actually started."""
        with self._lock:
            return list(self._dispatched)

    @property
    def skipped(self) -> List[CheckBaseModel]:
        """Selected checks that were never started because of fail-fast."""
        started = {check.id for check in self.dispatched}
        return [check for check in self._checks if check.id not in started]

    @property
    def results(self) -> List[CheckResult]:
        """Recorded results in completion order."""
        with self._lock:
            return list(self._results)

    @property
    def errors(self) -> Dict[str, Exception]:
        """Diagnostic errors keyed by check ID."""
        with self._lock:
            return dict(self._errors)

    # Execution
    # =====================================================================
    def select_checks(self) -> List[CheckBaseModel]:
        """Apply the category filter.

        Legacy category names are resolved to their current labels first.

        Raises:
            ConfigurationError: If a requested category has no registered
                check, or nothing is registered at all.
        """
        requested = [category_label(c) for c in self.config.categories or []]
        known = self.registry.categories()
        unknown = [c for c in requested if c not in known]
        if unknown:
            raise ConfigurationError(
                f"Unknown categories: {', '.join(unknown)} (available: {', '.join(known) or 'none'})"
            )

        checks = self.registry.filter(requested)
        if not checks:
            raise ConfigurationError("No health checks registered")
        return checks

    def run(self) -> RunState:
        """Execute every selected check once.

        Returns:
            RunState: COMPLETED, or ABORTED when fail-fast stopped the run.

        Raises:
            RunnerStateError: If the runner has already been used.
            ConfigurationError: If no check matches the category filter.
        """
        if self.state is not RunState.IDLE:
            raise RunnerStateError(f"Runner cannot start from state {self.state.value}")

        self._checks = self.select_checks()
        self.state = RunState.RUNNING
        mode = "parallel" if self.config.parallel else "sequential"
        logger.info(f"[RUN] Running {len(self._checks)} check(s) in {mode} mode")
        if self.config.timeout:
            logger.debug(f"[RUN] Per-check timeout: {self.config.timeout:g}s")

        start = time.monotonic()
        try:
            if self.config.parallel:
                self._run_parallel(self._checks)
            else:
                self._run_sequential(self._checks)
        finally:
            self.duration = time.monotonic() - start
            self.state = RunState.ABORTED if self._abort.is_set() else RunState.COMPLETED

        logger.info(
            f"[RUN] {self.state.value}: {len(self._results)} of {len(self._checks)} check(s) executed in {self.duration:.2f}s"
        )
        if self.state is RunState.ABORTED:
            logger.warning(
                f"[RUN] Fail-fast stopped the run, {len(self.skipped)} check(s) not started"
            )
        return self.state

    def _run_sequential(self, checks: List[CheckBaseModel]) -> None:
        """Run checks one at a time in registry order."""
        for check in checks:
            if self._abort.is_set():
                break
            self._dispatch(check)

    def _run_parallel(self, checks: List[CheckBaseModel]) -> None:
        """Run checks concurrently and wait for all of them."""
        workers = self.config.max_workers or len(checks)
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="health-check"
        ) as executor:
            futures = [executor.submit(self._dispatch, check) for check in checks]
            for future in as_completed(futures):
                future.result()

    def _dispatch(self, check: CheckBaseModel) -> None:
        """Run one check unless fail-fast has already triggered."""
        with self._lock:
            if self._abort.is_set():
                return
            self._dispatched.append(check)

        result, error = self._run_check(check)
        self._record(check, result, error)

    def _run_check(
        self, check: CheckBaseModel
    ) -> Tuple[CheckResult, Optional[Exception]]:
        """Execute a single check within the configured timeout.

        The check runs on a daemon thread. When the timeout elapses the runner
        stops waiting; the thread is abandoned, not killed.

        Returns:
            The result to record and the diagnostic error, if any.
        """
        timeout = self.config.timeout or None
        outcome: Dict[str, object] = {}

        def target() -> None:
            try:
                outcome["result"] = check.run()
            except Exception as e:
                outcome["error"] = e

        start = time.monotonic()
        worker = threading.Thread(target=target, name=f"check-{check.id}", daemon=True)
        worker.start()
        worker.join(timeout)
        elapsed = time.monotonic() - start

        if worker.is_alive():
            logger.warning(f"[CHECK] {check.id} timed out after {self.config.timeout:g}s")
            result = CheckResult(
                check_id=check.id,
                status=Status.CRITICAL,
                message=f"Check timed out after {self.config.timeout:g}s",
                result_key=ResultKey.REQUIRED,
            )
            return (
                result.with_execution_time(elapsed),
                TimeoutError(f"{check.id} exceeded {self.config.timeout:g}s"),
            )

        error = outcome.get("error")
        if error is None:
            result = outcome.get("result")
            if isinstance(result, CheckResult):
                if result.check_id != check.id:
                    result = result.model_copy(update={"check_id": check.id})
                return result.with_execution_time(elapsed), None
            error = CheckError(
                f"check returned {type(result).__name__} instead of CheckResult"
            )

        if isinstance(error, CheckError) and isinstance(error.result, CheckResult):
            logger.warning(f"[CHECK] {check.id} reported an error: {error}")
            result = error.result
            if result.check_id != check.id:
                result = result.model_copy(update={"check_id": check.id})
            return result.with_execution_time(elapsed), error

        logger.error(f"[CHECK] {check.id} failed: {error}")
        result = CheckResult(
            check_id=check.id,
            status=Status.CRITICAL,
            message=f"Check failed: {error}",
            result_key=ResultKey.REQUIRED,
        )
        return result.with_execution_time(elapsed), error

    def _record(
        self,
        check: CheckBaseModel,
        result: CheckResult,
        error: Optional[Exception],
    ) -> None:
        """Append a result; the only state shared between worker threads."""
        with self._lock:
            self._results.append(result)
            if error is not None:
                self._errors[check.id] = error
            if self.config.fail_fast and result.status is Status.CRITICAL:
                if not self._abort.is_set():
                    logger.warning(f"[RUN] Fail-fast triggered by {check.id}")
                self._abort.set()

        if self.config.verbose:
            logger.info(f"[CHECK] [{result.status.value}] {check.name}: {result.message}")
        else:
            logger.debug(f"[CHECK] {check.id}: {result.status.value} ({result.execution_time})")

        if self.progress_callback is not None:
            try:
                self.progress_callback(check, result)
            except Exception as e:
                logger.warning(f"[RUN] Progress callback failed for {check.id}: {e}")

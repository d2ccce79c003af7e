"""Exceptions raised by the health check engine."""

from typing import List, Optional


class HealthCheckError(Exception):
    """Base class for all health check errors."""


class ConfigurationError(HealthCheckError):
    """Invalid run, report or settings configuration."""


class DuplicateCheckError(ConfigurationError):
    """A check with the same ID is already registered."""

    def __init__(self, check_id: str):
        super().__init__(f"Check '{check_id}' is already registered")
        self.check_id = check_id


class ClusterAccessError(HealthCheckError):
    """The cluster cannot be reached or no credentials are available."""


class CommandError(ClusterAccessError):
    """A cluster CLI command exited with a non-zero status."""

    def __init__(
        self, command: List[str], returncode: Optional[int], stderr: str = ""
    ):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        super().__init__(
            f"command '{' '.join(command)}' failed (exit {returncode}): {self.stderr}"
        )


class CheckError(HealthCheckError):
    """A check could not complete.

    A check may attach the result it managed to build before failing. The
    runner keeps that result instead of synthesizing one.
    """

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result


class RunnerStateError(HealthCheckError):
    """The runner was used outside its Idle state."""


class ReportError(HealthCheckError):
    """A report could not be rendered or written."""


class ReportParseError(HealthCheckError):
    """A rendered report could not be parsed back."""

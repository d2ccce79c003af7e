"""Run configuration models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class CheckSet(str, Enum):
    """Selectable sets of checks."""

    OPENSHIFT = "openshift"
    APPLICATION = "application"
    ALL = "all"


class RunConfig(BaseModel):
    """Configuration for a single run of the runner."""

    output_dir: str = Field("resources", description="The directory where reports are written")
    categories: List[str] = Field(
        default_factory=list, description="Categories to run, empty means all"
    )
    timeout: float = Field(
        0, ge=0, description="Per-check timeout in seconds, 0 means unbounded"
    )
    parallel: bool = Field(False, description="Run checks concurrently")
    fail_fast: bool = Field(
        False, description="Stop dispatching checks after the first Critical result"
    )
    verbose: bool = Field(False, description="Log every result as it is recorded")
    show_progress: bool = Field(True, description="Display a progress bar")
    max_workers: Optional[int] = Field(
        None, ge=1, description="Concurrent worker cap, None means one per check"
    )

    class Config:
        """Pydantic config."""

        extra = "ignore"
        frozen = True

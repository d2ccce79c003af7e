"""Check result models."""

from typing import Dict, List

from pydantic import BaseModel, Field

from cluster_health_checks.models.status import ResultKey, Status


class CheckResult(BaseModel):
    """Result of a single health check."""

    check_id: str = Field(..., description="The ID of the check that produced the result")
    status: Status = Field(..., description="The severity verdict")
    message: str = Field("", description="A short human summary")
    result_key: ResultKey = Field(
        ResultKey.NO_CHANGE, description="The recommended follow-up class"
    )
    detail: str = Field("", description="Long-form detail, may span several kilobytes")
    recommendations: List[str] = Field(
        default_factory=list, description="Ordered recommendations"
    )
    execution_time: str = Field("0s", description="Wall-clock duration as text")
    metadata: Dict[str, str] = Field(
        default_factory=dict, description="Additional contextual information"
    )

    class Config:
        """Pydantic config."""

        extra = "ignore"
        frozen = True

    def with_execution_time(self, seconds: float) -> "CheckResult":
        """Return a copy of the result carrying the given duration."""
        return self.model_copy(update={"execution_time": format_duration(seconds)})

    def __str__(self) -> str:
        return f"[{self.status.value}] {self.message}"


def format_duration(seconds: float) -> str:
    """Format a duration in seconds the way reports display it."""
    if seconds < 0:
        seconds = 0.0
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.3f}s"
    minutes, rest = divmod(seconds, 60)
    return f"{int(minutes)}m{rest:.3f}s"

"""Report configuration models."""

from enum import Enum

from pydantic import BaseModel, Field


class ReportFormat(str, Enum):
    """Output formats supported by the reporter."""

    ASCIIDOC = "asciidoc"
    HTML = "html"
    JSON = "json"
    SUMMARY = "summary"

    @property
    def extension(self) -> str:
        return {
            ReportFormat.ASCIIDOC: ".adoc",
            ReportFormat.HTML: ".html",
            ReportFormat.JSON: ".json",
            ReportFormat.SUMMARY: ".txt",
        }[self]


class ReportConfig(BaseModel):
    """Configuration for one report generation."""

    format: ReportFormat = Field(ReportFormat.ASCIIDOC, description="The output format")
    output_dir: str = Field("resources", description="The directory where the report is written")
    filename: str = Field("health-check-report", description="The filename stem")
    include_timestamp: bool = Field(
        True, description="Append a timestamp to the filename"
    )
    include_detailed_results: bool = Field(
        True, description="Include detail blocks for every check"
    )
    title: str = Field("OpenShift Health Check Report", description="The report title")
    group_by_category: bool = Field(True, description="Group checks by category")
    color_output: bool = Field(False, description="Use ANSI colours in terminal formats")

    class Config:
        """Pydantic config."""

        extra = "ignore"
        frozen = True

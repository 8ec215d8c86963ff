"""
Argument schemas for the release notes tools.

Field aliases keep the camelCase argument names that tool callers send.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import GroupBy, OutputFormat


class ToolArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TimeRange(ToolArguments):
    since: Optional[str] = Field(None, alias="from", description="ISO-8601 start date (inclusive)")
    until: Optional[str] = Field(None, alias="to", description="ISO-8601 end date (inclusive)")


class CommitRange(ToolArguments):
    from_commit: Optional[str] = Field(None, alias="fromCommit", description="Oldest commit SHA to include")
    to_commit: Optional[str] = Field(None, alias="toCommit", description="Commit SHA or branch to list back from")


class FormatOptions(ToolArguments):
    # Free text so that an unknown encoding is reported as InvalidFormatError
    type: str = Field(
        OutputFormat.MARKDOWN.value,
        description="Output encoding",
        json_schema_extra={"enum": [f.value for f in OutputFormat]},
    )
    group_by: GroupBy = Field(GroupBy.CATEGORY, alias="groupBy")
    include_stats: bool = Field(False, alias="includeStats")
    template: Optional[str] = Field(None, description="Name of a configured template")
    version: Optional[str] = Field(None, description="Version label for the title")


class AnalyzeCommitsArgs(ToolArguments):
    owner: str
    repo: str
    time_range: Optional[TimeRange] = Field(None, alias="timeRange")
    commit_range: Optional[CommitRange] = Field(None, alias="commitRange")


class GenerateNotesArgs(AnalyzeCommitsArgs):
    format: FormatOptions = Field(default_factory=FormatOptions)


class ConfigureTemplateArgs(ToolArguments):
    name: str
    template: str

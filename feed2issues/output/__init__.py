"""Tracker client, submission and run reporting."""

from .github_client import GitHubClient, TrackerError
from .issue_creator import IssueSubmitter, SubmissionResult
from .pipeline_reporter import (
    PipelineError,
    PipelineReport,
    append_step_summary,
    format_issue_numbers,
    write_action_output,
)

__all__ = [
    "GitHubClient",
    "TrackerError",
    "IssueSubmitter",
    "SubmissionResult",
    "PipelineError",
    "PipelineReport",
    "append_step_summary",
    "format_issue_numbers",
    "write_action_output",
]

"""Feed-to-issue synthesis pipeline."""

from .issue_pipeline import PipelineResult, build_issue_requests, run_pipeline

__all__ = ["PipelineResult", "build_issue_requests", "run_pipeline"]

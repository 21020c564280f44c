from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Protocol

from ..models import IssueRequest
from ..utils.logging import get_logger
from .github_client import TrackerError
from .pipeline_reporter import PipelineError


logger = get_logger("f2i.output.issue_creator")


class IssueWriter(Protocol):
    def create_issue(self, request: IssueRequest) -> int: ...


@dataclass(slots=True)
class SubmissionResult:
    created: List[int] = field(default_factory=list)
    errors: List[PipelineError] = field(default_factory=list)


class IssueSubmitter:
    """Submit queued requests in order, one attempt each.

    In dry-run mode the tracker is never called and nothing is reported as
    created.
    """

    def __init__(self, writer: IssueWriter | None, *, dry_run: bool = False) -> None:
        if writer is None and not dry_run:
            raise ValueError("an issue writer is required unless dry_run is set")
        self.writer = writer
        self.dry_run = dry_run

    def submit(self, requests: Iterable[IssueRequest]) -> SubmissionResult:
        result = SubmissionResult()
        for request in requests:
            if self.dry_run:
                logger.info("[DRY-RUN] Would create issue: title=%s labels=%s", request.title, request.labels)
                logger.debug("Creating Issue '%s' with content '%s'", request.title, request.body)
                continue
            try:
                number = self.writer.create_issue(request)
            except TrackerError as exc:
                logger.warning("Fail create issue %s: %s", request.title, exc)
                result.errors.append(PipelineError(stage="submit", subject=request.title, message=str(exc)))
                continue
            result.created.append(number)
        return result

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from ..models import ExistingIssue, FeedEntry, IssueRequest
from ..output.issue_creator import IssueSubmitter, IssueWriter
from ..output.pipeline_reporter import PipelineError, PipelineReport
from ..processors.aggregate import Aggregator, Clock, local_now
from ..processors.dedup import Deduplicator, compose_title
from ..processors.filters import skip_reason
from ..processors.markdown import html_to_markdown
from ..processors.normalize import Converter, NormalizationError, normalize_entry
from ..utils.logging import get_logger
from ..utils.pipeline_config import PipelineConfig


logger = get_logger("f2i.pipeline.issues")


@dataclass(slots=True)
class PipelineResult:
    created: List[int] = field(default_factory=list)
    errors: List[PipelineError] = field(default_factory=list)
    requests: List[IssueRequest] = field(default_factory=list)
    report: PipelineReport = field(default_factory=PipelineReport)


def build_issue_requests(
    entries: Iterable[FeedEntry],
    existing_issues: Iterable[ExistingIssue],
    config: PipelineConfig,
    *,
    converter: Converter = html_to_markdown,
    clock: Clock = local_now,
    report: Optional[PipelineReport] = None,
) -> Tuple[List[IssueRequest], List[PipelineError]]:
    """Turn feed entries into the minimal list of issue requests.

    Entries are handled in feed order: compose the title, skip it when the
    tracker already has that title (or, one issue per entry, when an earlier
    entry of this run queued it), run the filter chain, render the body,
    then queue it or fold it into the aggregate issue. A failure to render
    skips only that entry.
    """
    report = report if report is not None else PipelineReport()
    dedup = Deduplicator(existing_issues)
    aggregator = Aggregator(
        prefix=config.prefix,
        labels=config.labels,
        enabled=config.aggregate,
        clock=clock,
    )
    errors: List[PipelineError] = []
    # Titles queued in this run; the tracker snapshot itself stays unchanged
    queued_titles: Set[str] = set()

    for entry in entries:
        report.entries_seen += 1
        title = compose_title(config.prefix, entry.title)
        logger.debug("Issue '%s'", title)

        duplicate, existing = dedup.is_duplicate(title)
        if duplicate:
            logger.warning("Issue already exists: %s (%s)", title, existing)
            report.duplicates_skipped += 1
            continue
        if not config.aggregate and title in queued_titles:
            logger.warning("Issue already exists: %s (queued earlier in this run)", title)
            report.duplicates_skipped += 1
            continue

        reason = skip_reason(entry, config)
        if reason is not None:
            logger.debug("No issue created for '%s' due to %s", entry.title, reason)
            report.filtered += 1
            continue

        try:
            body = normalize_entry(entry, config, converter=converter)
        except NormalizationError as exc:
            logger.error("%s (entry '%s')", exc, entry.title)
            errors.append(PipelineError(stage="normalize", subject=title, message=str(exc)))
            report.failed_entries += 1
            continue

        aggregator.add(title, body)
        queued_titles.add(title)

    requests = aggregator.requests
    report.requests_queued = len(requests)
    return requests, errors


def run_pipeline(
    entries: Iterable[FeedEntry],
    existing_issues: Iterable[ExistingIssue],
    config: PipelineConfig,
    *,
    tracker: Optional[IssueWriter] = None,
    converter: Converter = html_to_markdown,
    clock: Clock = local_now,
) -> PipelineResult:
    """Build the issue requests and submit them (or log them in dry-run).

    Returns the created issue numbers in submission order together with
    every recoverable error met on the way.
    """
    report = PipelineReport(dry_run=config.dry_run)
    requests, errors = build_issue_requests(
        entries,
        existing_issues,
        config,
        converter=converter,
        clock=clock,
        report=report,
    )

    submission = IssueSubmitter(tracker, dry_run=config.dry_run).submit(requests)
    report.issues_created = len(submission.created)
    report.submission_errors = len(submission.errors)

    logger.info(
        "Pipeline finished: entries=%s, duplicates=%s, filtered=%s, failed=%s, queued=%s, created=%s, submission_errors=%s",
        report.entries_seen,
        report.duplicates_skipped,
        report.filtered,
        report.failed_entries,
        report.requests_queued,
        report.issues_created,
        report.submission_errors,
    )
    return PipelineResult(
        created=submission.created,
        errors=errors + submission.errors,
        requests=requests,
        report=report,
    )

"""Processing stages: filters, deduplication, normalization, aggregation."""

from .aggregate import Aggregator, AggregatorState, format_rfc822
from .dedup import Deduplicator, compose_title, issue_exists
from .filters import Match, drop_stale_entries, should_skip, skip_reason
from .markdown import ConversionError, html_to_markdown
from .normalize import (
    NormalizationError,
    normalize_content,
    normalize_entry,
    render_issue_body,
    truncate_markdown,
)

__all__ = [
    "Aggregator",
    "AggregatorState",
    "format_rfc822",
    "Deduplicator",
    "compose_title",
    "issue_exists",
    "Match",
    "drop_stale_entries",
    "should_skip",
    "skip_reason",
    "ConversionError",
    "html_to_markdown",
    "NormalizationError",
    "normalize_content",
    "normalize_entry",
    "render_issue_body",
    "truncate_markdown",
]

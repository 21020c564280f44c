"""Entry filters: publish-time cutoff and the title/content filter chain.

Each filter is a pure predicate over ``(entry, config)`` answering with a
:class:`Match`. A pattern that does not compile yields
``Match.INDETERMINATE``, which the chain treats like ``Match.NO``.
"""

from __future__ import annotations

import enum
import re
from datetime import datetime
from functools import lru_cache
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..models import FeedEntry
from ..utils.logging import get_logger
from ..utils.pipeline_config import PipelineConfig

logger = get_logger("f2i.processors.filters")


class Match(enum.Enum):
    YES = "yes"
    NO = "no"
    INDETERMINATE = "indeterminate"

    @property
    def matched(self) -> bool:
        return self is Match.YES


@lru_cache(maxsize=32)
def _compile(pattern: str) -> Optional[re.Pattern]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        logger.warning("Ignoring invalid filter pattern %r: %s", pattern, exc)
        return None


def search(pattern: str, text: str) -> Match:
    compiled = _compile(pattern)
    if compiled is None:
        return Match.INDETERMINATE
    return Match.YES if compiled.search(text) else Match.NO


def title_excluded(entry: FeedEntry, config: PipelineConfig) -> bool:
    if not config.title_exclude_filter:
        return False
    return search(config.title_exclude_filter, entry.title).matched


def title_not_included(entry: FeedEntry, config: PipelineConfig) -> bool:
    if not config.title_include_filter:
        return False
    result = search(config.title_include_filter, entry.title)
    logger.debug("title inclusion filter result for '%s': %s", entry.title, result.value)
    return not result.matched


def content_excluded(entry: FeedEntry, config: PipelineConfig) -> bool:
    if not config.content_exclude_filter:
        return False
    return search(config.content_exclude_filter, entry.html).matched


Predicate = Callable[[FeedEntry, PipelineConfig], bool]

FILTER_CHAIN: Tuple[Tuple[str, Predicate], ...] = (
    ("title filter", title_excluded),
    ("title inclusion filter", title_not_included),
    ("content filter", content_excluded),
)


def skip_reason(
    entry: FeedEntry,
    config: PipelineConfig,
    chain: Sequence[Tuple[str, Predicate]] = FILTER_CHAIN,
) -> Optional[str]:
    """Name of the first filter that rejects ``entry``, or ``None``."""
    for reason, predicate in chain:
        if predicate(entry, config):
            return reason
    return None


def should_skip(entry: FeedEntry, config: PipelineConfig) -> bool:
    return skip_reason(entry, config) is not None


def drop_stale_entries(entries: Iterable[FeedEntry], cutoff: Optional[datetime]) -> List[FeedEntry]:
    """Keep entries published strictly after ``cutoff``.

    Entries without a publish date are always kept.
    """
    kept: List[FeedEntry] = []
    for entry in entries:
        if entry.published is None:
            logger.info("Entry '%s' has no publish date, skipping cutoff", entry.title)
            kept.append(entry)
            continue
        if cutoff is None or entry.published > cutoff:
            kept.append(entry)
        else:
            logger.debug("Dropping entry '%s' published %s before cutoff", entry.title, entry.published)
    return kept

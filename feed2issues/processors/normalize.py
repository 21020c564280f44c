from __future__ import annotations

from typing import Callable, Optional

from ..models import FeedEntry
from ..utils.logging import get_logger
from ..utils.pipeline_config import PipelineConfig
from .markdown import html_to_markdown

_logger = get_logger("f2i.processors.normalize")

ELLIPSIS = "…"
TRUNCATION_NOTICE = (
    "\n\n---\n## Would you like to know more?\n"
    "Read the full article on the following website:"
)

Converter = Callable[[str], str]


class NormalizationError(Exception):
    """Raised when an entry cannot be turned into an issue body."""


def truncate_markdown(markdown: str, character_limit: Optional[int]) -> str:
    """Cut ``markdown`` to ``character_limit`` characters and append the notice.

    The cut is positional: no snapping to word or line boundaries. A missing,
    zero or negative limit leaves the text untouched.
    """
    if not character_limit or character_limit <= 0:
        return markdown
    if len(markdown) <= character_limit:
        return markdown
    return markdown[:character_limit] + ELLIPSIS + TRUNCATION_NOTICE


def render_issue_body(content: str, link: str) -> str:
    """Lay out the issue body: optional content block, then optional link."""
    content_block = f"\n{content}\n" if content else ""
    link_block = f"\n\n<{link}>\n" if link else ""
    return f"\n{content_block}\n{link_block}\n"


def normalize_content(
    raw_content: str,
    raw_description: str,
    character_limit: Optional[int],
    *,
    converter: Converter = html_to_markdown,
) -> str:
    """Convert entry HTML to markdown and apply the character limit.

    ``raw_description`` is used when ``raw_content`` is empty. Converter
    errors propagate to the caller.
    """
    markdown = converter(raw_content or raw_description)
    return truncate_markdown(markdown, character_limit)


def normalize_entry(
    entry: FeedEntry,
    config: PipelineConfig,
    *,
    converter: Converter = html_to_markdown,
) -> str:
    """Produce the rendered issue body for ``entry``.

    Raises :class:`NormalizationError` when the entry has to be skipped.
    """
    if config.invalid_character_limit is not None:
        raise NormalizationError(
            f"fail to convert 'characterLimit': {config.invalid_character_limit!r} is not an integer"
        )
    try:
        markdown = normalize_content(
            entry.content,
            entry.description,
            config.character_limit,
            converter=converter,
        )
    except Exception as exc:  # noqa: BLE001 - any converter failure skips the entry
        raise NormalizationError(f"Fail to convert HTML to markdown: {exc}") from exc
    body = render_issue_body(markdown, entry.link)
    _logger.debug("Rendered body for '%s' (%d chars)", entry.title, len(body))
    return body

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

import feedparser
import requests

from ..models import FeedEntry
from ..utils.logging import get_logger

logger = get_logger("f2i.fetchers.rss")


class FeedFetchError(Exception):
    """Raised when the feed cannot be downloaded or parsed."""


@dataclass(slots=True)
class Feed:
    title: str
    entries: List[FeedEntry] = field(default_factory=list)


_DEFAULT_HEADERS = {
    "User-Agent": "feed2issues/0.1 (+https://github.com)",
    "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8",
}


def _parse_datetime(entry: dict) -> Optional[datetime]:
    # feedparser normalizes dates to UTC struct_time in '*_parsed' keys
    for key in ("published_parsed", "updated_parsed"):
        tm = entry.get(key)
        if tm:
            try:
                return datetime(*tm[:6], tzinfo=timezone.utc)
            except (TypeError, ValueError):
                return None
    return None


def _entry_content(entry: dict) -> str:
    contents = entry.get("content")
    if contents and isinstance(contents, list):
        return contents[0].get("value") or ""
    return ""


def parse_feed(document: bytes | str, *, source: str = "<feed>") -> Feed:
    """Parse an RSS/Atom document into a :class:`Feed`.

    feedparser flags malformed documents with ``bozo`` but often still
    recovers entries; only a document with neither entries nor a feed
    title is rejected.
    """
    parsed = feedparser.parse(document)
    entries_raw = getattr(parsed, "entries", []) or []
    feed_title = (parsed.feed.get("title") if getattr(parsed, "feed", None) else None) or ""

    if getattr(parsed, "bozo", False):
        exc = getattr(parsed, "bozo_exception", None)
        if not entries_raw and not feed_title:
            raise FeedFetchError(f"Cannot parse feed '{source}': {exc}")
        logger.debug("Feed 'bozo' flagged for %s: %s", source, exc)

    entries: List[FeedEntry] = []
    for entry in entries_raw:
        entries.append(
            FeedEntry(
                title=entry.get("title") or "",
                link=entry.get("link") or "",
                content=_entry_content(entry),
                description=entry.get("summary") or "",
                published=_parse_datetime(entry),
            )
        )
    return Feed(title=feed_title, entries=entries)


def fetch_feed(url: str, *, timeout: int = 30) -> Feed:
    """Download and parse the feed at ``url``.

    The request goes through ``requests`` for consistent headers and
    timeouts; ``feedparser`` handles the various feed formats.
    """
    logger.debug("Fetching feed from %s", url)
    try:
        resp = requests.get(url, headers=_DEFAULT_HEADERS, timeout=timeout)
        if resp.status_code >= 400:
            logger.warning("Feed fetch failed (%s): %s", resp.status_code, url)
            resp.raise_for_status()
    except requests.RequestException as exc:
        raise FeedFetchError(f"Cannot fetch feed '{url}': {exc}") from exc

    feed = parse_feed(resp.content, source=url)
    logger.info("Fetched %d entries from '%s'", len(feed.entries), feed.title or url)
    return feed

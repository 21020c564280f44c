from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class FeedEntry:
    """One item parsed from the syndication feed.

    ``content`` and ``description`` hold raw HTML; ``published`` is a
    timezone-aware UTC datetime when the feed provides one.
    """

    title: str
    link: str
    content: str = ""
    description: str = ""
    published: Optional[datetime] = None

    @property
    def html(self) -> str:
        return self.content or self.description

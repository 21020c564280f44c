from __future__ import annotations

from typing import Iterable, Optional, Tuple

from ..models import ExistingIssue


def compose_title(prefix: str, title: str) -> str:
    """Issue title for a feed entry.

    Always joined with a single space, so an empty prefix leaves a leading
    space; existing issues created that way keep matching.
    """
    return " ".join([prefix, title])


class Deduplicator:
    """Detect entries that already have an issue on the tracker.

    Matching is exact on the composed title, against the snapshot of issues
    listed once at the start of the run. Issues created during the run are
    not added to the snapshot.
    """

    def __init__(self, existing_issues: Iterable[ExistingIssue]) -> None:
        self._by_title = {}
        for issue in existing_issues:
            self._by_title.setdefault(issue.title, issue)

    def exists(self, title: str) -> bool:
        return title in self._by_title

    def find(self, title: str) -> Optional[ExistingIssue]:
        return self._by_title.get(title)

    def is_duplicate(self, title: str) -> Tuple[bool, Optional[str]]:
        issue = self.find(title)
        if issue is None:
            return False, None
        return True, f"issue #{issue.number} ({issue.state})"


def issue_exists(title: str, existing_issues: Iterable[ExistingIssue]) -> bool:
    return any(issue.title == title for issue in existing_issues)

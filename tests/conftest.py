"""Shared pytest fixtures for feed2issues tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

import pytest

from feed2issues.models import FeedEntry, IssueRequest
from feed2issues.output.github_client import TrackerError

FIXED_NOW = datetime(2026, 10, 19, 14, 5, tzinfo=timezone.utc)


class FakeTracker:
    """Records create_issue calls and hands out sequential numbers."""

    def __init__(self, *, start: int = 100, fail_titles: tuple = ()) -> None:
        self.next_number = start
        self.fail_titles = set(fail_titles)
        self.created: List[IssueRequest] = []
        self.calls = 0

    def create_issue(self, request: IssueRequest) -> int:
        self.calls += 1
        if request.title in self.fail_titles:
            raise TrackerError("422 Validation Failed")
        self.created.append(request)
        number = self.next_number
        self.next_number += 1
        return number


@pytest.fixture
def tracker() -> FakeTracker:
    return FakeTracker()


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def make_entry():
    def _make(
        title: str = "Hello",
        *,
        link: str = "https://example.com/hello",
        content: str = "<p>Hello world</p>",
        description: str = "",
        published: datetime | None = None,
    ) -> FeedEntry:
        return FeedEntry(
            title=title,
            link=link,
            content=content,
            description=description,
            published=published,
        )

    return _make

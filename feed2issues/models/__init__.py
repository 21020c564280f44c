"""Typed models used across the application."""

from .entry import FeedEntry
from .issue import ExistingIssue, IssueRequest

__all__ = ["FeedEntry", "ExistingIssue", "IssueRequest"]

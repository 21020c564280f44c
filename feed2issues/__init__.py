"""Top-level package for feed2issues.

Turns the entries of a syndication feed into GitHub issues: stale, duplicate
and filtered entries are skipped, the rest are converted to markdown and
submitted one issue per entry or folded into a single aggregate issue.
"""

__all__ = []

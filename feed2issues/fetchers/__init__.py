"""Feed fetching layer."""

from .rss import Feed, FeedFetchError, fetch_feed, parse_feed

__all__ = ["Feed", "FeedFetchError", "fetch_feed", "parse_feed"]

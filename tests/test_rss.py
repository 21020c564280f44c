from datetime import datetime, timezone

import pytest
import requests

from feed2issues.fetchers import rss
from feed2issues.fetchers.rss import FeedFetchError, fetch_feed, parse_feed

RSS_DOC = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Example Blog</title>
    <link>https://example.com</link>
    <description>Posts</description>
    <item>
      <title>First post</title>
      <link>https://example.com/first</link>
      <description>&lt;p&gt;Summary&lt;/p&gt;</description>
      <content:encoded><![CDATA[<p>Full <b>content</b></p>]]></content:encoded>
      <pubDate>Sat, 17 Oct 2026 10:30:00 +0200</pubDate>
    </item>
    <item>
      <title>Undated</title>
      <link>https://example.com/undated</link>
      <description>&lt;p&gt;Only a summary&lt;/p&gt;</description>
    </item>
  </channel>
</rss>
"""

ATOM_DOC = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example Atom</title>
  <id>urn:example</id>
  <updated>2026-10-18T09:00:00Z</updated>
  <entry>
    <title>Atom entry</title>
    <id>urn:example:1</id>
    <link href="https://example.com/atom-1"/>
    <updated>2026-10-18T09:00:00Z</updated>
    <summary>Short</summary>
  </entry>
</feed>
"""


class _Response:
    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self.content = content
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


def test_parse_rss_entries_in_feed_order():
    feed = parse_feed(RSS_DOC)
    assert feed.title == "Example Blog"
    first, undated = feed.entries
    assert first.title == "First post"
    assert first.link == "https://example.com/first"
    assert first.content == "<p>Full <b>content</b></p>"
    assert first.description == "<p>Summary</p>"
    assert first.published == datetime(2026, 10, 17, 8, 30, tzinfo=timezone.utc)
    assert undated.published is None
    assert undated.content == ""
    assert undated.html == "<p>Only a summary</p>"


def test_parse_atom_uses_updated_date():
    feed = parse_feed(ATOM_DOC)
    (entry,) = feed.entries
    assert entry.link == "https://example.com/atom-1"
    assert entry.published == datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


def test_parse_rejects_non_feed_document():
    with pytest.raises(FeedFetchError):
        parse_feed(b"this is not xml at all <<<")


def test_fetch_feed(monkeypatch):
    calls = {}

    def fake_get(url, headers=None, timeout=None):
        calls["url"] = url
        calls["timeout"] = timeout
        return _Response(RSS_DOC)

    monkeypatch.setattr(rss.requests, "get", fake_get)
    feed = fetch_feed("https://example.com/feed.xml", timeout=5)
    assert calls == {"url": "https://example.com/feed.xml", "timeout": 5}
    assert len(feed.entries) == 2


def test_fetch_feed_http_error(monkeypatch):
    monkeypatch.setattr(rss.requests, "get", lambda *a, **kw: _Response(b"", status_code=404))
    with pytest.raises(FeedFetchError, match="404"):
        fetch_feed("https://example.com/missing.xml")


def test_fetch_feed_network_error(monkeypatch):
    def fail(*_args, **_kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(rss.requests, "get", fail)
    with pytest.raises(FeedFetchError, match="connection refused"):
        fetch_feed("https://example.com/feed.xml")

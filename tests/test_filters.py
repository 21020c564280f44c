from datetime import timedelta

from feed2issues.processors.filters import (
    Match,
    drop_stale_entries,
    search,
    should_skip,
    skip_reason,
)
from feed2issues.utils.pipeline_config import PipelineConfig

from conftest import FIXED_NOW


def test_search_is_unanchored():
    assert search("beta", "alpha beta gamma") is Match.YES
    assert search("^beta", "alpha beta") is Match.NO


def test_malformed_pattern_is_indeterminate():
    assert search("([unclosed", "anything") is Match.INDETERMINATE


def test_no_filters_keeps_entry(make_entry):
    assert skip_reason(make_entry(), PipelineConfig()) is None


def test_title_exclude_filter(make_entry):
    config = PipelineConfig(title_exclude_filter="(?i)sponsored")
    assert skip_reason(make_entry("Sponsored: buy now"), config) == "title filter"
    assert not should_skip(make_entry("Release 1.2"), config)


def test_title_include_filter(make_entry):
    config = PipelineConfig(title_include_filter="Release")
    assert skip_reason(make_entry("Weekly digest"), config) == "title inclusion filter"
    assert not should_skip(make_entry("Release 1.2"), config)


def test_content_filter_uses_raw_html(make_entry):
    config = PipelineConfig(content_exclude_filter="<iframe")
    assert skip_reason(make_entry(content='<p>x</p><iframe src="ad">'), config) == "content filter"


def test_content_filter_falls_back_to_description(make_entry):
    config = PipelineConfig(content_exclude_filter="webinar")
    entry = make_entry(content="", description="<p>Join our webinar</p>")
    assert should_skip(entry, config)


def test_exclude_wins_over_include(make_entry):
    config = PipelineConfig(title_include_filter="Release", content_exclude_filter="beta")
    entry = make_entry("Release 2.0", content="<p>beta build</p>")
    assert skip_reason(entry, config) == "content filter"


def test_title_exclude_checked_before_include(make_entry):
    config = PipelineConfig(title_exclude_filter="draft", title_include_filter="nomatch")
    assert skip_reason(make_entry("draft notes"), config) == "title filter"


def test_malformed_exclude_filter_never_skips(make_entry):
    config = PipelineConfig(title_exclude_filter="(", content_exclude_filter="[")
    assert not should_skip(make_entry(), config)


def test_malformed_include_filter_skips_everything(make_entry):
    config = PipelineConfig(title_include_filter="(")
    assert skip_reason(make_entry(), config) == "title inclusion filter"


def test_cutoff_drops_old_entries(make_entry):
    cutoff = FIXED_NOW - timedelta(hours=24)
    old = make_entry("old", published=FIXED_NOW - timedelta(hours=48))
    new = make_entry("new", published=FIXED_NOW - timedelta(hours=1))
    undated = make_entry("undated")
    kept = drop_stale_entries([old, new, undated], cutoff)
    assert [e.title for e in kept] == ["new", "undated"]


def test_cutoff_is_exclusive(make_entry):
    cutoff = FIXED_NOW - timedelta(hours=24)
    assert drop_stale_entries([make_entry(published=cutoff)], cutoff) == []


def test_no_cutoff_keeps_everything(make_entry):
    entries = [make_entry(published=FIXED_NOW - timedelta(days=3650)), make_entry()]
    assert drop_stale_entries(entries, None) == entries

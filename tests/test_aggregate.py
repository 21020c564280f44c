import pytest

from feed2issues.processors.aggregate import Aggregator, AggregatorState, format_rfc822

from conftest import FIXED_NOW


def test_disabled_queues_one_request_per_entry():
    agg = Aggregator(prefix="[RSS]", labels=["feed"], enabled=False)
    agg.add("[RSS] a", "A")
    agg.add("[RSS] b", "B")
    assert [(r.title, r.body) for r in agg.requests] == [("[RSS] a", "A"), ("[RSS] b", "B")]
    assert agg.state is AggregatorState.IDLE


def test_first_entry_creates_accumulator(clock):
    agg = Aggregator(prefix="[RSS]", enabled=True, clock=clock)
    agg.add("[RSS] a", "A")
    assert agg.state is AggregatorState.ACCUMULATING
    assert [(r.title, r.body) for r in agg.requests] == [("[RSS] a", "A")]


def test_following_entries_fold_into_accumulator(clock):
    agg = Aggregator(prefix="[RSS]", labels=["feed"], enabled=True, clock=clock)
    agg.add("[RSS] a", "A")
    agg.add("[RSS] b", "B")
    agg.add("[RSS] c", "C")
    (request,) = agg.requests
    assert request.title == "[RSS] 19 Oct 26 14:05 UTC"
    assert request.body == "A\n\nB\n\nC"
    assert request.labels == ["feed"]


def test_fold_requires_accumulator(clock):
    agg = Aggregator(enabled=True, clock=clock)
    with pytest.raises(RuntimeError):
        agg.fold("x")


def test_rfc822_format():
    assert format_rfc822(FIXED_NOW) == "19 Oct 26 14:05 UTC"


def test_requests_do_not_share_label_lists():
    agg = Aggregator(labels=["a"], enabled=False)
    first = agg.add("x", "1")
    second = agg.add("y", "2")
    first.labels.append("b")
    assert second.labels == ["a"]

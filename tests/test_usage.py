import re

import pytest

from mcphost.usage import ModelCost, ModelInfo, ModelLimit, UsageTracker

_ANSI = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def plain(text):
    return _ANSI.sub("", text)


def sonnet(context=0):
    return ModelInfo(
        id="claude-3-5-sonnet-20241022",
        name="Claude 3.5 Sonnet v2",
        cost=ModelCost(input=3.0, output=15.0),
        limit=ModelLimit(context=context, output=8192 if context else 0),
    )


def test_oauth_costs():
    regular = UsageTracker(sonnet(), "anthropic", 80, False)
    regular.update_usage(1000, 500, 0, 0)
    stats = regular.last_request_stats()
    assert stats is not None
    assert stats.input_cost == 0.003
    assert stats.output_cost == 0.0075
    assert stats.total_cost == pytest.approx(0.0105)

    oauth = UsageTracker(sonnet(), "anthropic", 80, True)
    oauth.update_usage(1000, 500, 0, 0)
    o = oauth.last_request_stats()
    assert o is not None
    assert o.input_cost == 0.0
    assert o.output_cost == 0.0
    assert o.total_cost == 0.0
    assert o.input_tokens == 1000
    assert o.output_tokens == 500


def test_oauth_session_stats():
    oauth = UsageTracker(sonnet(), "anthropic", 80, True)
    oauth.update_usage(1000, 500, 0, 0)
    oauth.update_usage(2000, 1000, 0, 0)
    s = oauth.session_stats()
    assert s.total_input_tokens == 3000
    assert s.total_output_tokens == 1500
    assert s.total_cost == 0.0
    assert s.request_count == 2


def test_render_usage_info_oauth_and_regular():
    oauth = UsageTracker(sonnet(200000), "anthropic", 80, True)
    oauth.update_usage(1500, 500, 0, 0)
    rendered = plain(oauth.render_usage_info())
    assert "Tokens: 2.0K" in rendered
    assert "(1%)" in rendered
    assert "Cost: $0.00" in rendered

    regular = UsageTracker(sonnet(200000), "anthropic", 80, False)
    regular.update_usage(1500, 500, 0, 0)
    rr = plain(regular.render_usage_info())
    assert "Tokens: 2.0K" in rr
    assert "Cost: $0.00" not in rr
    assert "Cost: $0.0120" in rr


def test_render_empty_before_any_request():
    assert UsageTracker(sonnet(), "anthropic").render_usage_info() == ""


def test_render_without_context_limit_has_no_percentage():
    t = UsageTracker(sonnet(), "anthropic")
    t.update_usage(10, 5)
    rendered = plain(t.render_usage_info())
    assert rendered == "Tokens: 15 | Cost: $0.0001\n"


def test_render_millions():
    t = UsageTracker(sonnet(), "anthropic", 80, True)
    t.update_usage(1_000_000, 500_000)
    assert "Tokens: 1.5M" in plain(t.render_usage_info())


def test_cache_costs_counted_only_when_priced():
    info = ModelInfo(cost=ModelCost(input=0.0, output=0.0, cache_read=2.0))
    t = UsageTracker(info, "p")
    t.update_usage(0, 0, 1_000_000, 1_000_000)
    stats = t.last_request_stats()
    assert stats.cache_read_cost == 2.0
    assert stats.cache_write_cost == 0.0
    assert stats.total_cost == 2.0
    assert t.session_stats().total_cache_write_tokens == 1_000_000


def test_estimate_and_update_usage():
    t = UsageTracker(sonnet(), "anthropic", 80, True)
    t.estimate_and_update_usage("a" * 400, "b" * 41)
    stats = t.last_request_stats()
    assert (stats.input_tokens, stats.output_tokens) == (100, 10)


def test_reset_clears_stats():
    t = UsageTracker(sonnet(), "anthropic")
    t.update_usage(10, 10)
    t.reset()
    assert t.last_request_stats() is None
    assert t.session_stats().request_count == 0
    assert t.render_usage_info() == ""


def test_returned_stats_are_copies():
    t = UsageTracker(sonnet(), "anthropic")
    t.update_usage(10, 10)
    t.session_stats().request_count = 99
    t.last_request_stats().input_tokens = 99
    assert t.session_stats().request_count == 1
    assert t.last_request_stats().input_tokens == 10


def test_set_width():
    t = UsageTracker(sonnet(), "anthropic", 80)
    t.set_width(120)
    assert t.width == 120
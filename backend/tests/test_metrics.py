"""
tests/test_metrics.py
──────────────────────
Unit tests for the headline arithmetic and projection helpers.
"""

import pytest

from analytics.metrics import (
    delta_pct,
    format_change,
    headline,
    neutral_headline,
    safe_ratio,
    trend_for,
)
from analytics.projections import (
    WEEKDAY_PROFILE,
    bucket_by_field,
    child_count_scatter,
    classify_fixed,
    first_name,
    group_by_owner,
    text_length,
    weighted_series,
)


class TestArithmetic:
    def test_safe_ratio_zero_denominator(self) -> None:
        assert safe_ratio(5, 0) == 0.0
        assert safe_ratio(10, 5) == 2.0

    def test_delta_zero_baseline(self) -> None:
        assert delta_pct(42, 0) == 0.0

    @pytest.mark.parametrize(
        "delta, trend, change",
        [
            (11.111, "up", "+11.1%"),
            (-2.0, "down", "-2.0%"),
            (0.04, "neutral", "0.0%"),
            (-0.04, "neutral", "0.0%"),
            (0.0, "neutral", "0.0%"),
        ],
    )
    def test_trend_and_change_use_rounded_delta(self, delta, trend, change) -> None:
        assert trend_for(delta) == trend
        assert format_change(delta) == change

    def test_headline_formats_value(self) -> None:
        card = headline("btc_usd", "Bitcoin (USD)", 54000.0, 60000, fmt="${:,.0f}")
        assert card.display == "$54,000"
        assert card.trend == "down"
        assert card.change == "-10.0%"
        assert card.delta_pct == -10.0

    def test_neutral_headline(self) -> None:
        card = neutral_headline("btc_usd", "Bitcoin (USD)", 60000)
        assert card.value is None
        assert card.baseline == 60000.0
        assert (card.trend, card.change, card.delta_pct) == ("neutral", "0.0%", 0.0)


class TestProjectionHelpers:
    def test_weighted_series_zero_count(self) -> None:
        points = weighted_series(0, WEEKDAY_PROFILE)
        assert len(points) == 7
        assert all(p.value == 0 for p in points)

    def test_weighted_series_floors(self) -> None:
        points = weighted_series(3, (("a", 0.5), ("b", 1.0)))
        assert [p.value for p in points] == [1, 3]

    def test_weighted_series_empty_profile(self) -> None:
        assert weighted_series(10, ()) == []

    def test_first_name_falls_back_to_id(self) -> None:
        assert first_name({"id": 7, "name": "Ada Lovelace"}) == "Ada"
        assert first_name({"id": 7}) == "7"

    def test_group_by_owner_includes_empty_owners(self) -> None:
        owners = [{"id": 1, "name": "Ada"}, {"id": 2, "name": "Alan"}]
        buckets = group_by_owner([{"userId": 1}, {"userId": 1}], owners, foreign_key="userId")
        assert [(b.name, b.value) for b in buckets] == [("Ada", 2.0), ("Alan", 0.0)]

    def test_group_by_owner_limit(self) -> None:
        owners = [{"id": i, "name": f"U{i}"} for i in range(1, 11)]
        assert len(group_by_owner([], owners, foreign_key="userId", limit=8)) == 8

    def test_bucket_by_field_first_seen_order(self) -> None:
        records = [{"k": "b"}, {"k": "a"}, {"k": "b"}]
        buckets = bucket_by_field(records, name_of=lambda r: r["k"])
        assert [(b.name, b.value) for b in buckets] == [("b", 2.0), ("a", 1.0)]

    def test_bucket_by_field_empty(self) -> None:
        assert bucket_by_field([], name_of=lambda r: r["k"]) == []

    def test_classify_fixed_emits_every_category(self) -> None:
        buckets = classify_fixed([{"userId": 1}, {"userId": 4}], ("A", "B", "C"), key="userId")
        assert [(b.name, b.value) for b in buckets] == [("A", 2.0), ("B", 0.0), ("C", 0.0)]

    def test_classify_fixed_without_categories(self) -> None:
        assert classify_fixed([{"userId": 1}], (), key="userId") == []

    def test_scatter_cap_and_counts(self) -> None:
        posts = [{"id": 1, "body": "abc"}, {"id": 2, "body": "abcdef"}]
        comments = [{"postId": 2}, {"postId": 2}]
        points = child_count_scatter(
            posts, comments, child_key="postId", size_of=text_length("body"), max_points=5
        )
        assert [(p.name, p.x, p.y) for p in points] == [("Post 1", 3.0, 0.0), ("Post 2", 6.0, 2.0)]
        assert child_count_scatter(
            posts, comments, child_key="postId", size_of=text_length("body"), max_points=0
        ) == []

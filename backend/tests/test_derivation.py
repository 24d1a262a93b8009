"""
tests/test_derivation.py
─────────────────────────
Metric derivation: headline cards, chart projections and the missing-data
policy of ``derive``.
"""

import math
from datetime import datetime, timezone

import pytest

from analytics.definitions import DashboardDefinition, ListingDefinition, MetricDefinition
from analytics.derivation import derive
from analytics.projections import MONTHLY_PROFILE, TIME_RANGE_PROFILES
from core.errors import DerivationError, MissingRequiredSource
from sources.models import Failure, FailureReason, Source, Success

FIXED_NOW = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)


def _outcomes(dashboard, payloads, failures=None):
    failures = failures or {}
    return {
        s.source_id: (
            Failure(s.source_id, failures[s.source_id])
            if s.source_id in failures
            else Success(s.source_id, payloads[s.source_id])
        )
        for s in dashboard.sources
    }


def _derive(dashboard, outcomes, time_range="7d", max_points=20):
    return derive(
        dashboard, outcomes, time_range=time_range, as_of=FIXED_NOW, max_points=max_points
    )


# ── Headline metrics ──────────────────────────────────────────────────────────


class TestHeadlineMetrics:
    def test_posts_per_user_against_baseline(self, dashboards, payloads) -> None:
        """10 posts / 5 users = 2.0 against a baseline of 1.8."""
        analytics = dashboards["analytics"]
        result = _derive(analytics, _outcomes(analytics, payloads))
        card = result.metrics["posts_per_user"]
        assert card.value == 2.0
        assert card.display == "2.0"
        assert card.trend == "up"
        assert card.change == "+11.1%"
        assert card.delta_pct == 11.11

    def test_analytics_cards_in_declared_order(self, dashboards, payloads) -> None:
        analytics = dashboards["analytics"]
        result = _derive(analytics, _outcomes(analytics, payloads))
        assert list(result.metrics) == [
            "comments_per_post",
            "posts_per_user",
            "engagement_rate",
            "content_volume",
            "btc_usd",
        ]
        assert result.metrics["comments_per_post"].display == "5.5"
        assert result.metrics["engagement_rate"].display == "110.00%"
        assert result.metrics["content_volume"].display == "20"
        assert result.metrics["content_volume"].trend == "down"
        assert result.metrics["btc_usd"].display == "$65,000"
        assert result.metrics["btc_usd"].change == "+8.3%"

    def test_overview_cards(self, dashboards, payloads) -> None:
        overview = dashboards["overview"]
        result = _derive(overview, _outcomes(overview, payloads))
        assert result.metrics["total_posts"].display == "10"
        assert result.metrics["active_users"].value == 5.0
        assert result.metrics["london_temp_c"].display == "16.5°C"
        assert result.metrics["london_temp_c"].change == "+10.0%"


# ── Missing data policy ───────────────────────────────────────────────────────


class TestMissingData:
    def test_required_source_unreachable_raises(self, dashboards, payloads) -> None:
        analytics = dashboards["analytics"]
        outcomes = _outcomes(analytics, payloads, {"posts": FailureReason.unreachable()})
        with pytest.raises(MissingRequiredSource) as exc_info:
            _derive(analytics, outcomes)
        assert exc_info.value.source_ids == ["posts"]
        assert "posts" in str(exc_info.value)

    def test_absent_required_outcome_raises(self, dashboards, payloads) -> None:
        analytics = dashboards["analytics"]
        outcomes = _outcomes(analytics, payloads)
        del outcomes["users"]
        with pytest.raises(MissingRequiredSource):
            _derive(analytics, outcomes)

    def test_optional_crypto_500_degrades_to_neutral(self, dashboards, payloads) -> None:
        analytics = dashboards["analytics"]
        outcomes = _outcomes(analytics, payloads, {"crypto": FailureReason.http_error(500)})
        result = _derive(analytics, outcomes)

        assert result.categorical["btc_rates"].buckets == ()
        card = result.metrics["btc_usd"]
        assert card.value is None
        assert card.display == "—"
        assert card.trend == "neutral"
        assert card.change == "0.0%"
        # Everything that does not read crypto is unaffected.
        assert result.metrics["posts_per_user"].value == 2.0
        assert len(result.categorical["quote_tags"].buckets) == 3

    def test_optional_weather_unreachable(self, dashboards, payloads) -> None:
        overview = dashboards["overview"]
        outcomes = _outcomes(overview, payloads, {"weather": FailureReason.unreachable()})
        result = _derive(overview, outcomes)
        assert result.metrics["london_temp_c"].value is None
        assert result.metrics["total_posts"].value == 10.0


# ── Projections ───────────────────────────────────────────────────────────────


class TestProjections:
    @pytest.mark.parametrize("time_range", ["7d", "30d", "90d"])
    def test_weekly_activity_follows_time_range(self, dashboards, payloads, time_range) -> None:
        analytics = dashboards["analytics"]
        result = _derive(analytics, _outcomes(analytics, payloads), time_range=time_range)
        points = result.time_series["weekly_activity"].points
        profile = TIME_RANGE_PROFILES[time_range]
        assert [p.label for p in points] == [label for label, _ in profile]
        assert [p.value for p in points] == [math.floor(10 * w) for _, w in profile]
        assert result.time_range == time_range

    def test_seven_day_labels(self, dashboards, payloads) -> None:
        analytics = dashboards["analytics"]
        result = _derive(analytics, _outcomes(analytics, payloads))
        labels = [p.label for p in result.time_series["weekly_activity"].points]
        assert labels == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

    def test_monthly_trend_ignores_time_range(self, dashboards, payloads) -> None:
        overview = dashboards["overview"]
        result = _derive(overview, _outcomes(overview, payloads), time_range="90d")
        labels = [p.label for p in result.time_series["monthly_trend"].points]
        assert labels == [label for label, _ in MONTHLY_PROFILE]

    def test_unknown_time_range_raises(self, dashboards, payloads) -> None:
        analytics = dashboards["analytics"]
        with pytest.raises(DerivationError):
            _derive(analytics, _outcomes(analytics, payloads), time_range="1y")

    def test_categorical_buckets(self, dashboards, payloads) -> None:
        analytics = dashboards["analytics"]
        result = _derive(analytics, _outcomes(analytics, payloads))

        activity = result.categorical["user_activity"].buckets
        assert [b.name for b in activity] == [
            "Leanne",
            "Ervin",
            "Clementine",
            "Patricia",
            "Chelsey",
        ]
        assert all(b.value == 2.0 for b in activity)

        categories = result.categorical["category_distribution"].buckets
        assert [b.name for b in categories] == [
            "Technology",
            "Business",
            "Design",
            "Marketing",
            "Content",
        ]

        tags = result.categorical["quote_tags"].buckets
        assert [(b.name, b.value) for b in tags] == [
            ("wisdom", 2.0),
            ("untagged", 1.0),
            ("famous-quotes", 1.0),
        ]

        rates = result.categorical["btc_rates"].buckets
        assert [(b.name, b.value) for b in rates] == [
            ("USD", 65000.0),
            ("GBP", 51000.0),
            ("EUR", 60000.0),
        ]

    def test_correlation_pairs_length_with_comments(self, dashboards, payloads) -> None:
        analytics = dashboards["analytics"]
        result = _derive(analytics, _outcomes(analytics, payloads))
        points = result.correlation["engagement_vs_length"].points
        assert len(points) == 10
        assert (points[0].name, points[0].x, points[0].y) == ("Post 1", 10.0, 1.0)
        assert (points[9].name, points[9].x, points[9].y) == ("Post 10", 100.0, 10.0)

    def test_correlation_capped_at_max_points(self, dashboards, payloads) -> None:
        analytics = dashboards["analytics"]
        result = _derive(analytics, _outcomes(analytics, payloads), max_points=3)
        assert len(result.correlation["engagement_vs_length"].points) == 3

    def test_overview_lists_recent_post_titles(self, dashboards, payloads) -> None:
        overview = dashboards["overview"]
        result = _derive(overview, _outcomes(overview, payloads))
        recent = result.listings["recent_posts"]
        assert recent.title == "Recent Activity"
        assert (recent.total, recent.unit) == (10, "posts")
        assert [(i.id, i.title) for i in recent.items] == [
            (n, f"post {n}") for n in range(1, 6)
        ]

    def test_analytics_has_no_listings(self, dashboards, payloads) -> None:
        analytics = dashboards["analytics"]
        assert _derive(analytics, _outcomes(analytics, payloads)).listings == {}


# ── Purity ────────────────────────────────────────────────────────────────────


class TestDeterminism:
    def test_same_inputs_same_result(self, dashboards, payloads) -> None:
        analytics = dashboards["analytics"]
        outcomes = _outcomes(analytics, payloads)
        assert _derive(analytics, outcomes) == _derive(analytics, outcomes)

    def test_generated_at_is_supplied_timestamp(self, dashboards, payloads) -> None:
        overview = dashboards["overview"]
        assert _derive(overview, _outcomes(overview, payloads)).generated_at == FIXED_NOW

    def test_failing_metric_raises_derivation_error(self) -> None:
        source = Source("posts", "https://api.test/posts")
        broken = DashboardDefinition(
            name="broken",
            title="Broken",
            sources=(source,),
            metrics=(
                MetricDefinition("ratio", "Ratio", ("posts",), lambda posts: 1 / len(posts), 1.0),
            ),
        )
        with pytest.raises(DerivationError, match="ratio"):
            _derive(broken, {"posts": Success("posts", [])})


class TestDashboardDefinition:
    def test_undeclared_input_rejected(self) -> None:
        with pytest.raises(ValueError, match="undeclared"):
            DashboardDefinition(
                name="bad",
                title="Bad",
                sources=(Source("posts", "https://api.test/posts"),),
                metrics=(MetricDefinition("n", "N", ("users",), len, 1.0),),
            )

    def test_duplicate_source_rejected(self) -> None:
        source = Source("posts", "https://api.test/posts")
        with pytest.raises(ValueError, match="duplicate"):
            DashboardDefinition(name="bad", title="Bad", sources=(source, source))

    def test_listing_reading_undeclared_source_rejected(self) -> None:
        with pytest.raises(ValueError, match="recent"):
            DashboardDefinition(
                name="bad",
                title="Bad",
                sources=(Source("users", "https://api.test/users"),),
                listings=(ListingDefinition("recent", "Recent", ("posts",), unit="posts"),),
            )

"""
analytics/dashboards.py
───────────────────────
The two dashboard screens and the metric / projection definitions they
are made of.

overview   Posts, users and comments (required) plus the London weather
           reading (optional).  Monthly trend, posts per user, category mix
           and the five most recent post titles.
analytics  Posts, users, comments and albums (required) plus the Bitcoin
           price index and the quotes feed (optional).  Weekly activity,
           user activity, category mix, quote tags, BTC rates and the
           engagement-vs-length scatter.

Baselines are fixed reference values; a card's trend is its delta
against the baseline, not against a previous refresh.
"""

from functools import lru_cache
from typing import Dict, Mapping

from analytics.definitions import (
    CategoricalDefinition,
    CorrelationDefinition,
    DashboardDefinition,
    ListingDefinition,
    MetricDefinition,
    TimeSeriesDefinition,
)
from analytics.metrics import safe_ratio
from analytics.projections import (
    MONTHLY_PROFILE,
    bucket_by_field,
    child_count_scatter,
    classify_fixed,
    group_by_owner,
    text_length,
)
from sources.catalog import (
    ALBUMS,
    COMMENTS,
    CRYPTO,
    POSTS,
    QUOTES,
    USERS,
    WEATHER,
    get_catalog,
)
from sources.models import Source

CONTENT_CATEGORIES = ("Technology", "Business", "Design", "Marketing", "Content")
OVERVIEW_CATEGORIES = ("Technology", "Business", "Design", "Marketing", "Other")


# ── headline metrics ──────────────────────────────────────────────────────────


def _count(records) -> float:
    return float(len(records))


def _usd_rate(rates) -> float:
    for entry in rates:
        if entry["code"] == "USD":
            return entry["rate"]
    raise ValueError("no USD rate in price index")


TOTAL_POSTS = MetricDefinition(
    "total_posts", "Total Posts", (POSTS,), _count, baseline=89, fmt="{:.0f}"
)
ACTIVE_USERS = MetricDefinition(
    "active_users", "Active Users", (USERS,), _count, baseline=9, fmt="{:.0f}"
)
COMMENTS_PER_POST = MetricDefinition(
    "comments_per_post",
    "Content Engagement",
    (COMMENTS, POSTS),
    lambda comments, posts: safe_ratio(len(comments), len(posts)),
    baseline=4.5,
)
POSTS_PER_USER = MetricDefinition(
    "posts_per_user",
    "Posts per User",
    (POSTS, USERS),
    lambda posts, users: safe_ratio(len(posts), len(users)),
    baseline=1.8,
)
ENGAGEMENT_RATE = MetricDefinition(
    "engagement_rate",
    "Engagement Rate",
    (COMMENTS, POSTS, USERS),
    lambda comments, posts, users: safe_ratio(len(comments), len(posts) * len(users)) * 100,
    baseline=51.0,
    fmt="{:.2f}%",
)
CONTENT_VOLUME = MetricDefinition(
    "content_volume",
    "Content Volume",
    (POSTS, ALBUMS),
    lambda posts, albums: float(len(posts) + len(albums)),
    baseline=174,
    fmt="{:.0f}",
)
BTC_PRICE = MetricDefinition(
    "btc_usd", "Bitcoin (USD)", (CRYPTO,), _usd_rate, baseline=60000, fmt="${:,.0f}"
)
LONDON_TEMPERATURE = MetricDefinition(
    "london_temp_c",
    "London Temperature",
    (WEATHER,),
    lambda weather: weather["temp_c"],
    baseline=15.0,
    fmt="{:.1f}°C",
)


# ── projections ───────────────────────────────────────────────────────────────


WEEKLY_ACTIVITY = TimeSeriesDefinition(
    "weekly_activity", "Weekly Activity Trend", (POSTS,), len
)
MONTHLY_TREND = TimeSeriesDefinition(
    "monthly_trend", "Monthly Trend", (POSTS,), len, profile=MONTHLY_PROFILE
)

USER_ACTIVITY = CategoricalDefinition(
    "user_activity",
    "User Activity Distribution",
    (POSTS, USERS),
    lambda ctx, posts, users: group_by_owner(posts, users, foreign_key="userId"),
)
TOP_POSTERS = CategoricalDefinition(
    "user_posts",
    "Posts per User",
    (POSTS, USERS),
    lambda ctx, posts, users: group_by_owner(posts, users, foreign_key="userId", limit=8),
)
CATEGORY_DISTRIBUTION = CategoricalDefinition(
    "category_distribution",
    "Category Distribution",
    (POSTS,),
    lambda ctx, posts: classify_fixed(posts, CONTENT_CATEGORIES, key="userId"),
)
OVERVIEW_CATEGORY_DISTRIBUTION = CategoricalDefinition(
    "category_distribution",
    "Category Distribution",
    (POSTS,),
    lambda ctx, posts: classify_fixed(posts, OVERVIEW_CATEGORIES, key="userId"),
)
QUOTE_TAGS = CategoricalDefinition(
    "quote_tags",
    "Quote Topics",
    (QUOTES,),
    lambda ctx, quotes: bucket_by_field(
        quotes, name_of=lambda q: q["tags"][0] if q["tags"] else "untagged"
    ),
)
BTC_RATES = CategoricalDefinition(
    "btc_rates",
    "Bitcoin Price by Currency",
    (CRYPTO,),
    lambda ctx, rates: bucket_by_field(
        rates, name_of=lambda r: r["code"], value_of=lambda r: r["rate"]
    ),
)

ENGAGEMENT_VS_LENGTH = CorrelationDefinition(
    "engagement_vs_length",
    "Engagement vs Post Length",
    x_label="Post length (characters)",
    y_label="Comments",
    inputs=(POSTS, COMMENTS),
    build=lambda ctx, posts, comments: child_count_scatter(
        posts,
        comments,
        child_key="postId",
        size_of=text_length("body"),
        max_points=ctx.max_points,
    ),
)


RECENT_POSTS = ListingDefinition(
    "recent_posts", "Recent Activity", (POSTS,), unit="posts", limit=5
)


# ── screens ───────────────────────────────────────────────────────────────────


def build_dashboards(catalog: Mapping[str, Source]) -> Dict[str, DashboardDefinition]:
    """
    Assemble every dashboard from a source catalogue.

    Args:
        catalog: ``{source_id: Source}`` (see ``sources.catalog``).

    Returns:
        ``{name: DashboardDefinition}`` in sidebar order.
    """
    overview = DashboardDefinition(
        name="overview",
        title="Dashboard Overview",
        description="Live data from the JSONPlaceholder API.",
        sources=(catalog[POSTS], catalog[USERS], catalog[COMMENTS], catalog[WEATHER]),
        metrics=(TOTAL_POSTS, ACTIVE_USERS, COMMENTS_PER_POST, LONDON_TEMPERATURE),
        time_series=(MONTHLY_TREND,),
        categorical=(TOP_POSTERS, OVERVIEW_CATEGORY_DISTRIBUTION),
        listings=(RECENT_POSTS,),
    )
    analytics = DashboardDefinition(
        name="analytics",
        title="Advanced Analytics",
        description="Live data from JSONPlaceholder, CoinDesk and Quotable.",
        sources=(
            catalog[POSTS],
            catalog[USERS],
            catalog[COMMENTS],
            catalog[ALBUMS],
            catalog[CRYPTO],
            catalog[QUOTES],
        ),
        metrics=(
            COMMENTS_PER_POST,
            POSTS_PER_USER,
            ENGAGEMENT_RATE,
            CONTENT_VOLUME,
            BTC_PRICE,
        ),
        time_series=(WEEKLY_ACTIVITY,),
        categorical=(USER_ACTIVITY, CATEGORY_DISTRIBUTION, QUOTE_TAGS, BTC_RATES),
        correlation=(ENGAGEMENT_VS_LENGTH,),
    )
    return {d.name: d for d in (overview, analytics)}


@lru_cache(maxsize=1)
def get_dashboards() -> Dict[str, DashboardDefinition]:
    """Return the process-wide dashboard definitions."""
    return build_dashboards(get_catalog())

"""
analytics/projections.py
────────────────────────
Chart projections derived from fetched record collections.

- Time series:   one point per label of a fixed, ordered profile; each
                 value is ``floor(count * weight)``.
- Categorical:   records grouped into named buckets, keeping the order in
                 which categories first appear (or a fixed category list).
- Correlation:   ``(x, y)`` pairs of two per-record measures, capped at a
                 maximum number of points.
- Listings:      the first few records of a feed, e.g. the latest posts.

No randomness and no wall-clock reads: every projection is a pure
function of its inputs so results are reproducible.
"""

from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

import numpy as np
import pandas as pd

from schemas.results import CategoryBucket, ListItem, ScatterPoint, TimeSeriesPoint

Record = Mapping[str, Any]
Profile = Tuple[Tuple[str, float], ...]

# ── Time-series profiles ──────────────────────────────────────────────────────
# Relative activity weight per period label.  The 7-day profile peaks mid-week.

WEEKDAY_PROFILE: Profile = (
    ("Mon", 0.8),
    ("Tue", 0.9),
    ("Wed", 1.2),
    ("Thu", 1.1),
    ("Fri", 0.95),
    ("Sat", 0.7),
    ("Sun", 0.6),
)

MONTHLY_PROFILE: Profile = (
    ("Jan", 0.8),
    ("Feb", 0.9),
    ("Mar", 0.85),
    ("Apr", 1.1),
    ("May", 0.95),
    ("Jun", 1.0),
)

TIME_RANGE_PROFILES: Dict[str, Profile] = {
    "7d": WEEKDAY_PROFILE,
    "30d": (("Week 1", 0.85), ("Week 2", 1.0), ("Week 3", 1.15), ("Week 4", 0.95)),
    "90d": (("Month 1", 0.9), ("Month 2", 1.05), ("Month 3", 1.1)),
}


def weighted_series(count: int, profile: Profile) -> List[TimeSeriesPoint]:
    """
    Spread an aggregate ``count`` over the labels of ``profile``.

    Args:
        count:   Aggregate record count.
        profile: Ordered ``(label, weight)`` pairs.

    Returns:
        One point per label, in profile order.
    """
    if not profile:
        return []
    weights = np.array([w for _, w in profile], dtype=float)
    values = np.floor(count * weights).astype(int).tolist()
    return [TimeSeriesPoint(label=label, value=v) for (label, _), v in zip(profile, values)]


# ── Categorical ───────────────────────────────────────────────────────────────


def _key_counts(records: Sequence[Record], key: str) -> pd.Series:
    """Occurrences of each value of ``key`` across ``records``."""
    return pd.Series([r[key] for r in records], dtype="object").value_counts()


def first_name(record: Record) -> str:
    """``"Leanne Graham"`` → ``"Leanne"``."""
    name = str(record.get("name", "")).strip()
    return name.split(" ")[0] if name else str(record.get("id", "?"))


def group_by_owner(
    records: Sequence[Record],
    owners: Sequence[Record],
    foreign_key: str,
    owner_key: str = "id",
    label: Callable[[Record], str] = first_name,
    limit: int = 0,
) -> List[CategoryBucket]:
    """
    Count ``records`` per owning record (e.g. posts per user).

    Buckets follow the order of ``owners``; owners without records get a
    zero bucket.  ``limit > 0`` keeps only the first ``limit`` owners.
    """
    counts = _key_counts(records, foreign_key)
    selected = owners[:limit] if limit > 0 else owners
    return [
        CategoryBucket(name=label(owner), value=float(counts.get(owner[owner_key], 0)))
        for owner in selected
    ]


def bucket_by_field(
    records: Sequence[Record],
    name_of: Callable[[Record], str],
    value_of: Callable[[Record], float] = lambda r: 1.0,
) -> List[CategoryBucket]:
    """
    Sum ``value_of(record)`` per ``name_of(record)``, in first-seen order.

    With the default ``value_of`` the bucket value is a record count.
    """
    if not records:
        return []
    frame = pd.DataFrame(
        {
            "name": [str(name_of(r)) for r in records],
            "value": [float(value_of(r)) for r in records],
        }
    )
    totals = frame.groupby("name", sort=False)["value"].sum()
    return [CategoryBucket(name=name, value=float(v)) for name, v in totals.items()]


def classify_fixed(
    records: Sequence[Record],
    categories: Sequence[str],
    key: str,
) -> List[CategoryBucket]:
    """
    Bucket records into a fixed category list by a stable rule:
    ``categories[(record[key] - 1) mod len(categories)]``.

    Every category is emitted, in list order, even when empty.
    """
    n = len(categories)
    if n == 0:
        return []
    counts = dict.fromkeys(categories, 0)
    for r in records:
        counts[categories[(int(r[key]) - 1) % n]] += 1
    return [CategoryBucket(name=name, value=float(v)) for name, v in counts.items()]


# ── Correlation ───────────────────────────────────────────────────────────────


def text_length(field: str) -> Callable[[Record], float]:
    """Size measure: character length of ``record[field]``."""

    def measure(record: Record) -> float:
        return float(len(str(record.get(field, ""))))

    return measure


def child_count_scatter(
    records: Sequence[Record],
    children: Sequence[Record],
    child_key: str,
    size_of: Callable[[Record], float],
    max_points: int,
    name_prefix: str = "Post",
    record_key: str = "id",
) -> List[ScatterPoint]:
    """
    Pair a size measure (x) with the number of child records (y).

    Args:
        records:     Parent records, e.g. posts.
        children:    Child records, e.g. comments.
        child_key:   Field on a child referencing its parent (``postId``).
        size_of:     Per-parent size measure.
        max_points:  Only the first ``max_points`` parents are plotted.
        name_prefix: Point label prefix (``"Post 1"``).
        record_key:  Parent identifier field.

    Returns:
        At most ``max_points`` scatter points in parent order.
    """
    counts = _key_counts(children, child_key)
    return [
        ScatterPoint(
            name=f"{name_prefix} {r[record_key]}",
            x=size_of(r),
            y=float(counts.get(r[record_key], 0)),
        )
        for r in records[: max(max_points, 0)]
    ]


# ── Listings ──────────────────────────────────────────────────────────────────


def recent_items(
    records: Sequence[Record],
    limit: int,
    label_field: str = "title",
    record_key: str = "id",
) -> List[ListItem]:
    """The first ``limit`` records as ``{id, title}`` rows, in feed order."""
    return [
        ListItem(id=r[record_key], title=str(r[label_field]))
        for r in records[: max(limit, 0)]
    ]

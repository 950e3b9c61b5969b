"""Feed ranking strategies.

Ranking is a pure function of the posts, the strategy and the current
instant. The instant comes from an injected clock so callers (and tests)
control it; nothing is cached between calls.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Protocol, TypeVar

from edloop.core.settings import settings
from edloop.db.time import as_utc, utcnow

SECONDS_PER_HOUR = 3600.0

Clock = Callable[[], datetime]


class RankablePost(Protocol):
    """Minimal projection of a post needed for ranking."""

    upvotes: int
    downvotes: int
    created_at: datetime


P = TypeVar("P", bound=RankablePost)


class SortStrategy(str, enum.Enum):
    """Feed orderings selectable through the ``sort`` query parameter."""

    NEW = "new"
    TOP = "top"
    HOT = "hot"


DEFAULT_STRATEGY = SortStrategy.HOT


def system_clock() -> datetime:
    """Return the current UTC instant."""
    return utcnow()


def parse_strategy(value: str | SortStrategy | None) -> SortStrategy:
    """Return the strategy named by ``value``, falling back to ``hot``."""
    if value is None:
        return DEFAULT_STRATEGY
    try:
        return SortStrategy(str(value).strip().lower())
    except ValueError:
        return DEFAULT_STRATEGY


def net_score(post: RankablePost) -> int:
    """Return ``upvotes - downvotes``."""
    return post.upvotes - post.downvotes


def age_hours(created_at: datetime, now: datetime) -> float:
    """Return fractional hours elapsed since ``created_at``, never negative."""
    elapsed = (as_utc(now) - as_utc(created_at)).total_seconds() / SECONDS_PER_HOUR
    return max(elapsed, 0.0)


def hot_score(
    post: RankablePost,
    now: datetime,
    *,
    gravity: float | None = None,
    age_offset_hours: float | None = None,
) -> float:
    """Return the time-decayed score ``score / (age_hours + 2) ** 1.8``.

    ``gravity`` and ``age_offset_hours`` default to the configured
    ``HOT_GRAVITY`` and ``HOT_AGE_OFFSET_HOURS`` (1.8 and 2).
    """
    gravity = settings.hot_gravity if gravity is None else gravity
    offset = settings.hot_age_offset_hours if age_offset_hours is None else age_offset_hours
    return net_score(post) / (age_hours(post.created_at, now) + offset) ** gravity


def rank(
    posts: Iterable[P],
    strategy: str | SortStrategy | None = None,
    clock: Clock = system_clock,
) -> list[P]:
    """Return ``posts`` ordered by ``strategy``.

    Python's sort is stable with ``reverse=True`` too, so posts with equal
    keys keep their input order.
    """
    chosen = parse_strategy(strategy)
    items = list(posts)

    if chosen is SortStrategy.NEW:
        return sorted(items, key=lambda p: as_utc(p.created_at), reverse=True)
    if chosen is SortStrategy.TOP:
        return sorted(items, key=net_score, reverse=True)

    now = clock()
    return sorted(items, key=lambda p: hot_score(p, now), reverse=True)

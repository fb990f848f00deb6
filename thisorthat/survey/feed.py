"""Feed filtering, search and ordering for surveys."""

from __future__ import annotations

import datetime
from collections.abc import Iterable
from typing import Any

from thisorthat.core.constants import (
    FEED_ALL,
    FEED_TOURNAMENT,
    FEED_TRENDING,
    SURVEY_TYPE_TOURNAMENT,
    TRENDING_ENGAGEMENT_WEIGHT,
    TRENDING_VOTE_WEIGHT,
    VISIBILITY_PRIVATE,
    VISIBILITY_PUBLIC,
)

from .models import Survey

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def as_datetime(value: Any) -> datetime.datetime:
    """Coerce a stored timestamp into an aware datetime.

    Firestore returns datetimes; older documents may hold ISO strings.
    Anything unreadable sorts as the epoch.
    """
    if isinstance(value, datetime.datetime):
        result = value
    elif isinstance(value, str):
        try:
            result = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return _EPOCH
    else:
        return _EPOCH
    if result.tzinfo is None:
        result = result.replace(tzinfo=datetime.timezone.utc)
    return result


def visible_to(
    surveys: Iterable[Survey], user_id: str, accessed_ids: Iterable[str] = ()
) -> list[Survey]:
    """Keep public surveys, the user's own, and private ones they unlocked."""
    accessed = set(accessed_ids)
    visible = []
    for s in surveys:
        if s.get("visibility") == VISIBILITY_PUBLIC:
            visible.append(s)
        elif s.get("creatorId") == user_id:
            visible.append(s)
        elif s.get("visibility") == VISIBILITY_PRIVATE and s.get("id") in accessed:
            visible.append(s)
    return visible


def filter_category(surveys: Iterable[Survey], category: str | None) -> list[Survey]:
    """Filter by feed tab: all, trending, tournament, or a survey category."""
    if not category or category in (FEED_ALL, FEED_TRENDING):
        return list(surveys)
    if category == FEED_TOURNAMENT:
        return [s for s in surveys if s.get("surveyType") == SURVEY_TYPE_TOURNAMENT]
    return [s for s in surveys if s.get("category") == category]


def search(surveys: Iterable[Survey], query: str | None) -> list[Survey]:
    """Case-insensitive title search."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(surveys)
    return [s for s in surveys if needle in (s.get("title") or "").lower()]


def trending_score(survey: Survey, now: datetime.datetime) -> float:
    """Votes and engagement, decayed by age in days."""
    age_hours = (now - as_datetime(survey.get("createdAt"))).total_seconds() / 3600
    engagement = (survey.get("commentCount") or 0) + (survey.get("reactionCount") or 0)
    score = (survey.get("responses") or 0) * TRENDING_VOTE_WEIGHT
    score += engagement * TRENDING_ENGAGEMENT_WEIGHT
    return score / max(1.0, age_hours / 24)


def sort_feed(
    surveys: Iterable[Survey], category: str | None, now: datetime.datetime
) -> list[Survey]:
    """Trending tab sorts by score; otherwise open surveys first, newest first."""
    surveys = list(surveys)
    if category == FEED_TRENDING:
        return sorted(surveys, key=lambda s: trending_score(s, now), reverse=True)
    newest_first = sorted(
        surveys, key=lambda s: as_datetime(s.get("createdAt")), reverse=True
    )
    # sorted() is stable, so newest-first order holds within each group.
    return sorted(newest_first, key=lambda s: bool(s.get("isExpired")))


def build_feed(  # noqa: PLR0913
    surveys: Iterable[Survey],
    user_id: str,
    accessed_ids: Iterable[str] = (),
    category: str | None = FEED_ALL,
    query: str | None = None,
    now: datetime.datetime | None = None,
) -> list[Survey]:
    """Compose access control, category, search and ordering."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    result = visible_to(surveys, user_id, accessed_ids)
    result = filter_category(result, category)
    result = search(result, query)
    return sort_feed(result, category, now)

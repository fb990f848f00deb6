"""Tests for feed filtering and ordering."""

import datetime

import pytest

from thisorthat.survey.feed import (
    as_datetime,
    build_feed,
    filter_category,
    search,
    sort_feed,
    trending_score,
    visible_to,
)

NOW = datetime.datetime(2024, 6, 10, 12, tzinfo=datetime.timezone.utc)


def _survey(survey_id, **fields):
    data = {
        "id": survey_id,
        "title": survey_id.title(),
        "visibility": "public",
        "creatorId": "someone",
        "surveyType": "standard",
        "createdAt": NOW - datetime.timedelta(hours=1),
        "responses": 0,
        "commentCount": 0,
        "reactionCount": 0,
        "isExpired": False,
    }
    data.update(fields)
    return data


@pytest.fixture
def surveys():
    return [
        _survey("public-food", category="food"),
        _survey("mine", visibility="private", creatorId="me"),
        _survey("unlocked", visibility="private"),
        _survey("locked", visibility="private"),
        _survey("bracket", surveyType="tournament", category="sports"),
    ]


def test_visible_to(surveys):
    ids = [s["id"] for s in visible_to(surveys, "me", ["unlocked"])]
    assert ids == ["public-food", "mine", "unlocked", "bracket"]  # nosec B101


def test_filter_category(surveys):
    assert len(filter_category(surveys, "all")) == 5  # nosec B101
    assert len(filter_category(surveys, "trending")) == 5  # nosec B101
    assert len(filter_category(surveys, None)) == 5  # nosec B101
    assert [s["id"] for s in filter_category(surveys, "tournament")] == [  # nosec B101
        "bracket"
    ]
    assert [s["id"] for s in filter_category(surveys, "food")] == [  # nosec B101
        "public-food"
    ]


def test_search_is_case_insensitive(surveys):
    assert [s["id"] for s in search(surveys, "  FOOD ")] == ["public-food"]  # nosec B101
    assert len(search(surveys, "")) == 5  # nosec B101


def test_trending_score_decays_with_age():
    fresh = _survey("fresh", responses=3, commentCount=1, reactionCount=1)
    assert trending_score(fresh, NOW) == 40  # nosec B101

    old = _survey(
        "old", responses=3, commentCount=1, reactionCount=1,
        createdAt=NOW - datetime.timedelta(days=4),
    )
    assert trending_score(old, NOW) == 10  # nosec B101


def test_sort_feed_trending():
    quiet = _survey("quiet", responses=1)
    busy = _survey("busy", responses=9)
    ordered = sort_feed([quiet, busy], "trending", NOW)
    assert [s["id"] for s in ordered] == ["busy", "quiet"]  # nosec B101


def test_sort_feed_open_then_newest():
    old_open = _survey("old-open", createdAt=NOW - datetime.timedelta(days=3))
    new_open = _survey("new-open", createdAt=NOW - datetime.timedelta(hours=2))
    new_closed = _survey("new-closed", isExpired=True, createdAt=NOW)
    ordered = sort_feed([old_open, new_closed, new_open], "all", NOW)
    assert [s["id"] for s in ordered] == [  # nosec B101
        "new-open",
        "old-open",
        "new-closed",
    ]


def test_build_feed(surveys):
    feed = build_feed(surveys, "me", [], category="all", query="i", now=NOW)
    assert {s["id"] for s in feed} == {"public-food", "mine"}  # nosec B101


def test_as_datetime():
    assert as_datetime("2024-06-10T12:00:00Z") == NOW  # nosec B101
    assert as_datetime(datetime.datetime(2024, 6, 10, 12)) == NOW  # nosec B101
    assert as_datetime(None).year == 1970  # nosec B101
    assert as_datetime("not a date").year == 1970  # nosec B101

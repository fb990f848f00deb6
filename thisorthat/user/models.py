"""Data models for the user blueprint."""

from __future__ import annotations

from thisorthat.core.types import FirestoreDocument


class UserProfile(FirestoreDocument, total=False):
    """A profile document in Firestore."""

    name: str
    bio: str
    votingStreak: int
    lastVoteDate: str
    totalVotes: int
    surveysCreated: int
    following: list[str]
    followers: list[str]
    accessedPrivateSurveys: list[str]

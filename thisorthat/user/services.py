"""Service layer for user profiles, voting streaks and follows."""

from __future__ import annotations

import datetime
import random
from typing import TYPE_CHECKING, Any, cast

from thisorthat.core.constants import PROFILES_COLLECTION
from thisorthat.core.repository import FirestoreRepository, get_db
from thisorthat.errors import NotFoundError, ValidationError
from thisorthat.utils import utcnow

from .models import UserProfile

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from thisorthat.core.repository import Repository

EDITABLE_FIELDS = ("name", "bio")


def _parse_day(value: Any) -> datetime.date | None:
    """Read a stored lastVoteDate, accepting dates or ISO date/time strings."""
    if not value:
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def next_streak(
    current_streak: int, last_vote: datetime.date | None, today: datetime.date
) -> int | None:
    """Return the streak after voting today, or None if already counted today."""
    if last_vote == today:
        return None
    if last_vote is None:
        return 1
    if last_vote == today - datetime.timedelta(days=1):
        return current_streak + 1
    return 1


class ProfileService:
    """Handles user profile data access."""

    def __init__(self, profiles: Repository) -> None:
        self.profiles = profiles

    @classmethod
    def from_client(cls, db: Client | None = None) -> ProfileService:
        if db is None:
            db = get_db()
        return cls(FirestoreRepository(db, PROFILES_COLLECTION))

    def get(self, user_id: str) -> UserProfile | None:
        """Fetch a profile without creating it."""
        return cast("UserProfile | None", self.profiles.load(user_id))

    def get_or_create(
        self, user_id: str, rng: random.Random | None = None
    ) -> UserProfile:
        """Fetch a profile, creating a default one on first use."""
        profile = self.get(user_id)
        if profile is not None:
            return profile

        rng = rng or random.Random()
        profile = {
            "id": user_id,
            "name": f"User{rng.randint(0, 9998)}",
            "createdAt": utcnow(),
            "votingStreak": 0,
            "totalVotes": 0,
            "surveysCreated": 0,
            "following": [],
            "followers": [],
            "accessedPrivateSurveys": [],
        }
        self.profiles.save(user_id, profile)
        return cast("UserProfile", profile)

    def update_profile(self, user_id: str, updates: dict[str, Any]) -> UserProfile:
        """Update editable profile fields (name, bio)."""
        profile = dict(self.get_or_create(user_id))
        for key in EDITABLE_FIELDS:
            if key in updates and updates[key] is not None:
                profile[key] = str(updates[key]).strip()
        if not profile.get("name"):
            raise ValidationError("Name cannot be empty.")
        self.profiles.save(user_id, profile)
        return cast("UserProfile", profile)

    def record_vote(self, user_id: str, today: datetime.date | None = None) -> int:
        """Update the voting streak and vote total; return the streak."""
        today = today or utcnow().date()
        profile = dict(self.get_or_create(user_id))
        streak = next_streak(
            profile.get("votingStreak", 0),
            _parse_day(profile.get("lastVoteDate")),
            today,
        )
        if streak is None:
            return profile.get("votingStreak", 0)

        profile["votingStreak"] = streak
        profile["lastVoteDate"] = today.isoformat()
        profile["totalVotes"] = profile.get("totalVotes", 0) + 1
        self.profiles.save(user_id, profile)
        return streak

    def increment_surveys_created(self, user_id: str) -> None:
        profile = dict(self.get_or_create(user_id))
        profile["surveysCreated"] = profile.get("surveysCreated", 0) + 1
        self.profiles.save(user_id, profile)

    def add_accessed_private_survey(self, user_id: str, survey_id: str) -> None:
        """Remember that the user unlocked a private survey."""
        profile = dict(self.get_or_create(user_id))
        accessed = list(profile.get("accessedPrivateSurveys") or [])
        if survey_id not in accessed:
            accessed.append(survey_id)
            profile["accessedPrivateSurveys"] = accessed
            self.profiles.save(user_id, profile)

    def follow(self, user_id: str, target_id: str) -> None:
        """Follow another user, updating both sides."""
        if user_id == target_id:
            raise ValidationError("You can't follow yourself.")
        profile = dict(self.get_or_create(user_id))
        following = list(profile.get("following") or [])
        if target_id in following:
            return
        profile["following"] = following + [target_id]
        self.profiles.save(user_id, profile)

        target = self.get(target_id)
        if target is not None:
            target = dict(target)
            followers = list(target.get("followers") or [])
            if user_id not in followers:
                target["followers"] = followers + [user_id]
                self.profiles.save(target_id, target)

    def unfollow(self, user_id: str, target_id: str) -> None:
        """Stop following another user, updating both sides."""
        profile = dict(self.get_or_create(user_id))
        profile["following"] = [
            uid for uid in profile.get("following") or [] if uid != target_id
        ]
        self.profiles.save(user_id, profile)

        target = self.get(target_id)
        if target is not None:
            target = dict(target)
            target["followers"] = [
                uid for uid in target.get("followers") or [] if uid != user_id
            ]
            self.profiles.save(target_id, target)

    def is_following(self, user_id: str, target_id: str) -> bool:
        profile = self.get(user_id)
        return bool(profile) and target_id in (profile.get("following") or [])

    def get_public_profile(self, user_id: str) -> UserProfile:
        """Fetch another user's profile or raise NotFoundError."""
        profile = self.get(user_id)
        if profile is None:
            raise NotFoundError("User not found.")
        return profile

"""Service layer for comments and reactions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, cast

from flask import current_app

from thisorthat.core.constants import (
    COMMENT_MAX_LENGTH,
    COMMENTS_COLLECTION,
    REACTION_TYPES,
    REACTIONS_COLLECTION,
)
from thisorthat.core.repository import FirestoreRepository, get_db
from thisorthat.errors import NotFoundError, ValidationError
from thisorthat.survey.feed import as_datetime
from thisorthat.survey.services import SurveyStore
from thisorthat.utils import new_id, utcnow

from .models import Comment, Reaction

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from thisorthat.core.repository import Repository


def reaction_key(survey_id: str, user_id: str) -> str:
    return f"{survey_id}_{user_id}"


class EngagementService:
    """Handles comments and reactions, keeping survey counters in step."""

    def __init__(
        self, comments: Repository, reactions: Repository, store: SurveyStore
    ) -> None:
        self.comments = comments
        self.reactions = reactions
        self.store = store

    @classmethod
    def from_client(cls, db: Client | None = None) -> EngagementService:
        if db is None:
            db = get_db()
        return cls(
            FirestoreRepository(db, COMMENTS_COLLECTION),
            FirestoreRepository(db, REACTIONS_COLLECTION),
            SurveyStore.from_client(db, current_app.config.get("ROUND_VOTES_REQUIRED")),
        )

    def add_comment(self, survey_id: str, user_id: str, text: str) -> Comment:
        """Post a comment on a survey."""
        text = (text or "").strip()
        if not text:
            raise ValidationError("Comment cannot be empty.")
        if len(text) > COMMENT_MAX_LENGTH:
            raise ValidationError(
                f"Comments are limited to {COMMENT_MAX_LENGTH} characters."
            )
        self.store.get_survey(survey_id)
        author = self.store.profiles.get_or_create(user_id)

        comment_id = new_id()
        comment = {
            "id": comment_id,
            "surveyId": survey_id,
            "userId": user_id,
            "userName": author.get("name", ""),
            "text": text,
            "timestamp": utcnow(),
        }
        self.comments.save(comment_id, comment)
        self.store.adjust_engagement(survey_id, comments=1)
        return cast("Comment", comment)

    def comments_for_survey(self, survey_id: str) -> list[Comment]:
        """Comments on a survey, newest first."""
        comments = self.comments.find("surveyId", survey_id)
        comments.sort(key=lambda c: as_datetime(c.get("timestamp")), reverse=True)
        return cast("list[Comment]", comments)

    def delete_comment(self, comment_id: str, user_id: str) -> None:
        """Delete a comment; only its author may do so."""
        comment = self.comments.load(comment_id)
        if comment is None:
            raise NotFoundError("Comment not found.")
        if comment.get("userId") != user_id:
            raise PermissionError("You can only delete your own comments.")
        self.comments.delete(comment_id)
        try:
            self.store.adjust_engagement(comment["surveyId"], comments=-1)
        except NotFoundError:
            current_app.logger.warning(
                f"Comment {comment_id} belonged to missing survey {comment['surveyId']}"
            )

    def toggle_reaction(
        self, survey_id: str, user_id: str, reaction_type: str
    ) -> tuple[Optional[Reaction], bool]:
        """Add, switch or remove the user's reaction.

        Reacting again with the same type removes the reaction. Returns the
        reaction now in place (None when removed) and whether one was added.
        """
        if reaction_type not in REACTION_TYPES:
            raise ValidationError(f"Unknown reaction: {reaction_type}")
        self.store.get_survey(survey_id)

        key = reaction_key(survey_id, user_id)
        existing = self.reactions.load(key)
        if existing is not None and existing.get("type") == reaction_type:
            self.reactions.delete(key)
            self.store.adjust_engagement(survey_id, reactions=-1)
            return None, False

        reaction = {
            "id": key,
            "surveyId": survey_id,
            "userId": user_id,
            "type": reaction_type,
            "timestamp": utcnow(),
        }
        self.reactions.save(key, reaction)
        if existing is None:
            self.store.adjust_engagement(survey_id, reactions=1)
        return cast("Reaction", reaction), True

    def reaction_counts(self, survey_id: str) -> dict[str, int]:
        counts = dict.fromkeys(REACTION_TYPES, 0)
        for reaction in self.reactions.find("surveyId", survey_id):
            if reaction.get("type") in counts:
                counts[reaction["type"]] += 1
        return counts

    def user_reaction(self, survey_id: str, user_id: str) -> Optional[str]:
        reaction = self.reactions.load(reaction_key(survey_id, user_id))
        return reaction.get("type") if reaction else None

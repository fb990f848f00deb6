"""Data models for the survey blueprint."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from thisorthat.core.constants import SLOT_A
from thisorthat.core.types import FirestoreDocument
from thisorthat.core.votes import Tally, check_slot, check_strength


class Survey(FirestoreDocument, total=False):
    """A survey document in Firestore.

    Standard surveys carry ``questions``; tournaments carry the item list,
    the flat matchup list and the round progress fields.
    """

    title: str
    surveyType: str
    visibility: str
    creatorId: str
    creatorName: str
    inviteCode: Optional[str]
    category: Optional[str]
    tags: list[str]
    questions: list[dict[str, Any]]
    tournamentItems: list[dict[str, Any]]
    tournamentMatchups: list[dict[str, Any]]
    currentTournamentRound: int
    tournamentRoundVotesRequired: int
    responses: int
    maxVotes: int
    isExpired: bool
    showIndividualVotes: bool
    views: int
    commentCount: int
    reactionCount: int
    shareCount: int


class ParticipantResponse(FirestoreDocument, total=False):
    """One participant's submitted ballot."""

    surveyId: str
    userId: str
    responses: list[dict[str, Any]]
    tournamentResponses: list[dict[str, Any]]
    timestamp: Any


@dataclass(frozen=True)
class Question:
    """A single this-or-that comparison in a standard survey."""

    id: str
    option_a: str
    option_b: str
    option_a_image: str = ""
    option_b_image: str = ""
    tally_a: Tally = field(default_factory=Tally)
    tally_b: Tally = field(default_factory=Tally)

    def vote(self, slot: str, strength: str) -> Question:
        """Return the question with one more vote for slot."""
        check_slot(slot)
        if slot == SLOT_A:
            return replace(self, tally_a=self.tally_a.add(strength))
        return replace(self, tally_b=self.tally_b.add(strength))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "optionA": self.option_a,
            "optionAImage": self.option_a_image,
            "optionB": self.option_b,
            "optionBImage": self.option_b_image,
        }
        data.update(self.tally_a.to_fields("A"))
        data.update(self.tally_b.to_fields("B"))
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Question:
        return cls(
            id=str(data["id"]),
            option_a=str(data.get("optionA") or ""),
            option_b=str(data.get("optionB") or ""),
            option_a_image=str(data.get("optionAImage") or ""),
            option_b_image=str(data.get("optionBImage") or ""),
            tally_a=Tally.from_fields(data, "A"),
            tally_b=Tally.from_fields(data, "B"),
        )


@dataclass
class SurveyResponse:
    """A vote on one question of a standard survey."""

    question_id: str
    choice: str
    strength: str

    def validate(self) -> None:
        """Validate the vote for obvious errors."""
        if not self.question_id:
            raise ValueError("A question id is required.")
        check_slot(self.choice)
        check_strength(self.strength)

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionId": self.question_id,
            "choice": self.choice,
            "strength": self.strength,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SurveyResponse:
        return cls(
            question_id=str(data.get("questionId") or ""),
            choice=str(data.get("choice") or ""),
            strength=str(data.get("strength") or ""),
        )


@dataclass
class TournamentResponse:
    """A vote on one matchup of a tournament."""

    matchup_id: str
    choice: str
    strength: str

    def validate(self) -> None:
        """Validate the vote for obvious errors."""
        if not self.matchup_id:
            raise ValueError("A matchup id is required.")
        check_slot(self.choice)
        check_strength(self.strength)

    def to_dict(self) -> dict[str, Any]:
        return {
            "matchupId": self.matchup_id,
            "choice": self.choice,
            "strength": self.strength,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TournamentResponse:
        return cls(
            matchup_id=str(data.get("matchupId") or ""),
            choice=str(data.get("choice") or ""),
            strength=str(data.get("strength") or ""),
        )

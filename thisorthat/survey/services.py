"""Service layer for survey and tournament business logic."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Optional, cast

from flask import current_app

from thisorthat.core.constants import (
    DEFAULT_ROUND_VOTES_REQUIRED,
    MIN_TOURNAMENT_ITEMS,
    PROFILES_COLLECTION,
    RESPONSES_COLLECTION,
    SURVEY_CATEGORIES,
    SURVEY_TYPE_STANDARD,
    SURVEY_TYPE_TOURNAMENT,
    SURVEYS_COLLECTION,
    VISIBILITIES,
    VISIBILITY_PRIVATE,
)
from thisorthat.core.repository import FirestoreRepository, get_db
from thisorthat.errors import NotFoundError, ValidationError
from thisorthat.tournament import Bracket, BracketEngine, Item
from thisorthat.user.services import ProfileService
from thisorthat.utils import (
    generate_invite_code,
    new_id,
    normalize_invite_code,
    utcnow,
)

from .feed import as_datetime
from .models import (
    ParticipantResponse,
    Question,
    Survey,
    SurveyResponse,
    TournamentResponse,
)

if TYPE_CHECKING:
    import datetime

    from google.cloud.firestore_v1.client import Client

    from thisorthat.core.repository import Repository


class SurveyStore:
    """Handles business logic and data access for surveys and tournaments."""

    def __init__(
        self,
        surveys: Repository,
        responses: Repository,
        profiles: ProfileService,
        round_votes_required: int = DEFAULT_ROUND_VOTES_REQUIRED,
    ) -> None:
        self.surveys = surveys
        self.responses = responses
        self.profiles = profiles
        self.round_votes_required = round_votes_required

    @classmethod
    def from_client(
        cls, db: Client | None = None, round_votes_required: int | None = None
    ) -> SurveyStore:
        """Build a store on the Firestore collections of the given client."""
        if db is None:
            db = get_db()
        if round_votes_required is None:
            round_votes_required = DEFAULT_ROUND_VOTES_REQUIRED
        return cls(
            FirestoreRepository(db, SURVEYS_COLLECTION),
            FirestoreRepository(db, RESPONSES_COLLECTION),
            ProfileService(FirestoreRepository(db, PROFILES_COLLECTION)),
            round_votes_required,
        )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def _new_survey(  # noqa: PLR0913
        self,
        creator_id: str,
        title: str,
        survey_type: str,
        max_votes: int,
        visibility: str,
        category: Optional[str],
        tags: Optional[Sequence[str]],
        rng: random.Random | None,
    ) -> dict[str, Any]:
        title = (title or "").strip()
        if not title:
            raise ValidationError("A survey needs a title.")
        if max_votes < 1:
            raise ValidationError("Max votes must be at least 1.")
        if visibility not in VISIBILITIES:
            raise ValidationError(f"Unknown visibility: {visibility}")
        if category and category not in SURVEY_CATEGORIES:
            raise ValidationError(f"Unknown category: {category}")

        creator = self.profiles.get_or_create(creator_id)
        invite_code = None
        if visibility == VISIBILITY_PRIVATE:
            invite_code = generate_invite_code(rng)
        return {
            "id": new_id(),
            "title": title,
            "surveyType": survey_type,
            "visibility": visibility,
            "creatorId": creator_id,
            "creatorName": creator.get("name", ""),
            "inviteCode": invite_code,
            "category": category or None,
            "tags": [t.strip() for t in tags or [] if t and t.strip()],
            "responses": 0,
            "maxVotes": max_votes,
            "isExpired": False,
            "showIndividualVotes": False,
            "views": 0,
            "commentCount": 0,
            "reactionCount": 0,
            "shareCount": 0,
            "createdAt": utcnow(),
        }

    def _persist_new(self, creator_id: str, survey: dict[str, Any]) -> Survey:
        self.surveys.save(survey["id"], survey)
        self.profiles.increment_surveys_created(creator_id)
        current_app.logger.info(
            f"Survey {survey['id']} ({survey['surveyType']}) created by {creator_id}"
        )
        return cast("Survey", survey)

    def create_survey(  # noqa: PLR0913
        self,
        creator_id: str,
        title: str,
        questions: Sequence[Question],
        max_votes: int,
        visibility: str,
        category: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        rng: random.Random | None = None,
    ) -> Survey:
        """Create a standard survey of this-or-that questions."""
        if not questions:
            raise ValidationError("A survey needs at least one question.")
        for question in questions:
            if not (question.option_a or question.option_a_image):
                raise ValidationError("Every question needs an option A.")
            if not (question.option_b or question.option_b_image):
                raise ValidationError("Every question needs an option B.")

        survey = self._new_survey(
            creator_id,
            title,
            SURVEY_TYPE_STANDARD,
            max_votes,
            visibility,
            category,
            tags,
            rng,
        )
        survey["questions"] = [q.to_dict() for q in questions]
        return self._persist_new(creator_id, survey)

    def create_tournament(  # noqa: PLR0913
        self,
        creator_id: str,
        title: str,
        items: Sequence[Item],
        max_votes: int,
        visibility: str,
        round_votes_required: int | None = None,
        category: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        rng: random.Random | None = None,
    ) -> Survey:
        """Create a tournament and seed its bracket."""
        if len(items) < MIN_TOURNAMENT_ITEMS:
            raise ValidationError(
                f"A tournament needs at least {MIN_TOURNAMENT_ITEMS} items."
            )
        if round_votes_required is None:
            round_votes_required = self.round_votes_required
        if round_votes_required < 1:
            raise ValidationError("Votes per round must be at least 1.")

        survey = self._new_survey(
            creator_id,
            title,
            SURVEY_TYPE_TOURNAMENT,
            max_votes,
            visibility,
            category,
            tags,
            rng,
        )
        bracket = BracketEngine.build_bracket(items, rng=rng)
        survey["tournamentItems"] = [item.to_dict() for item in items]
        survey["tournamentMatchups"] = bracket.to_dicts()
        survey["currentTournamentRound"] = bracket.first_round
        survey["tournamentRoundVotesRequired"] = round_votes_required
        return self._persist_new(creator_id, survey)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_survey(self, survey_id: str) -> Survey:
        """Fetch a survey or raise NotFoundError."""
        survey = self.surveys.load(survey_id)
        if survey is None:
            raise NotFoundError("Survey not found.")
        return cast("Survey", survey)

    def list_all(self) -> list[Survey]:
        return cast("list[Survey]", self.surveys.load_all())

    def list_by_creator(self, creator_id: str) -> list[Survey]:
        """The creator's surveys, newest first."""
        surveys = self.surveys.find("creatorId", creator_id)
        surveys.sort(key=lambda s: as_datetime(s.get("createdAt")), reverse=True)
        return cast("list[Survey]", surveys)

    def find_by_invite_code(self, code: str) -> Survey:
        """Look up a private survey by its invite code."""
        code = normalize_invite_code(code)
        if not code:
            raise ValidationError("Please enter an invite code.")
        for survey in self.surveys.find("inviteCode", code):
            if survey.get("visibility") == VISIBILITY_PRIVATE:
                return cast("Survey", survey)
        raise NotFoundError("Invalid invite code.")

    def access_private_survey(self, user_id: str, code: str) -> Survey:
        """Unlock a private survey for the user by invite code."""
        survey = self.find_by_invite_code(code)
        self.profiles.add_accessed_private_survey(user_id, survey["id"])
        return survey

    def can_view(self, survey: Survey, user_id: str) -> bool:
        """Whether the user may open the survey."""
        if survey.get("visibility") != VISIBILITY_PRIVATE:
            return True
        if survey.get("creatorId") == user_id:
            return True
        profile = self.profiles.get(user_id) or {}
        return survey["id"] in (profile.get("accessedPrivateSurveys") or [])

    def require_viewable(self, survey_id: str, user_id: str) -> Survey:
        """Load a survey, refusing private ones the user has not unlocked."""
        survey = self.get_survey(survey_id)
        if not self.can_view(survey, user_id):
            raise PermissionError("This survey is private. Enter its invite code first.")
        return survey

    def get_responses(self, survey_id: str, viewer_id: str) -> list[ParticipantResponse]:
        """Individual ballots, visible to the creator or when shared."""
        survey = self.get_survey(survey_id)
        if survey.get("creatorId") != viewer_id and not survey.get(
            "showIndividualVotes"
        ):
            raise PermissionError("Individual votes for this survey are private.")
        ballots = self.responses.find("surveyId", survey_id)
        ballots.sort(key=lambda r: as_datetime(r.get("timestamp")))
        return cast("list[ParticipantResponse]", ballots)

    # ------------------------------------------------------------------
    # Voting
    # ------------------------------------------------------------------

    @staticmethod
    def _check_open(survey: Survey, survey_type: str) -> None:
        if survey.get("surveyType") != survey_type:
            raise ValidationError("Wrong kind of vote for this survey.")
        if survey.get("isExpired"):
            raise ValidationError("This survey is closed.")

    @staticmethod
    def _validated(responses: Sequence[Any]) -> None:
        if not responses:
            raise ValidationError("No votes were submitted.")
        for response in responses:
            try:
                response.validate()
            except ValueError as e:
                raise ValidationError(str(e)) from e

    def _record_ballot(
        self,
        survey_id: str,
        user_id: str,
        responses: list[dict[str, Any]],
        tournament_responses: list[dict[str, Any]],
    ) -> None:
        ballot_id = new_id()
        ballot = {
            "surveyId": survey_id,
            "userId": user_id,
            "responses": responses,
            "tournamentResponses": tournament_responses,
            "timestamp": utcnow(),
            "createdAt": utcnow(),
        }
        self.responses.save(ballot_id, ballot)

    def submit_survey_responses(
        self,
        survey_id: str,
        user_id: str,
        responses: Sequence[SurveyResponse],
        today: datetime.date | None = None,
    ) -> Survey:
        """Apply one participant's votes to a standard survey."""
        survey = dict(self.get_survey(survey_id))
        self._check_open(cast("Survey", survey), SURVEY_TYPE_STANDARD)
        self._validated(responses)

        questions = [Question.from_dict(q) for q in survey.get("questions") or []]
        first_vote: dict[str, SurveyResponse] = {}
        for response in responses:
            first_vote.setdefault(response.question_id, response)

        applied = []
        updated = []
        for question in questions:
            response = first_vote.get(question.id)
            if response is not None:
                question = question.vote(response.choice, response.strength)
                applied.append(response.to_dict())
            updated.append(question)
        if not applied:
            raise ValidationError("None of these votes match the survey questions.")

        survey["questions"] = [q.to_dict() for q in updated]
        survey["responses"] = survey.get("responses", 0) + 1
        survey["isExpired"] = survey["responses"] >= survey.get("maxVotes", 0)
        self.surveys.save(survey_id, survey)

        self._record_ballot(survey_id, user_id, applied, [])
        self.profiles.record_vote(user_id, today)
        return cast("Survey", survey)

    def _advance_while_complete(
        self, survey_id: str, bracket: Bracket, current: int, votes_required: int
    ) -> tuple[Bracket, int]:
        while current > 0 and BracketEngine.is_round_complete(
            bracket, current, votes_required
        ):
            bracket = BracketEngine.advance_round(bracket)
            current -= 1
            current_app.logger.info(
                f"Tournament {survey_id} advanced to "
                f"{BracketEngine.round_name(current, bracket.num_rounds)}"
            )
        return bracket, current

    def submit_tournament_responses(
        self,
        survey_id: str,
        user_id: str,
        responses: Sequence[TournamentResponse],
        today: datetime.date | None = None,
    ) -> Survey:
        """Apply one participant's matchup votes and progress the bracket.

        Votes for matchups outside the current round, for byes, or for
        unknown matchups are skipped. Only the first vote per matchup in a
        submission counts.
        """
        survey = dict(self.get_survey(survey_id))
        self._check_open(cast("Survey", survey), SURVEY_TYPE_TOURNAMENT)
        self._validated(responses)

        bracket = Bracket.from_dicts(survey.get("tournamentMatchups"))
        current = survey.get("currentTournamentRound")
        if current is None:
            current = bracket.first_round or 0
        votes_required = survey.get(
            "tournamentRoundVotesRequired", self.round_votes_required
        )

        applied = []
        seen: set[str] = set()
        for response in responses:
            if response.matchup_id in seen:
                continue
            seen.add(response.matchup_id)
            matchup = bracket.find(response.matchup_id)
            if matchup is None or matchup.round != current or not matchup.is_votable:
                current_app.logger.warning(
                    f"Skipped vote on matchup {response.matchup_id} "
                    f"in tournament {survey_id} (round {current})"
                )
                continue
            bracket = bracket.replace(
                BracketEngine.record_vote(matchup, response.choice, response.strength)
            )
            applied.append(response.to_dict())
        if not applied:
            raise ValidationError("No votes could be recorded for the current round.")

        bracket, current = self._advance_while_complete(
            survey_id, bracket, current, votes_required
        )
        if current == 0 and bracket.finals is not None:
            leader = BracketEngine.winner_of(bracket.finals)
            if leader is not None:
                current_app.logger.info(f"Tournament {survey_id} Finals led by {leader}")

        survey["tournamentMatchups"] = bracket.to_dicts()
        survey["currentTournamentRound"] = current
        survey["responses"] = survey.get("responses", 0) + 1
        survey["isExpired"] = (
            survey["responses"] >= survey.get("maxVotes", 0) or current < 0
        )
        self.surveys.save(survey_id, survey)

        self._record_ballot(survey_id, user_id, [], applied)
        self.profiles.record_vote(user_id, today)
        return cast("Survey", survey)

    # ------------------------------------------------------------------
    # Creator controls and counters
    # ------------------------------------------------------------------

    def _owned(self, survey_id: str, user_id: str) -> dict[str, Any]:
        survey = dict(self.get_survey(survey_id))
        if survey.get("creatorId") != user_id:
            raise PermissionError("Only the creator can change this survey.")
        return survey

    def set_show_individual_votes(
        self, survey_id: str, user_id: str, show: bool
    ) -> Survey:
        """Let the creator publish or hide individual ballots."""
        survey = self._owned(survey_id, user_id)
        survey["showIndividualVotes"] = bool(show)
        self.surveys.save(survey_id, survey)
        return cast("Survey", survey)

    def delete_survey(self, survey_id: str, user_id: str) -> None:
        """Delete a survey and its ballots."""
        self._owned(survey_id, user_id)
        for ballot in self.responses.find("surveyId", survey_id):
            self.responses.delete(ballot["id"])
        self.surveys.delete(survey_id)
        current_app.logger.info(f"Survey {survey_id} deleted by {user_id}")

    def _bump(self, survey_id: str, **deltas: int) -> Survey:
        survey = dict(self.get_survey(survey_id))
        for key, delta in deltas.items():
            survey[key] = max(0, survey.get(key, 0) + delta)
        self.surveys.save(survey_id, survey)
        return cast("Survey", survey)

    def record_view(self, survey_id: str) -> Survey:
        return self._bump(survey_id, views=1)

    def record_share(self, survey_id: str) -> Survey:
        return self._bump(survey_id, shareCount=1)

    def adjust_engagement(
        self, survey_id: str, comments: int = 0, reactions: int = 0
    ) -> Survey:
        """Shift the denormalized comment and reaction counts."""
        return self._bump(survey_id, commentCount=comments, reactionCount=reactions)


def get_survey_store() -> SurveyStore:
    """SurveyStore for the current app, using its configured round threshold."""
    return SurveyStore.from_client(
        round_votes_required=current_app.config.get("ROUND_VOTES_REQUIRED")
    )

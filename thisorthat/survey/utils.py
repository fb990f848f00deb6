"""Utility functions for presenting surveys and their results."""

from __future__ import annotations

from typing import Any

from thisorthat.core.constants import SURVEY_TYPE_TOURNAMENT
from thisorthat.core.votes import split_percentages
from thisorthat.tournament import Bracket, BracketEngine, Item
from thisorthat.tournament.utils import bracket_rounds, champion, round_progress

from .models import Question, Survey

# Fields never sent to anyone but the creator.
PRIVATE_FIELDS = ("inviteCode",)


def question_results(question: Question) -> dict[str, Any]:
    pct_a, pct_b = split_percentages(question.tally_a.total, question.tally_b.total)
    return {
        "id": question.id,
        "optionA": question.option_a,
        "optionAImage": question.option_a_image,
        "optionB": question.option_b,
        "optionBImage": question.option_b_image,
        "votesA": question.tally_a.total,
        "votesB": question.tally_b.total,
        "percentA": pct_a,
        "percentB": pct_b,
        "strengthA": question.tally_a.breakdown(),
        "strengthB": question.tally_b.breakdown(),
    }


def tournament_state(survey: Survey) -> dict[str, Any]:
    """Bracket, current round and champion of a tournament survey."""
    items = [Item.from_dict(i) for i in survey.get("tournamentItems") or []]
    bracket = Bracket.from_dicts(survey.get("tournamentMatchups"))
    current = survey.get("currentTournamentRound", bracket.first_round or 0)
    votes_required = survey.get("tournamentRoundVotesRequired", 0)
    # A bye carried into the Finals is not a win until the Finals is live.
    winner_id = champion(bracket) if current <= 0 else None
    winner = next((i.to_dict() for i in items if i.id == winner_id), None)
    return {
        "currentRound": current,
        "currentRoundName": BracketEngine.round_name(current, bracket.num_rounds),
        "roundProgress": round_progress(bracket, current, votes_required),
        "votesRequired": votes_required,
        "rounds": bracket_rounds(bracket, items),
        "champion": winner,
    }


def survey_results(survey: Survey) -> dict[str, Any]:
    """Aggregate results for a survey of either kind."""
    results: dict[str, Any] = {
        "id": survey.get("id"),
        "title": survey.get("title"),
        "surveyType": survey.get("surveyType"),
        "responses": survey.get("responses", 0),
        "maxVotes": survey.get("maxVotes", 0),
        "isExpired": bool(survey.get("isExpired")),
    }
    if survey.get("surveyType") == SURVEY_TYPE_TOURNAMENT:
        results["tournament"] = tournament_state(survey)
    else:
        results["questions"] = [
            question_results(Question.from_dict(q)) for q in survey.get("questions") or []
        ]
    return results


def public_view(survey: Survey, user_id: str) -> dict[str, Any]:
    """Survey document as shown to a user; only the creator sees the invite code."""
    data = dict(survey)
    if survey.get("creatorId") != user_id:
        for key in PRIVATE_FIELDS:
            data.pop(key, None)
    return data

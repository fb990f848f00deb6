"""Routes for the survey blueprint."""

from __future__ import annotations

from typing import Any

from flask import current_app, jsonify, request

from thisorthat.core.types import api_response
from thisorthat.errors import ValidationError
from thisorthat.tournament import Item
from thisorthat.utils import current_user_id, form_error_response, new_id

from . import bp
from .feed import build_feed
from .forms import InviteCodeForm, PrivacyForm, SurveyForm, TournamentForm
from .models import Question, SurveyResponse, TournamentResponse
from .services import SurveyStore, get_survey_store
from .utils import public_view, survey_results


def _viewable(store: SurveyStore, survey_id: str) -> Any:
    return store.require_viewable(survey_id, current_user_id())


def _ballot() -> list[dict[str, Any]]:
    """Read the ``responses`` list from a JSON request body."""
    payload = request.get_json(silent=True) or {}
    responses = payload.get("responses")
    if not isinstance(responses, list) or not all(
        isinstance(r, dict) for r in responses
    ):
        raise ValidationError("Expected a JSON body with a list of responses.")
    return responses


def _max_votes(form: Any) -> int:
    return form.max_votes.data or current_app.config["DEFAULT_MAX_VOTES"]


@bp.route("/", methods=["GET"])
def feed() -> Any:
    """Surveys visible to the current user, filtered and sorted."""
    store = get_survey_store()
    user_id = current_user_id()
    profile = store.profiles.get(user_id) or {}
    surveys = build_feed(
        store.list_all(),
        user_id,
        accessed_ids=profile.get("accessedPrivateSurveys") or [],
        category=request.args.get("category", "all"),
        query=request.args.get("q"),
    )
    return jsonify(
        api_response(data={"surveys": [public_view(s, user_id) for s in surveys]})
    )


@bp.route("/mine", methods=["GET"])
def my_surveys() -> Any:
    """Surveys created by the current user."""
    surveys = get_survey_store().list_by_creator(current_user_id())
    return jsonify(api_response(data={"surveys": surveys}))


@bp.route("/create", methods=["POST"])
def create_survey() -> Any:
    """Create a standard survey."""
    form = SurveyForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    questions = [
        Question(
            id=new_id(),
            option_a=entry.form.option_a.data.strip(),
            option_b=entry.form.option_b.data.strip(),
            option_a_image=(entry.form.option_a_image.data or "").strip(),
            option_b_image=(entry.form.option_b_image.data or "").strip(),
        )
        for entry in form.questions
    ]
    survey = get_survey_store().create_survey(
        current_user_id(),
        form.title.data,
        questions,
        max_votes=_max_votes(form),
        visibility=form.visibility.data,
        category=form.category.data or None,
        tags=form.tag_list(),
    )
    return jsonify(api_response("Survey created.", data={"survey": survey})), 201


@bp.route("/tournaments/create", methods=["POST"])
def create_tournament() -> Any:
    """Create a tournament and seed its bracket."""
    form = TournamentForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    items = [
        Item(
            id=new_id(),
            name=entry.form.name.data.strip(),
            image=(entry.form.image.data or "").strip(),
        )
        for entry in form.items
    ]
    survey = get_survey_store().create_tournament(
        current_user_id(),
        form.title.data,
        items,
        max_votes=_max_votes(form),
        visibility=form.visibility.data,
        round_votes_required=form.round_votes_required.data,
        category=form.category.data or None,
        tags=form.tag_list(),
    )
    return jsonify(api_response("Tournament created.", data={"survey": survey})), 201


@bp.route("/access", methods=["POST"])
def access_private_survey() -> Any:
    """Unlock a private survey with its invite code."""
    form = InviteCodeForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    survey = get_survey_store().access_private_survey(
        current_user_id(), form.code.data
    )
    return jsonify(
        api_response("Survey unlocked.", data={"surveyId": survey["id"]})
    )


@bp.route("/<uuid:survey_id>", methods=["GET"])
def view_survey(survey_id: str) -> Any:
    """Fetch a survey for voting."""
    store = get_survey_store()
    _viewable(store, survey_id)
    survey = store.record_view(survey_id)
    return jsonify(
        api_response(data={"survey": public_view(survey, current_user_id())})
    )


@bp.route("/<uuid:survey_id>/results", methods=["GET"])
def results(survey_id: str) -> Any:
    """Aggregated results; tournaments include the bracket and champion."""
    store = get_survey_store()
    survey = _viewable(store, survey_id)
    return jsonify(api_response(data=survey_results(survey)))


@bp.route("/<uuid:survey_id>/votes", methods=["GET"])
def individual_votes(survey_id: str) -> Any:
    """Individual ballots, when the creator has made them visible."""
    store = get_survey_store()
    _viewable(store, survey_id)
    ballots = store.get_responses(survey_id, current_user_id())
    return jsonify(api_response(data={"responses": ballots}))


@bp.route("/<uuid:survey_id>/responses", methods=["POST"])
def submit_responses(survey_id: str) -> Any:
    """Vote on a standard survey."""
    store = get_survey_store()
    _viewable(store, survey_id)
    responses = [SurveyResponse.from_dict(r) for r in _ballot()]
    survey = store.submit_survey_responses(
        survey_id, current_user_id(), responses
    )
    return jsonify(api_response("Thanks for voting!", data=survey_results(survey)))


@bp.route("/<uuid:survey_id>/tournament-responses", methods=["POST"])
def submit_tournament_responses(survey_id: str) -> Any:
    """Vote on the current round of a tournament."""
    store = get_survey_store()
    _viewable(store, survey_id)
    responses = [TournamentResponse.from_dict(r) for r in _ballot()]
    survey = store.submit_tournament_responses(
        survey_id, current_user_id(), responses
    )
    return jsonify(api_response("Thanks for voting!", data=survey_results(survey)))


@bp.route("/<uuid:survey_id>/privacy", methods=["POST"])
def set_privacy(survey_id: str) -> Any:
    """Creator-only toggle for publishing individual votes."""
    form = PrivacyForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    survey = get_survey_store().set_show_individual_votes(
        survey_id, current_user_id(), form.show_individual_votes.data
    )
    return jsonify(
        api_response(
            "Privacy updated.",
            data={"showIndividualVotes": survey["showIndividualVotes"]},
        )
    )


@bp.route("/<uuid:survey_id>/share", methods=["POST"])
def share(survey_id: str) -> Any:
    """Count a share and hand back what the client needs to share it."""
    store = get_survey_store()
    _viewable(store, survey_id)
    survey = store.record_share(survey_id)
    data = {"shareCount": survey["shareCount"], "title": survey.get("title")}
    if survey.get("creatorId") == current_user_id():
        data["inviteCode"] = survey.get("inviteCode")
    return jsonify(api_response(data=data))


@bp.route("/<uuid:survey_id>/delete", methods=["POST"])
def delete_survey(survey_id: str) -> Any:
    """Delete one of the current user's surveys."""
    get_survey_store().delete_survey(survey_id, current_user_id())
    return jsonify(api_response("Survey deleted."))

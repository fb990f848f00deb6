"""Routes for the engagement blueprint."""

from __future__ import annotations

from typing import Any

from flask import jsonify

from thisorthat.core.types import api_response
from thisorthat.utils import current_user_id, form_error_response

from . import bp
from .forms import CommentForm, ReactionForm
from .services import EngagementService


def _viewable(service: EngagementService, survey_id: str) -> None:
    service.store.require_viewable(survey_id, current_user_id())


@bp.route("/<string:survey_id>/comments", methods=["GET"])
def list_comments(survey_id: str) -> Any:
    """List a survey's comments, newest first."""
    service = EngagementService.from_client()
    _viewable(service, survey_id)
    comments = service.comments_for_survey(survey_id)
    return jsonify(api_response(data={"comments": comments}))


@bp.route("/<string:survey_id>/comments", methods=["POST"])
def add_comment(survey_id: str) -> Any:
    """Post a comment on a survey."""
    form = CommentForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    service = EngagementService.from_client()
    _viewable(service, survey_id)
    comment = service.add_comment(survey_id, current_user_id(), form.text.data)
    return jsonify(api_response("Comment posted.", data={"comment": comment})), 201


@bp.route("/comments/<string:comment_id>/delete", methods=["POST"])
def delete_comment(comment_id: str) -> Any:
    """Delete one of the current user's comments."""
    EngagementService.from_client().delete_comment(comment_id, current_user_id())
    return jsonify(api_response("Comment deleted."))


@bp.route("/<string:survey_id>/reactions", methods=["GET"])
def reactions(survey_id: str) -> Any:
    """Reaction counts, plus the current user's own reaction."""
    service = EngagementService.from_client()
    _viewable(service, survey_id)
    return jsonify(
        api_response(
            data={
                "counts": service.reaction_counts(survey_id),
                "mine": service.user_reaction(survey_id, current_user_id()),
            }
        )
    )


@bp.route("/<string:survey_id>/reactions", methods=["POST"])
def toggle_reaction(survey_id: str) -> Any:
    """Add, switch or remove the current user's reaction."""
    form = ReactionForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    service = EngagementService.from_client()
    _viewable(service, survey_id)
    reaction, added = service.toggle_reaction(
        survey_id, current_user_id(), form.reaction.data
    )
    return jsonify(
        api_response(
            "Reaction added." if added else "Reaction removed.",
            data={
                "reaction": reaction,
                "added": added,
                "counts": service.reaction_counts(survey_id),
            },
        )
    )

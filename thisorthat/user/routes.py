"""Routes for the user blueprint."""

from __future__ import annotations

from typing import Any

from flask import jsonify

from thisorthat.core.types import api_response
from thisorthat.utils import current_user_id, form_error_response

from . import bp
from .forms import UpdateProfileForm
from .services import ProfileService


@bp.route("/me", methods=["GET"])
def me() -> Any:
    """The current user's profile, created on first visit."""
    profile = ProfileService.from_client().get_or_create(current_user_id())
    return jsonify(api_response(data={"profile": profile}))


@bp.route("/me", methods=["POST"])
def update_me() -> Any:
    """Update the current user's name and bio."""
    form = UpdateProfileForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    profile = ProfileService.from_client().update_profile(
        current_user_id(), {"name": form.name.data, "bio": form.bio.data}
    )
    return jsonify(api_response("Profile updated.", data={"profile": profile}))


@bp.route("/<string:user_id>", methods=["GET"])
def view_user(user_id: str) -> Any:
    """Another user's public profile."""
    service = ProfileService.from_client()
    profile = service.get_public_profile(user_id)
    data = {
        "profile": {
            k: v for k, v in profile.items() if k != "accessedPrivateSurveys"
        },
        "isFollowing": service.is_following(current_user_id(), user_id),
    }
    return jsonify(api_response(data=data))


@bp.route("/<string:user_id>/follow", methods=["POST"])
def follow(user_id: str) -> Any:
    ProfileService.from_client().follow(current_user_id(), user_id)
    return jsonify(api_response("Following.", data={"isFollowing": True}))


@bp.route("/<string:user_id>/unfollow", methods=["POST"])
def unfollow(user_id: str) -> Any:
    ProfileService.from_client().unfollow(current_user_id(), user_id)
    return jsonify(api_response("Unfollowed.", data={"isFollowing": False}))

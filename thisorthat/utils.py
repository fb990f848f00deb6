"""Utility functions for the application."""

from __future__ import annotations

import datetime
import random
import uuid
from typing import Any

from flask import Response, current_app, g, jsonify

from .core.constants import INVITE_CODE_ALPHABET, INVITE_CODE_LENGTH
from .core.types import api_response


def new_id() -> str:
    """Return a fresh document id."""
    return str(uuid.uuid4())


def utcnow() -> datetime.datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def generate_invite_code(rng: random.Random | None = None) -> str:
    """Generate an 8-character upper-case invite code for a private survey."""
    rng = rng or random.Random()
    return "".join(rng.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))


def normalize_invite_code(code: str | None) -> str:
    """Trim and upper-case a user-entered invite code."""
    return (code or "").strip().upper()


def current_user_id() -> str:
    """The anonymous id of the browser making the request."""
    return g.user_id


def form_error_response(form: Any) -> tuple[Response, int]:
    """JSON 400 listing a form's validation errors."""
    current_app.logger.warning(f"Form validation failed: {form.errors}")
    body = api_response(
        "Please correct the highlighted fields.",
        data={"errors": form.errors},
        success=False,
    )
    return jsonify(body), 400

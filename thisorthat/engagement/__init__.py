"""Engagement blueprint: comments and reactions."""

from flask import Blueprint

bp = Blueprint("engagement", __name__, url_prefix="/engagement")

from . import routes  # noqa: E402, F401
from .services import EngagementService  # noqa: E402

__all__ = ["EngagementService", "routes"]

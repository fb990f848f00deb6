"""Survey blueprint."""

from flask import Blueprint

bp = Blueprint("survey", __name__, url_prefix="/surveys")

from . import routes  # noqa: E402, F401
from .models import ParticipantResponse, Question, Survey  # noqa: E402
from .services import SurveyStore  # noqa: E402

__all__ = ["ParticipantResponse", "Question", "Survey", "SurveyStore", "routes"]

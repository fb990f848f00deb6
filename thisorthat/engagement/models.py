"""Data models for the engagement blueprint."""

from __future__ import annotations

from typing import Any

from thisorthat.core.types import FirestoreDocument


class Comment(FirestoreDocument, total=False):
    """A comment left on a survey."""

    surveyId: str
    userId: str
    userName: str
    text: str
    timestamp: Any


class Reaction(FirestoreDocument, total=False):
    """A user's single reaction to a survey, keyed ``<surveyId>_<userId>``."""

    surveyId: str
    userId: str
    type: str
    timestamp: Any

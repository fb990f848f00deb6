"""Core module for the thisorthat application."""

from .repository import FirestoreRepository, Repository
from .types import APIResponse, FirestoreDocument
from .votes import Tally

__all__ = [
    "APIResponse",
    "FirestoreDocument",
    "FirestoreRepository",
    "Repository",
    "Tally",
]

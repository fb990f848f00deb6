"""Core data types for the thisorthat application."""

from typing import Any, Dict, Optional, TypedDict  # noqa: UP035


class _FirestoreDocumentBase(TypedDict):
    id: str
    createdAt: Any


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Generic Firestore document structure."""

    path: str
    updatedAt: Any


class APIResponse(TypedDict):
    """Generic API response structure."""

    success: bool
    message: str
    data: Optional[Dict[str, Any]]  # noqa: UP006


def api_response(
    message: str = "", data: Optional[Dict[str, Any]] = None, success: bool = True  # noqa: UP006
) -> APIResponse:
    """Build the JSON envelope returned by every API route."""
    return {"success": success, "message": message, "data": data}

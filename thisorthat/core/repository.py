"""Persistence interface used by the services, with a Firestore implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from firebase_admin import firestore

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class Repository(Protocol):
    """Key-value store of whole documents.

    Documents are plain dicts. ``load`` returns the stored document with its
    key under ``"id"``; ``save`` overwrites the previous document wholesale.
    """

    def load(self, doc_id: str) -> dict[str, Any] | None: ...

    def save(self, doc_id: str, data: dict[str, Any]) -> None: ...

    def delete(self, doc_id: str) -> None: ...

    def load_all(self) -> list[dict[str, Any]]: ...

    def find(self, field: str, value: Any) -> list[dict[str, Any]]: ...


def get_db() -> Client:
    """Return the default Firestore client."""
    return firestore.client()


class FirestoreRepository:
    """Repository backed by a single Firestore collection."""

    def __init__(self, db: Client, collection: str) -> None:
        self.db = db
        self.collection = collection

    def _doc_to_dict(self, doc: Any) -> dict[str, Any] | None:
        if not doc.exists:
            return None
        data = doc.to_dict() or {}
        data["id"] = doc.id
        return data

    def load(self, doc_id: str) -> dict[str, Any] | None:
        """Fetch one document by id."""
        doc = self.db.collection(self.collection).document(doc_id).get()
        return self._doc_to_dict(doc)

    def save(self, doc_id: str, data: dict[str, Any]) -> None:
        """Overwrite the document stored under doc_id."""
        payload = {k: v for k, v in data.items() if k != "id"}
        self.db.collection(self.collection).document(doc_id).set(payload)

    def delete(self, doc_id: str) -> None:
        """Remove a document, if present."""
        self.db.collection(self.collection).document(doc_id).delete()

    def load_all(self) -> list[dict[str, Any]]:
        """Fetch every document in the collection."""
        results = []
        for doc in self.db.collection(self.collection).stream():
            data = self._doc_to_dict(doc)
            if data is not None:
                results.append(data)
        return results

    def find(self, field: str, value: Any) -> list[dict[str, Any]]:
        """Fetch documents whose ``field`` equals ``value``."""
        query = self.db.collection(self.collection).where(
            filter=firestore.FieldFilter(field, "==", value)
        )
        results = []
        for doc in query.stream():
            data = self._doc_to_dict(doc)
            if data is not None:
                results.append(data)
        return results

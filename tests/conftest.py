"""Common utilities for tests."""

import unittest
import unittest.mock
from typing import Any, Optional

from mockfirestore import CollectionReference, MockFirestore, Query

from thisorthat import create_app
from thisorthat.tournament import Item


class MockFieldFilter:
    def __init__(self, field_path: str, op_string: str, value: Any) -> None:
        self.field_path = field_path
        self.op_string = op_string
        self.value = value


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter queries."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:  # noqa: E501
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where


patch_mockfirestore()


def mock_firestore_module(db: MockFirestore) -> unittest.mock.MagicMock:
    """A stand-in for ``firebase_admin.firestore`` backed by a MockFirestore."""
    module = unittest.mock.MagicMock()
    module.client.return_value = db
    module.FieldFilter = MockFieldFilter
    return module


def make_items(*names: str) -> list[Item]:
    return [Item(id=f"item-{i}", name=name) for i, name in enumerate(names)]


class FirestoreAppTestCase(unittest.TestCase):
    """Base case with an app context and ``firestore.client()`` patched to a mock."""

    app_config: dict[str, Any] = {}

    def setUp(self) -> None:
        """Set up a mock Firestore, an app and its test client."""
        self.mock_db = MockFirestore()
        self.mock_firestore_module = mock_firestore_module(self.mock_db)

        patchers = {
            "init_app": unittest.mock.patch("firebase_admin.initialize_app"),
            "firestore": unittest.mock.patch(
                "thisorthat.core.repository.firestore",
                new=self.mock_firestore_module,
            ),
        }
        self.mocks = {name: p.start() for name, p in patchers.items()}
        for p in patchers.values():
            self.addCleanup(p.stop)

        config = {"TESTING": True, "WTF_CSRF_ENABLED": False}
        config.update(self.app_config)
        self.app = create_app(config)
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()
        self.addCleanup(self.app_context.pop)

    def set_session_user(self, user_id: str) -> None:
        """Pin the anonymous session to a known user id."""
        with self.client.session_transaction() as sess:
            sess["user_id"] = user_id

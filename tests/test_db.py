"""Unit tests for the MongoDB record store, with a mocked client."""

from unittest.mock import MagicMock

import pytest
from pymongo import errors

from candidate_mailer.db import MongoDBManager


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def manager(collection):
    client = MagicMock()
    client.__getitem__.return_value.__getitem__.return_value = collection
    return MongoDBManager(client=client, db_name="test_db")


@pytest.mark.unit
class TestMongoDBManager:
    """Tests for MongoDBManager."""

    def test_get_hides_mongo_id(self, manager, collection):
        """Lookups are by id with _id projected out."""
        collection.find_one.return_value = {"id": "c1", "name": "Jane"}

        assert manager.get("candidates", "c1") == {"id": "c1", "name": "Jane"}
        collection.find_one.assert_called_once_with({"id": "c1"}, {"_id": 0})

    def test_put_assigns_id_and_upserts(self, manager, collection):
        """Records without an id get one; the caller's dict is not mutated."""
        record = {"name": "Jane"}

        record_id = manager.put("candidates", record)

        assert record_id
        assert "id" not in record
        filter_, doc = collection.replace_one.call_args.args
        assert filter_ == {"id": record_id}
        assert doc == {"name": "Jane", "id": record_id}
        assert collection.replace_one.call_args.kwargs == {"upsert": True}

    def test_put_keeps_existing_id(self, manager, collection):
        assert manager.put("recipientSelections", {"id": "c1"}) == "c1"

    def test_update_reports_match(self, manager, collection):
        """update returns whether a record matched and never rewrites id."""
        collection.update_one.return_value.matched_count = 1

        assert manager.update("candidates", "c1", {"id": "other", "notes": "hi"}) is True
        collection.update_one.assert_called_once_with({"id": "c1"}, {"$set": {"notes": "hi"}})

        collection.update_one.return_value.matched_count = 0
        assert manager.update("candidates", "missing", {"notes": "hi"}) is False

    def test_empty_update_checks_existence(self, manager, collection):
        collection.find_one.return_value = None
        assert manager.update("candidates", "c1", {}) is False
        collection.update_one.assert_not_called()

    def test_list_all(self, manager, collection):
        collection.find.return_value = iter([{"id": "a"}, {"id": "b"}])
        assert manager.list_all("candidates") == [{"id": "a"}, {"id": "b"}]
        collection.find.assert_called_once_with({}, {"_id": 0})

    def test_delete(self, manager, collection):
        collection.delete_one.return_value.deleted_count = 1
        assert manager.delete("candidates", "c1") is True
        collection.delete_one.assert_called_once_with({"id": "c1"})

    def test_driver_errors_become_runtime_errors(self, manager, collection):
        """pymongo failures surface as RuntimeError."""
        collection.find_one.side_effect = errors.PyMongoError("boom")

        with pytest.raises(RuntimeError, match="MongoDB read failed"):
            manager.get("candidates", "c1")

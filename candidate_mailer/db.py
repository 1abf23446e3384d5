# db.py
from typing import Any, Dict, List, Optional
import logging

from pymongo import MongoClient, errors

from .config import MONGO_URI, DB_NAME
from .models import new_record_id

logger = logging.getLogger(__name__)


class MongoDBManager:
    """Record store: JSON-like documents grouped in collections, keyed by ``id``."""

    def __init__(
        self,
        uri: str = MONGO_URI,
        db_name: str = DB_NAME,
        client: Optional[MongoClient] = None,
    ) -> None:
        try:
            self.client = client if client is not None else MongoClient(uri)
            self.db = self.client[db_name]
        except errors.PyMongoError as exc:
            raise RuntimeError(f"MongoDB connection failed: {exc}") from exc

    def _collection(self, name: str):
        return self.db[name]

    # ---------- Read ----------
    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self._collection(collection).find_one({"id": record_id}, {"_id": 0})
        except errors.PyMongoError as exc:
            raise RuntimeError(f"MongoDB read failed: {exc}") from exc

    def list_all(self, collection: str) -> List[Dict[str, Any]]:
        try:
            return list(self._collection(collection).find({}, {"_id": 0}))
        except errors.PyMongoError as exc:
            raise RuntimeError(f"MongoDB read failed: {exc}") from exc

    # ---------- Write ----------
    def put(self, collection: str, record: Dict[str, Any]) -> str:
        doc = dict(record)
        if not doc.get("id"):
            doc["id"] = new_record_id()
        try:
            # Use upsert so re-putting a record replaces it
            self._collection(collection).replace_one({"id": doc["id"]}, doc, upsert=True)
        except errors.PyMongoError as exc:
            raise RuntimeError(f"MongoDB write failed: {exc}") from exc
        logger.debug("Stored %s/%s", collection, doc["id"])
        return doc["id"]

    def update(self, collection: str, record_id: str, partial: Dict[str, Any]) -> bool:
        updates = {k: v for k, v in partial.items() if k not in ("id", "_id")}
        if not updates:
            return self.get(collection, record_id) is not None
        try:
            result = self._collection(collection).update_one(
                {"id": record_id},
                {"$set": updates},
            )
        except errors.PyMongoError as exc:
            raise RuntimeError(f"MongoDB write failed: {exc}") from exc
        return result.matched_count > 0

    def delete(self, collection: str, record_id: str) -> bool:
        try:
            result = self._collection(collection).delete_one({"id": record_id})
        except errors.PyMongoError as exc:
            raise RuntimeError(f"MongoDB delete failed: {exc}") from exc
        return result.deleted_count > 0

"""
MongoDB helpers

`db` stays None when DATABASE_URL / DATABASE_NAME are not set; every
helper then raises DatabaseUnavailable instead of touching the network.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import MongoClient

from config import get_settings

logger = logging.getLogger(__name__)

_settings = get_settings()

_client = None
db = None

if _settings.database_url and _settings.database_name:
    _client = MongoClient(_settings.database_url)
    db = _client[_settings.database_name]


class DatabaseUnavailable(Exception):
    pass


def _require_db():
    if db is None:
        raise DatabaseUnavailable("Database not available. Set DATABASE_URL and DATABASE_NAME.")
    return db


def _object_id(doc_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(doc_id)
    except (InvalidId, TypeError):
        return None


def create_document(collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    """Insert a document stamped with created_at and return its id as a string."""
    database = _require_db()
    if isinstance(data, BaseModel):
        data_dict = data.model_dump()
    else:
        data_dict = dict(data)
    data_dict["created_at"] = datetime.now(timezone.utc)
    result = database[collection_name].insert_one(data_dict)
    return str(result.inserted_id)


def get_documents(collection_name: str,
                  filter_dict: Optional[Dict[str, Any]] = None,
                  sort: Optional[Sequence[Tuple[str, int]]] = None,
                  limit: Optional[int] = None) -> List[Dict[str, Any]]:
    database = _require_db()
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(list(sort))
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def get_document(collection_name: str, doc_id: str,
                 filter_dict: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    database = _require_db()
    oid = _object_id(doc_id)
    if oid is None:
        return None
    query = dict(filter_dict or {})
    query["_id"] = oid
    return database[collection_name].find_one(query)


def delete_document(collection_name: str, doc_id: str,
                    filter_dict: Optional[Dict[str, Any]] = None) -> int:
    """Delete one document by id; returns the number of documents removed (0 or 1)."""
    database = _require_db()
    oid = _object_id(doc_id)
    if oid is None:
        return 0
    query = dict(filter_dict or {})
    query["_id"] = oid
    return database[collection_name].delete_one(query).deleted_count

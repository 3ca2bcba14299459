"""Saved designs: snapshots of a configuration owned by a user."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pymongo import DESCENDING

import database
from schemas import Design, SneakerConfiguration

logger = logging.getLogger(__name__)

COLLECTION = "design"
NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def normalize_tags(tags: Iterable[str]) -> List[str]:
    """Trim and lowercase tags, dropping blanks and case-insensitive duplicates."""
    seen = set()
    res = []
    for tag in tags:
        t = tag.strip().lower()
        if t and t not in seen:
            seen.add(t)
            res.append(t)
    return res


def serialize(doc: Dict[str, Any]) -> Dict[str, Any]:
    doc = dict(doc)
    doc["_id"] = str(doc.get("_id"))
    return doc


def save_design(user_id: str, product_id: str, name: str,
                configuration: SneakerConfiguration, tags: Iterable[str] = ()) -> str:
    doc = Design(
        userId=user_id,
        productId=product_id,
        name=name.strip(),
        configuration=configuration,
        tags=normalize_tags(tags),
    )
    inserted_id = database.create_document(COLLECTION, doc)
    logger.info("Saved design %s for user %s", inserted_id, user_id)
    return inserted_id


def matches(doc: Dict[str, Any], q: Optional[str]) -> bool:
    if not q:
        return True
    query = q.lower()
    if query in doc.get("name", "").lower():
        return True
    return any(query in tag.lower() for tag in doc.get("tags", []))


def list_designs(user_id: str, q: Optional[str] = None) -> List[Dict[str, Any]]:
    """Designs owned by ``user_id``, newest first, optionally filtered by name or tag."""
    docs = database.get_documents(COLLECTION, {"userId": user_id}, sort=NEWEST_FIRST)
    return [serialize(d) for d in docs if matches(d, q)]


def get_design(design_id: str, user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    filt = {"userId": user_id} if user_id else None
    doc = database.get_document(COLLECTION, design_id, filt)
    return serialize(doc) if doc else None


def delete_design(design_id: str, user_id: str) -> bool:
    """True only for the call that actually removed the design."""
    deleted = database.delete_document(COLLECTION, design_id, {"userId": user_id})
    if deleted:
        logger.info("Deleted design %s for user %s", design_id, user_id)
    return deleted == 1

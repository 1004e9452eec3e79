"""
MongoDB repository for deck access.

Provides functions to query and retrieve words (flashcards) from the deck.
The deck is read-only here; words are created by the import tooling.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from pydantic import ValidationError
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection

from core.config import get_mongo_uri
from core.schemas import Word

logger = logging.getLogger(__name__)

# Configuration
DB_NAME = "hanzi_trainer"
COLLECTION_NAME = "words"

# Global connection pool (reused across requests)
_client: Optional[MongoClient] = None
_collection: Optional[Collection] = None


# ---- Connection Management ----

def get_collection() -> Collection:
    """
    Get a connection to the MongoDB words collection.

    Uses a persistent connection pool that's reused across requests.

    Returns:
        MongoDB collection object
    """
    global _client, _collection

    if _collection is not None:
        return _collection

    _client = MongoClient(
        get_mongo_uri(),
        maxPoolSize=10,  # Connection pool size
        minPoolSize=1,   # Keep at least 1 connection alive
        maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
    )
    _collection = _client[DB_NAME][COLLECTION_NAME]

    return _collection


# ---- Query Functions ----

def _to_word(doc: dict) -> Optional[Word]:
    try:
        return Word.model_validate(doc)
    except ValidationError as exc:
        logger.warning("Skipping malformed word document %s: %s", doc.get("_id"), exc.errors()[:1])
        return None


def get_all_words(
    category_id: Optional[str] = None,
    lesson_id: Optional[str] = None
) -> list[Word]:
    """
    Get all words in deck order (insertion order of `position`, then id).

    Args:
        category_id: If provided, only words in this category
        lesson_id: If provided, only words in this lesson

    Returns:
        List of Word models
    """
    collection = get_collection()

    query = {}
    if category_id:
        query["category.id"] = category_id
    if lesson_id:
        query["lesson.id"] = lesson_id

    cursor = collection.find(query).sort([("position", ASCENDING), ("word_id", ASCENDING)])
    return [word for word in (_to_word(doc) for doc in cursor) if word is not None]


def get_word_by_id(word_id: str) -> Optional[Word]:
    """
    Get a specific word by its id.

    Returns:
        Word, or None if not found
    """
    doc = get_collection().find_one({"word_id": word_id})
    if doc is None:
        return None
    return _to_word(doc)


def filter_words(
    words: Sequence[Word],
    category_id: Optional[str] = None,
    lesson_id: Optional[str] = None
) -> list[Word]:
    """
    Filter an already loaded word list by category and/or lesson.

    Empty filters mean "All". Order is preserved.
    """
    result = list(words)
    if category_id:
        result = [w for w in result if w.category is not None and w.category.id == category_id]
    if lesson_id:
        result = [w for w in result if w.lesson is not None and w.lesson.id == lesson_id]
    return result


def deck_card_ids(words: Sequence[Word]) -> list[str]:
    """
    Ordered card ids for the queue builder (duplicates dropped, first wins).
    """
    seen: set[str] = set()
    ids = []
    for word in words:
        if word.id in seen:
            continue
        seen.add(word.id)
        ids.append(word.id)
    return ids

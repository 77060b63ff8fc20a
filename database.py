import logging
from typing import Any, List

from bson import ObjectId
from pymongo import AsyncMongoClient

import config

logger = logging.getLogger('uvicorn.error')


def create_client() -> AsyncMongoClient:
    # Connecting is lazy; the first query surfaces an unreachable server.
    # timeoutMS bounds every operation, reads included.
    return AsyncMongoClient(
        config.DATABASE_URL,
        serverSelectionTimeoutMS=config.DATABASE_TIMEOUT_MS,
        timeoutMS=config.DATABASE_TIMEOUT_MS,
        tz_aware=True,
    )


def document_id_candidates(value: Any) -> List[Any]:
    """
    The forms an id received over HTTP may be stored under.

    A 24-hex string can be either a string ``_id`` or the text of an ObjectId;
    only the store knows which, so both are returned.
    """
    candidates = [value]
    if isinstance(value, str) and ObjectId.is_valid(value):
        candidates.append(ObjectId(value))
    return candidates

"""MongoDB connection helpers."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Tuple

from pymongo import MongoClient
from pymongo.database import Database

from user_api.config import settings

logger = logging.getLogger(__name__)

_clients: Dict[Tuple[str, frozenset], MongoClient] = {}


def get_client(uri: str, **kwargs: Any) -> MongoClient:
    """
    Return a cached MongoClient keyed by URI and options.
    PyMongo manages the connection pool behind each client.
    """
    key = (uri, frozenset(kwargs.items()))
    if key not in _clients:
        _clients[key] = MongoClient(uri, **kwargs)
    return _clients[key]


def close_clients() -> None:
    """Close every cached client (application shutdown)."""
    while _clients:
        _, client = _clients.popitem()
        client.close()
    logger.info("Disconnected from MongoDB")


def get_database() -> Database:
    """Return a MongoDB database handle (non-dependency use)."""
    client = get_client(
        settings.MONGODB_URI,
        timeoutMS=settings.MONGODB_TIMEOUT_MS,
        serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
    )
    return client[settings.MONGODB_DB_NAME]


def get_db() -> Iterator[Database]:
    """FastAPI dependency that yields a database handle."""
    db = get_database()
    try:
        yield db
    finally:
        # Clients are cached; no explicit close here.
        pass

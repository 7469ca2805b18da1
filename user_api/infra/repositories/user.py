"""Repository for users (infra layer)."""

import logging
from typing import List, Optional, Tuple

from pymongo import ASCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from user_api.config import settings
from user_api.domain.entities import User
from user_api.errors import ConflictError, EmailTakenError
from user_api.infra.repositories.base import BaseRepository, store_errors
from user_api.services.user_query import UserQuery

logger = logging.getLogger(__name__)


def _conflict_from(exc: DuplicateKeyError) -> ConflictError:
    key_pattern = (exc.details or {}).get("keyPattern") or {}
    fields = set(key_pattern) or {
        name for name in ("profile.nin", "email") if f"index: {name}_" in str(exc)
    }
    if "profile.nin" in fields:
        return ConflictError("national ID is already in use")
    if "email" in fields:
        return EmailTakenError()
    return ConflictError("user already exists")


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Database, collection_name: Optional[str] = None):
        super().__init__(
            db, collection_name or settings.MONGODB_USERS_COLLECTION, User
        )

    def ensure_indexes(self) -> None:
        with store_errors():
            self.collection.create_index("email", unique=True)
            self.collection.create_index("created_at")
            self.collection.create_index(
                [("profile.first_name", ASCENDING), ("profile.last_name", ASCENDING)]
            )
            self.collection.create_index("profile.phone", sparse=True)
            self.collection.create_index("profile.nin", sparse=True, unique=True)

    def find_by_email(self, email: str) -> Optional[User]:
        return self.find_one({"email": email})

    def insert(self, user: User) -> User:
        """Insert a new user.

        The unique indexes are the authoritative guard against duplicates;
        a violation surfaces as a conflict.
        """
        try:
            self.insert_one(user.to_mongo())
        except DuplicateKeyError as exc:
            raise _conflict_from(exc) from exc
        return user

    def list_users(self, query: UserQuery) -> Tuple[List[User], int]:
        """Count matches, then read one sorted, projected page of them.

        The count and the page are two separate reads and may observe
        different states under concurrent writes.
        """
        total_count = self.count(query.filter)
        users = self.find_many(
            query.filter,
            projection=query.projection,
            sort=query.sort,
            skip=query.skip,
            limit=query.limit,
        )
        return users, total_count

    def update_user(self, user: User) -> bool:
        user.mark_updated()
        doc = user.to_mongo()
        doc.pop("_id", None)
        try:
            return self.update(user.id, doc)
        except DuplicateKeyError as exc:
            raise _conflict_from(exc) from exc

    def delete_user(self, user_id: str) -> bool:
        deleted = self.delete(user_id)
        if not deleted:
            logger.debug("Delete of absent user %s ignored", user_id)
        return deleted


__all__ = ["UserRepository"]

"""Base repository providing common MongoDB CRUD helpers."""

from abc import ABC
from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from user_api.errors import StoreError


T = TypeVar("T", bound=BaseModel)


@contextmanager
def store_errors() -> Iterator[None]:
    """Re-raise driver and decode failures as StoreError.

    Unique index violations pass through for the caller to map.
    """
    try:
        yield
    except DuplicateKeyError:
        raise
    except PyMongoError as exc:
        raise StoreError(str(exc)) from exc
    except ModelValidationError as exc:
        raise StoreError(f"failed to decode document: {exc}") from exc


class BaseRepository(ABC, Generic[T]):
    """Base repository providing common CRUD operations for MongoDB collections.

    Identifiers are opaque strings generated by the application, so ``_id``
    values are used as-is rather than converted to ObjectId.
    """

    def __init__(self, db: Database, collection_name: str, model_class: Type[T]):
        self.db = db
        self.collection_name = collection_name
        self.collection: Collection = db[collection_name]
        self.model_class = model_class

    def find_by_id(self, entity_id: str) -> Optional[T]:
        return self.find_one({"_id": entity_id})

    def find_one(self, query: Dict[str, Any]) -> Optional[T]:
        with store_errors():
            doc = self.collection.find_one(query)
            return self._to_model(doc)

    def find_many(
        self,
        query: Dict[str, Any],
        projection: Optional[Dict[str, int]] = None,
        sort: Optional[List[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[T]:
        with store_errors():
            cursor = self.collection.find(query, projection)
            if sort:
                cursor = cursor.sort(sort)
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)
            return [self._to_model(doc) for doc in cursor]

    def count(self, query: Dict[str, Any]) -> int:
        with store_errors():
            return self.collection.count_documents(query)

    def insert_one(self, doc: Dict[str, Any]) -> str:
        with store_errors():
            result = self.collection.insert_one(doc)
            return result.inserted_id

    def update(self, entity_id: str, update_data: Dict[str, Any]) -> bool:
        with store_errors():
            result = self.collection.update_one(
                {"_id": entity_id}, {"$set": update_data}
            )
            return result.matched_count > 0

    def delete(self, entity_id: str) -> bool:
        with store_errors():
            result = self.collection.delete_one({"_id": entity_id})
            return result.deleted_count > 0

    def _to_model(self, doc: Optional[Dict[str, Any]]) -> Optional[T]:
        if not doc:
            return None
        return self.model_class.model_validate(doc)

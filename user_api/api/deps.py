"""Common dependency aliases for API endpoints."""

from fastapi import Depends
from pymongo.database import Database

from user_api.database.mongo import get_db
from user_api.infra.repositories.user import UserRepository
from user_api.services.user_service import UserService


def get_user_repository(db: Database = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_user_service(
    users: UserRepository = Depends(get_user_repository),
) -> UserService:
    return UserService(users)


__all__ = ["get_db", "get_user_repository", "get_user_service"]

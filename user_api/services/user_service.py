"""User account service using repository pattern"""

import logging
from typing import Optional

from user_api.core.security import hash_password, verify_password
from user_api.domain.entities import (
    Profile,
    User,
    normalize_email,
    validate_email,
)
from user_api.errors import EmailTakenError, InvalidCredentialsError, NotFoundError
from user_api.infra.repositories.user import UserRepository
from user_api.services.user_query import (
    ListOptions,
    PagedResult,
    assemble_page,
    build_user_query,
)

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, users: UserRepository):
        self.users = users

    def register(self, email: str, password: str, profile: Profile) -> User:
        email = validate_email(email)
        # Fast path for a friendly error; the unique index settles races
        if self.users.find_by_email(email) is not None:
            raise EmailTakenError()
        user = User.new(email, hash_password(password), profile)
        self.users.insert(user)
        logger.info("Registered user %s", user.id)
        return user

    def list_users(self, options: Optional[ListOptions] = None) -> PagedResult:
        options = options or ListOptions()
        users, total_count = self.users.list_users(build_user_query(options))
        return assemble_page(users, total_count, options)

    def get_user_by_id(self, user_id: str) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("user not found")
        return user

    def get_user_by_email(self, email: str) -> User:
        user = self.users.find_by_email(normalize_email(email))
        if user is None:
            raise NotFoundError("user not found")
        return user

    def update_user(self, user: User) -> User:
        if not self.users.update_user(user):
            raise NotFoundError("user not found")
        return user

    def update_profile(self, user_id: str, profile: Profile) -> User:
        user = self.get_user_by_id(user_id)
        user.profile = profile
        return self.update_user(user)

    def delete_user(self, user_id: str) -> None:
        """Delete a user; deleting an absent id is a no-op."""
        if self.users.delete_user(user_id):
            logger.info("Deleted user %s", user_id)

    def authenticate(self, email: str, password: str) -> User:
        user = self.users.find_by_email(normalize_email(email))
        if user is None or not verify_password(user.password_hash, password):
            raise InvalidCredentialsError()
        return user

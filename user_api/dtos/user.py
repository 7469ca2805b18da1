"""User DTOs"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from user_api.domain.entities import Profile, User
from user_api.services.user_query import PagedResult


class ErrorResponse(BaseModel):
    error: str


class MessageResponse(BaseModel):
    message: str


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=1, examples=["john.doe@example.com"])
    password: str = Field(..., min_length=6, examples=["securePassword123"])
    profile: Profile


class RegisterResponse(MessageResponse):
    id: str


class ProfileUpdateRequest(BaseModel):
    profile: Profile


class UserResponse(BaseModel):
    """Outward view of a user; the password hash is never part of it.

    Built from whatever the entity actually carries, so a projected read
    only reports the projected fields when serialized with
    ``exclude_unset``.
    """

    id: Optional[str] = Field(default=None, alias="_id")
    email: Optional[str] = None
    profile: Optional[Profile] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        data = user.model_dump(exclude_unset=True, exclude={"password_hash"})
        return cls.model_validate(data)


class UserListResponse(BaseModel):
    users: List[UserResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def from_page(cls, result: PagedResult) -> "UserListResponse":
        return cls(
            users=[UserResponse.from_entity(user) for user in result.users],
            total_count=result.total_count,
            page=result.page,
            page_size=result.page_size,
            total_pages=result.total_pages,
        )

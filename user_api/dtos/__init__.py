"""Data Transfer Objects (DTOs) for API requests and responses"""

from .user import (
    ErrorResponse,
    MessageResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    RegisterResponse,
    UserListResponse,
    UserResponse,
)

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "RegisterResponse",
    "UserListResponse",
    "UserResponse",
]

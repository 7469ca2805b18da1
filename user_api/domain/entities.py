"""User entity - represents a user account in the database"""

import os
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from user_api.errors import ValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_id() -> str:
    """Return a time-ordered UUID (version 7) string."""
    unix_ms = time.time_ns() // 1_000_000
    rand = int.from_bytes(os.urandom(10), "big")
    value = (unix_ms & 0xFFFF_FFFF_FFFF) << 80
    value |= 0x7 << 76
    value |= ((rand >> 62) & 0xFFF) << 64
    value |= 0b10 << 62
    value |= rand & ((1 << 62) - 1)
    return str(uuid.UUID(int=value))


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_email(email: str) -> str:
    """Return the normalized email, rejecting values without an @."""
    email = normalize_email(email)
    if "@" not in email:
        raise ValidationError("invalid email address")
    return email


class BaseEntity(BaseModel):
    """Base entity with common fields for all database entities"""

    id: str = Field(default_factory=generate_id, alias="_id")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(populate_by_name=True)

    def to_mongo(self) -> Dict[str, Any]:
        """Convert to MongoDB document"""
        return self.model_dump(by_alias=True, exclude_none=True)

    def mark_updated(self):
        """Mark entity as updated with current timestamp"""
        self.updated_at = utcnow()
        return self


class Address(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None


class Profile(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[Address] = None
    phone: Optional[str] = None
    birthdate: Optional[str] = None
    # National identification number, unique when present
    nin: Optional[str] = None


class User(BaseEntity):
    """A registered account.

    Documents read with a projection only carry the projected keys; the
    missing fields keep their defaults and stay out of ``model_fields_set``.
    """

    email: str = ""
    password_hash: str = Field(default="", repr=False)
    profile: Profile = Field(default_factory=Profile)

    @classmethod
    def new(cls, email: str, password_hash: str, profile: Profile) -> "User":
        email = validate_email(email)
        now = utcnow()
        return cls(
            id=generate_id(),
            email=email,
            password_hash=password_hash,
            profile=profile,
            created_at=now,
            updated_at=now,
        )


__all__ = [
    "Address",
    "BaseEntity",
    "Profile",
    "User",
    "generate_id",
    "normalize_email",
    "utcnow",
    "validate_email",
]

"""Error taxonomy shared by the repository, service and HTTP layers."""

from typing import Iterable


class UserApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(UserApiError):
    status_code = 400


class InvalidSortFieldError(ValidationError):
    def __init__(self, valid_fields: Iterable[str]):
        super().__init__(
            "Invalid sort field. Valid options: " + ", ".join(valid_fields)
        )


class ConflictError(UserApiError):
    status_code = 409


class EmailTakenError(ConflictError):
    def __init__(self, message: str = "email is already in use"):
        super().__init__(message)


class NotFoundError(UserApiError):
    status_code = 404


class InvalidCredentialsError(UserApiError):
    status_code = 401

    def __init__(self, message: str = "invalid email or password"):
        super().__init__(message)


class StoreError(UserApiError):
    """Underlying persistence failure (connectivity, timeout, decode)."""

    status_code = 500


__all__ = [
    "UserApiError",
    "ValidationError",
    "InvalidSortFieldError",
    "ConflictError",
    "EmailTakenError",
    "NotFoundError",
    "InvalidCredentialsError",
    "StoreError",
]

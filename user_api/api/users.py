"""User management endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from user_api.api.deps import get_user_service
from user_api.dtos import (
    ErrorResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    RegisterResponse,
    UserListResponse,
    UserResponse,
)
from user_api.services.user_query import SORT_FIELDS, parse_list_options
from user_api.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get(
    "",
    response_model=UserListResponse,
    response_model_by_alias=False,
    response_model_exclude_unset=True,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
)
def list_users(
    page: Optional[str] = Query(default=None, description="Page number (1-based)"),
    page_size: Optional[str] = Query(
        default=None, description="Users per page, between 1 and 100"
    ),
    search: Optional[str] = Query(
        default=None, description="Search term for email, first name or last name"
    ),
    sort: Optional[str] = Query(
        default=None, description=f"Sort field, one of: {', '.join(SORT_FIELDS)}"
    ),
    order: Optional[str] = Query(default=None, description="asc or desc"),
    fields: Optional[str] = Query(
        default=None, description="Comma-separated list of fields to include"
    ),
    service: UserService = Depends(get_user_service),
):
    """List users with pagination, search, sorting and field selection."""
    options = parse_list_options(
        page=page,
        page_size=page_size,
        search=search,
        sort=sort,
        order=order,
        fields=fields,
    )
    return UserListResponse.from_page(service.list_users(options))


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: _ERRORS[400],
        409: {"model": ErrorResponse},
        500: _ERRORS[500],
    },
)
def register_user(
    payload: RegisterRequest,
    service: UserService = Depends(get_user_service),
):
    """Register a new user account. The password is hashed before storage."""
    user = service.register(payload.email, payload.password, payload.profile)
    return RegisterResponse(message="User registered successfully", id=user.id)


@router.get(
    "/email/{email}",
    response_model=UserResponse,
    response_model_by_alias=False,
    responses=_ERRORS,
)
def get_user_by_email(
    email: str = Path(..., description="User email address"),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_entity(service.get_user_by_email(email))


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    response_model_by_alias=False,
    responses=_ERRORS,
)
def get_user(
    user_id: str = Path(..., description="User id (UUID)"),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_entity(service.get_user_by_id(user_id))


@router.put(
    "/{user_id}/profile",
    response_model=UserResponse,
    response_model_by_alias=False,
    responses={**_ERRORS, 409: {"model": ErrorResponse}},
)
def update_user_profile(
    payload: ProfileUpdateRequest,
    user_id: str = Path(..., description="User id (UUID)"),
    service: UserService = Depends(get_user_service),
):
    """Replace the profile of an existing user."""
    user = service.update_profile(user_id, payload.profile)
    return UserResponse.from_entity(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={500: _ERRORS[500]},
)
def delete_user(
    user_id: str = Path(..., description="User id (UUID)"),
    service: UserService = Depends(get_user_service),
):
    """Delete a user. Deleting an id that no longer exists also succeeds."""
    service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

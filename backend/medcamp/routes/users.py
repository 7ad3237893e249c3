"""
MedCamp Backend — User Routes
===============================

Emails in paths and query strings are matched case-insensitively
(UserDirectory lowercases them).
"""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query

from medcamp.dependencies import get_user_directory
from medcamp.schemas.common import ErrorResponse
from medcamp.schemas.user import (
    RoleResponse,
    UserCreate,
    UserCreateResponse,
    UserResponse,
    UserUpdate,
    UserUpdateResponse,
)
from medcamp.services.user_service import UserDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def _update_message(modified: bool) -> str:
    return "Profile updated successfully" if modified else "No changes made, but profile is valid"


@router.get(
    "",
    response_model=Union[List[UserResponse], UserResponse],
    responses={404: {"model": ErrorResponse}},
    summary="List users, or fetch one by ?email=",
)
async def list_users(
    email: Optional[str] = Query(default=None, description="Return only the user with this email"),
    users: UserDirectory = Depends(get_user_directory),
):
    if email:
        return UserResponse.model_validate(await users.get(email))
    return [UserResponse.model_validate(u) for u in await users.list()]


@router.get("/role/{email}", response_model=RoleResponse, summary="Get a user's role")
async def get_role(email: str, users: UserDirectory = Depends(get_user_directory)) -> RoleResponse:
    """Unknown emails report the default role 'user'."""
    return RoleResponse(role=await users.get_role(email))


@router.get(
    "/{email}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a user by email",
)
async def get_user(email: str, users: UserDirectory = Depends(get_user_directory)) -> UserResponse:
    return UserResponse.model_validate(await users.get(email))


@router.post(
    "",
    status_code=201,
    response_model=UserCreateResponse,
    responses={409: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Create a user on first sign-in",
)
async def create_user(
    payload: UserCreate,
    users: UserDirectory = Depends(get_user_directory),
) -> UserCreateResponse:
    user = await users.create(payload.model_dump(exclude_none=True))
    return UserCreateResponse(inserted_id=user["id"], user=UserResponse.model_validate(user))


@router.patch(
    "/{email}",
    response_model=UserUpdateResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update profile fields by email",
)
async def update_user_by_email(
    email: str,
    payload: UserUpdate,
    users: UserDirectory = Depends(get_user_directory),
) -> UserUpdateResponse:
    user, modified = await users.update_profile(email, payload.model_dump(exclude_none=True))
    return UserUpdateResponse(message=_update_message(modified), user=UserResponse.model_validate(user))


@router.put(
    "/{user_id}",
    response_model=UserUpdateResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update profile fields by user ID",
)
async def update_user_by_id(
    user_id: str,
    payload: UserUpdate,
    users: UserDirectory = Depends(get_user_directory),
) -> UserUpdateResponse:
    user, modified = await users.update_by_id(user_id, payload.model_dump(exclude_none=True))
    return UserUpdateResponse(message=_update_message(modified), user=UserResponse.model_validate(user))

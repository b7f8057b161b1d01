"""User management API routes."""

from uuid import UUID

from fastapi import Query, status

from rolematrix.core.constants import FILTER_ALL
from rolematrix.modules.users import router
from rolematrix.modules.users.schemas import (
    UserCreate,
    UserListResponse,
    UserPasswordReset,
    UserResponse,
    UserRoleUpdate,
    UserStatsResponse,
    UserUpdate,
)
from rolematrix.modules.users.services import UserSvc


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="List users, optionally filtered by search term, role, department and status.",
)
async def list_users(
    service: UserSvc,
    search: str = Query("", description="Matches name, email or role"),
    role: str = Query(FILTER_ALL),
    department: str = Query(FILTER_ALL),
    user_status: str = Query(FILTER_ALL, alias="status"),
) -> UserListResponse:
    """List users."""
    users = service.list_users(search, role, department, user_status)
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=len(users),
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add user",
)
async def add_user(data: UserCreate, service: UserSvc) -> UserResponse:
    """Add a user."""
    return UserResponse.model_validate(service.add_user(data))


@router.get(
    "/stats",
    response_model=UserStatsResponse,
    summary="User statistics",
    description="Total users, number of roles and inactive users.",
)
async def user_stats(service: UserSvc) -> UserStatsResponse:
    """User statistics."""
    return service.stats()


@router.get("/{user_id}", response_model=UserResponse, summary="Get user by ID")
async def get_user(user_id: UUID, service: UserSvc) -> UserResponse:
    """Get user by ID."""
    return UserResponse.model_validate(service.get_user(user_id))


@router.patch("/{user_id}", response_model=UserResponse, summary="Edit user details")
async def update_user(user_id: UUID, data: UserUpdate, service: UserSvc) -> UserResponse:
    """Update name, email or department."""
    return UserResponse.model_validate(service.update_user(user_id, data))


@router.post("/{user_id}/role", response_model=UserResponse, summary="Change user role")
async def change_role(
    user_id: UUID, data: UserRoleUpdate, service: UserSvc
) -> UserResponse:
    """Change a user's role."""
    return UserResponse.model_validate(service.change_role(user_id, data.role))


@router.post(
    "/{user_id}/password",
    response_model=UserResponse,
    summary="Reset password",
)
async def reset_password(
    user_id: UUID, data: UserPasswordReset, service: UserSvc
) -> UserResponse:
    """Set a new password for a user."""
    return UserResponse.model_validate(
        service.reset_password(user_id, data.new_password)
    )


@router.post(
    "/{user_id}/toggle-status",
    response_model=UserResponse,
    summary="Activate or deactivate user",
)
async def toggle_status(user_id: UUID, service: UserSvc) -> UserResponse:
    """Flip a user between Active and Inactive."""
    return UserResponse.model_validate(service.toggle_status(user_id))


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
)
async def delete_user(user_id: UUID, service: UserSvc) -> None:
    """Delete a user."""
    service.delete_user(user_id)

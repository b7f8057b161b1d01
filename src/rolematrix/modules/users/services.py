"""User service for business logic."""

from collections.abc import Sequence
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends, Request

from rolematrix.core.constants import FILTER_ALL, STATUS_ACTIVE, STATUS_INACTIVE
from rolematrix.core.errors import ConflictError, NotFoundError, ValidationError
from rolematrix.core.security import hash_password
from rolematrix.modules.users.models import User
from rolematrix.modules.users.repos import UserRepo, UserRepository
from rolematrix.modules.users.schemas import UserCreate, UserStatsResponse, UserUpdate


logger = structlog.get_logger()


class UserService:
    """Service for user management operations.

    Contains the add / edit / change-role / reset-password / status
    operations of the User Management tab, and its list filtering.
    """

    def __init__(self, repo: UserRepository, roles: Sequence[str]) -> None:
        self.repo = repo
        self.roles = tuple(roles)

    def _check_role(self, role: str) -> None:
        if role not in self.roles:
            raise ValidationError(
                "Unknown role",
                errors=[{"field": "role", "message": f"Must be one of {list(self.roles)}"}],
            )

    def _check_email_free(self, email: str, user_id: UUID | None = None) -> None:
        existing = self.repo.get_by_email(email)
        if existing and existing.id != user_id:
            raise ConflictError(
                "Email already registered",
                error_code="email_exists",
                details={"email": email},
            )

    def get_user(self, user_id: UUID) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If user not found
        """
        user = self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(
                "User not found",
                resource="user",
                resource_id=str(user_id),
            )
        return user

    def list_users(
        self,
        search: str = "",
        role: str = FILTER_ALL,
        department: str = FILTER_ALL,
        status: str = FILTER_ALL,
    ) -> list[User]:
        """List users matching the search box and the three filters.

        The search term matches name, email or role, ignoring case. Each
        filter is either "all" or an exact value.
        """
        term = search.strip().lower()
        return [
            user
            for user in self.repo.list_all()
            if (
                not term
                or term in user.name.lower()
                or term in user.email.lower()
                or term in user.role.lower()
            )
            and role in (FILTER_ALL, user.role)
            and department in (FILTER_ALL, user.department)
            and status in (FILTER_ALL, user.status)
        ]

    def add_user(self, data: UserCreate) -> User:
        """Create a new user.

        Raises:
            ValidationError: If name or email is blank, or the role is unknown
            ConflictError: If the email is already registered
        """
        missing = [
            {"field": name, "message": "Field required"}
            for name in ("name", "email")
            if not getattr(data, name).strip()
        ]
        if missing:
            raise ValidationError("Name and Email are required", errors=missing)

        self._check_role(data.role)
        self._check_email_free(data.email)

        user = self.repo.create(
            User(
                name=data.name.strip(),
                email=data.email,
                role=data.role,
                department=data.department,
            )
        )
        logger.info("user_added", user_id=str(user.id), role=user.role)
        return user

    def update_user(self, user_id: UUID, data: UserUpdate) -> User:
        """Edit name, email and department.

        Raises:
            NotFoundError: If user not found
            ConflictError: If the new email belongs to another user
        """
        user = self.get_user(user_id)

        if data.email and data.email != user.email:
            self._check_email_free(data.email, user.id)
            user.email = data.email
        if data.name:
            user.name = data.name
        if data.department is not None:
            user.department = data.department

        return self.repo.update(user)

    def change_role(self, user_id: UUID, role: str) -> User:
        """Assign a different role.

        Raises:
            NotFoundError: If user not found
            ValidationError: If the role is unknown
        """
        self._check_role(role)
        user = self.get_user(user_id)
        previous = user.role
        user.role = role
        logger.info("user_role_changed", user_id=str(user_id), previous=previous, role=role)
        return self.repo.update(user)

    def reset_password(self, user_id: UUID, new_password: str) -> User:
        """Set a new password. Only its hash is kept."""
        user = self.get_user(user_id)
        user.password_hash = hash_password(new_password)
        logger.info("user_password_reset", user_id=str(user_id))
        return self.repo.update(user)

    def toggle_status(self, user_id: UUID) -> User:
        """Flip a user between Active and Inactive."""
        user = self.get_user(user_id)
        user.status = STATUS_INACTIVE if user.is_active else STATUS_ACTIVE
        logger.info("user_status_changed", user_id=str(user_id), status=user.status)
        return self.repo.update(user)

    def delete_user(self, user_id: UUID) -> None:
        """Delete a user.

        Raises:
            NotFoundError: If user not found
        """
        self.get_user(user_id)
        self.repo.delete(user_id)
        logger.info("user_deleted", user_id=str(user_id))

    def stats(self) -> UserStatsResponse:
        users = self.repo.list_all()
        return UserStatsResponse(
            total_users=len(users),
            active_roles=len(self.roles),
            inactive_users=sum(1 for user in users if not user.is_active),
        )


def get_user_service(request: Request, repo: UserRepo) -> UserService:
    """Build a UserService bound to the application's roles."""
    return UserService(repo, request.app.state.permission_store.roles)


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(get_user_service)]

"""In-memory user repository."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request

from rolematrix.modules.users.models import User


class UserRepository:
    """Repository for User records.

    Records live in a dict for the lifetime of the application; insertion
    order is the listing order.
    """

    def __init__(self, users: list[User] | None = None) -> None:
        self._users: dict[UUID, User] = {user.id: user for user in users or []}

    def create(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def get_by_id(self, user_id: UUID) -> User | None:
        return self._users.get(user_id)

    def get_by_email(self, email: str) -> User | None:
        """Get a user by email, ignoring case."""
        email = email.lower()
        return next(
            (user for user in self._users.values() if user.email.lower() == email),
            None,
        )

    def list_all(self) -> list[User]:
        return list(self._users.values())

    def update(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def delete(self, user_id: UUID) -> None:
        self._users.pop(user_id, None)


def get_user_repo(request: Request) -> UserRepository:
    """Return the application's user repository."""
    return request.app.state.user_repo


UserRepo = Annotated[UserRepository, Depends(get_user_repo)]

"""User account model."""

from datetime import UTC, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from rolematrix.core.constants import (
    MAX_DEPARTMENT_LENGTH,
    MAX_NAME_LENGTH,
    STATUS_ACTIVE,
)


UserStatus = Literal["Active", "Inactive"]


class User(BaseModel):
    """A user account managed from the Users & Roles screen.

    Attributes:
        id: Generated identifier
        name: Display name
        email: Unique email address
        role: One of the store's roles
        department: Free-text department (e.g. "IT", "Finance")
        status: "Active" or "Inactive"
        password_hash: Hash set by a password reset, never the plain text
    """

    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    email: EmailStr
    role: str
    department: str = Field("IT", max_length=MAX_DEPARTMENT_LENGTH)
    status: UserStatus = STATUS_ACTIVE
    password_hash: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

"""Users module for user account management."""

from fastapi import APIRouter


router = APIRouter(prefix="/users", tags=["users"])

# Import routes to register them (must be after router is defined)
from rolematrix.modules.users import routes  # noqa: F401, E402

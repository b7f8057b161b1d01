"""Permissions module exposing the role/permission matrix to the admin UI."""

from fastapi import APIRouter


router = APIRouter(prefix="/permissions", tags=["permissions"])

# Import routes to register them (must be after router is defined)
from rolematrix.modules.permissions import routes  # noqa: F401, E402

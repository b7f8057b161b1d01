"""Feature modules (permissions, users), each an API router package."""

import pkgutil
from importlib import import_module

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def discover_modules() -> list[APIRouter]:
    """Import every feature package here and collect its ``router``.

    Packages are visited in name order; a package without a ``router``
    attribute is skipped.
    """
    routers: list[APIRouter] = []
    for info in sorted(pkgutil.iter_modules(__path__), key=lambda m: m.name):
        if not info.ispkg or info.name.startswith("_"):
            continue
        package = import_module(f"{__name__}.{info.name}")
        router = getattr(package, "router", None)
        if isinstance(router, APIRouter):
            routers.append(router)
            logger.debug("module_loaded", module=info.name, prefix=router.prefix)
    return routers

# API router aggregation.
# Created: 2026-10-18
#
# mount_routers(app) registers all routers at /api/v1/.

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)

# Imported lazily inside mount_routers() so importing the package stays cheap.
_ROUTERS: list[tuple[str, str, str]] = [
    # (module_path, attr_name, tag)
    ("pulsedoctor.api.audit", "router", "Audit"),
]


def mount_routers(app: FastAPI) -> None:
    """Mount every router on *app* at ``/api/v1``."""
    import importlib

    from fastapi import APIRouter

    for module_path, attr_name, tag in _ROUTERS:
        mod = importlib.import_module(module_path)
        router: APIRouter = getattr(mod, attr_name)
        app.include_router(router, prefix="/api/v1")
        logger.debug("Mounted router: %s (%s)", module_path, tag)

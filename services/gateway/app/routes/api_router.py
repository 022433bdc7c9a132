"""Central router composition.

Mounts the individual route modules on one router so the app needs a single
`include_router(...)` call.
"""

from fastapi import APIRouter

from .data import router as data_router
from .health import router as health_router

router = APIRouter()

router.include_router(health_router)
router.include_router(data_router)

"""
app/api/routers package marker.
"""

from app.api.routers.health_router import router as health_router
from app.api.routers.scan_router import router as scan_router

__all__ = [
    "health_router",
    "scan_router",
]

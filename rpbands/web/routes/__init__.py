"""API routes."""

from rpbands.web.routes.bands_routes import router as bands_router
from rpbands.web.routes.health_routes import router as health_router

__all__ = ["bands_router", "health_router"]

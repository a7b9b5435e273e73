"""API routers for countdown-binge."""

from .shows import router as shows_router

__all__ = ["shows_router"]

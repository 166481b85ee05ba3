"""Cross-cutting API routers."""

from travelin_api.routers.auth import router as auth_router

__all__ = ["auth_router"]

from __future__ import annotations

from sessiongate.api.routes.admin import router as admin_router
from sessiongate.api.routes.health import router as health_router
from sessiongate.api.routes.license import router as license_router
from sessiongate.api.routes.session import router as session_router

__all__ = ["admin_router", "health_router", "license_router", "session_router"]

"""Application factory for the FastAPI app.

Centralizes app construction (stores, middleware, handlers, routers) so tests
can build isolated apps with their own stores and clocks.
"""

from __future__ import annotations

from fastapi import FastAPI

from sessiongate.adapters.license_store.base import AbstractLicenseStore
from sessiongate.adapters.license_store.in_memory import InMemoryLicenseStore
from sessiongate.adapters.rate_limit.base import AbstractRateLimiter
from sessiongate.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from sessiongate.adapters.session_store.base import AbstractSessionStore
from sessiongate.adapters.session_store.in_memory import InMemorySessionTokenStore
from sessiongate.api.routes import admin_router, health_router, license_router, session_router
from sessiongate.core.config import settings
from sessiongate.core.exception_handlers import setup_exception_handlers
from sessiongate.core.logging import configure_logging
from sessiongate.core.middleware import request_id_middleware
from sessiongate.core.openapi import apply_openapi_customizations


def create_app(
    *,
    session_store: AbstractSessionStore | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    license_store: AbstractLicenseStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Each app owns one instance of every store for its whole lifetime; state is
    intentionally ephemeral, so nothing is torn down on shutdown.

    Args:
        session_store: Session token store; a fresh in-memory one by default.
        rate_limiter: Attempt limiter; a fresh in-memory one by default.
        license_store: License register; a fresh in-memory one by default.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="SessionGate API",
        description=(
            "Single-use payment session tokens and per-client attempt throttling "
            "for the checkout hand-off."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    if session_store is None:
        session_store = InMemorySessionTokenStore()
    if rate_limiter is None:
        rate_limiter = InMemoryFixedWindowRateLimiter()
    if license_store is None:
        license_store = InMemoryLicenseStore()

    app.state.session_store = session_store
    app.state.rate_limiter = rate_limiter
    app.state.license_store = license_store

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(session_router, prefix="/v1")
    app.include_router(license_router, prefix="/v1")
    app.include_router(admin_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app

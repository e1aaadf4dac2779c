"""userhub API — FastAPI application factory and entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map AppError → structured JSON responses
    - Every stateful component (stores, service, limiter, notifier, auth) is built per
      create_app() call and exposed on app.state; two apps never share data
    - CORS configured from settings (not hardcoded)
    - Trailing slashes are stripped before routing, never redirected
    - Routed responses (including 4xx envelopes) carry the security headers of
      api/middleware.py

Design Decisions:
    - Factory over a bare module-level app: tests build isolated apps with their own
      Settings; `app` below is the instance uvicorn serves
    - Components built in the factory, not the lifespan: ASGI test transports don't run
      lifespan, and nothing here needs async setup
    - Lifespan only configures logging and announces startup/shutdown
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from userhub.api.auth import APIKeyAuth
from userhub.api.error_handlers import register_error_handlers
from userhub.api.middleware import SecurityHeadersMiddleware, TrailingSlashMiddleware
from userhub.api.routes import contact, health, users
from userhub.config import Settings, get_settings
from userhub.infrastructure.contact_store import ContactStore
from userhub.infrastructure.notifier import MockNotifier, build_notifier
from userhub.infrastructure.observability import setup_logging
from userhub.infrastructure.rate_limiter import SlidingWindowRateLimiter
from userhub.infrastructure.user_store import UserStore, sample_users
from userhub.services.user_service import UserService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    if isinstance(app.state.notifier, MockNotifier):
        logger.info("Board notifier running in mock mode")
    logger.info(
        f"userhub API started ({settings.environment})",
        extra={"action": "startup"},
    )
    yield
    logger.info("userhub API shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build a fully wired application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="userhub API", version=settings.app_version, lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.started_at = time.monotonic()

    user_store = UserStore(
        sample_users() if settings.seed_sample_data else None,
        latency_min_ms=settings.store_latency_min_ms,
        latency_max_ms=settings.store_latency_max_ms,
    )
    app.state.user_store = user_store
    app.state.user_service = UserService(user_store)
    app.state.contact_store = ContactStore()
    app.state.notifier = build_notifier(settings)
    app.state.auth = APIKeyAuth(settings)
    app.state.rate_limiter = SlidingWindowRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(TrailingSlashMiddleware)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        identity = getattr(request.state, "identity", None)
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - start) * 1000, 1),
                "identity": identity.name if identity else "Unauthenticated",
            },
        )
        return response

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(contact.router)

    register_error_handlers(app)
    return app


app = create_app()

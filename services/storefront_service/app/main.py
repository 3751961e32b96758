"""FastAPI application for the ReWeara storefront and admin API."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.logging import get_logger
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from libs.common.security import validate_secrets
from libs.db.config import Database
from services.storefront_service.routers import (
    account_router,
    admin_auth_router,
    admin_catalog_router,
    admin_content_router,
    admin_coupons_router,
    admin_dashboard_router,
    admin_orders_router,
    admin_settings_router,
    admin_super_router,
    ai_router,
    cart_router,
    catalog_router,
    contact_router,
    content_router,
    coupons_router,
    orders_router,
)
from services.storefront_service.services.admin_auth import ensure_bootstrap_admin
from slowapi.errors import RateLimitExceeded

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the database and run startup checks.

    Failures are recorded on ``app.state.startup_error`` instead of crashing,
    so ``/health`` can report them and DB routes answer 503.
    """
    settings = get_settings()
    app.state.startup_error = None
    app.state.database = None
    database = None

    try:
        ok, error = validate_secrets(settings)
        if not ok:
            raise RuntimeError(error)

        database = Database.from_settings(settings)
        await database.ping()

        async with database.session_factory() as session:
            await ensure_bootstrap_admin(session, settings)

        app.state.database = database
        logger.info("Storefront service started (%s)", settings.ENVIRONMENT)
    except Exception as e:
        logger.exception("Startup failed: %s", e)
        app.state.startup_error = str(e)

    try:
        yield
    finally:
        if database is not None:
            await database.dispose()


def create_app() -> FastAPI:
    """Create and configure the storefront FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="ReWeara API",
        version="0.1.0",
        description="Sustainable fashion storefront: catalog, cart, orders and admin console.",
        lifespan=lifespan,
    )
    app.state.startup_error = None

    # Rate limiter state
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Structured logging + request tracing
    add_observability_middleware(app)

    # Consistent {detail, code} error bodies
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check():
        error = getattr(app.state, "startup_error", None)
        if error:
            message = (
                "Service is not configured correctly"
                if get_settings().is_production
                else error
            )
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unhealthy", "message": message},
            )
        return {"status": "ok", "service": "storefront"}

    # Public storefront routes
    app.include_router(catalog_router, prefix="/api")
    app.include_router(cart_router, prefix="/api")
    app.include_router(orders_router, prefix="/api")
    app.include_router(coupons_router, prefix="/api")
    app.include_router(content_router, prefix="/api")
    app.include_router(ai_router, prefix="/api")
    app.include_router(contact_router, prefix="/api")
    app.include_router(account_router, prefix="/api")

    # Admin console routes
    app.include_router(admin_auth_router, prefix="/api/admin")
    app.include_router(admin_catalog_router, prefix="/api/admin")
    app.include_router(admin_orders_router, prefix="/api/admin")
    app.include_router(admin_coupons_router, prefix="/api/admin")
    app.include_router(admin_content_router, prefix="/api/admin")
    app.include_router(admin_settings_router, prefix="/api/admin")
    app.include_router(admin_dashboard_router, prefix="/api/admin")
    app.include_router(admin_super_router, prefix="/api/admin")

    return app


app = create_app()

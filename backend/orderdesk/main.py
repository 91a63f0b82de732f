"""
OrderDesk Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() wires settings, the database, the two
       provider clients and the services onto `app.state`, registers the
       middleware chain, exception handlers and routers.
Who:   uvicorn (`uvicorn orderdesk.main:app`) and the test suite, which passes
       its own settings, database and providers.

Application Architecture:
    ┌──────────────────────────────────────────────────────────────┐
    │                        FastAPI App                           │
    │                                                              │
    │  Middleware Chain:                                           │
    │  ┌──────────┐ ┌──────────┐ ┌──────────┐                     │
    │  │   CORS   │→│  Req ID  │→│ Logging  │                     │
    │  └──────────┘ └──────────┘ └──────────┘                     │
    │                                                              │
    │  Routes (/functions/v1):                                     │
    │  ┌────────────┐ ┌────────────┐ ┌─────────────────────────┐  │
    │  │ auth-login │ │ export-csv │ │ send-confirmation-email │  │
    │  └────────────┘ └────────────┘ └─────────────────────────┘  │
    │                                                              │
    │  Exception Handlers:                                         │
    │  ┌──────────────────────────────────────────────────────┐   │
    │  │ Input→400/422 │ Auth→401/403 │ NotFound→404 │ ...→5xx │   │
    │  └──────────────────────────────────────────────────────┘   │
    └──────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Validate required configuration; a ConfigError aborts startup
    2. Log the origin allow-list and the listen address

    Shutdown:
    1. Close provider HTTP clients
    2. Dispose database engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from orderdesk import __version__
from orderdesk.config import Settings, get_settings
from orderdesk.database import Database
from orderdesk.exceptions import (
    AuthError,
    ConfigError,
    InputError,
    MethodNotAllowedError,
    NotFoundError,
    OrderDeskError,
    UpstreamError,
)
from orderdesk.middleware.cors import OriginCORSMiddleware, cors_headers
from orderdesk.middleware.logging import RequestLoggingMiddleware
from orderdesk.middleware.request_id import RequestIDMiddleware, request_id_var
from orderdesk.routes import FUNCTIONS_PREFIX, auth, export, health, notify
from orderdesk.security import CredentialVerifier
from orderdesk.services.authorizer import RowLevelAuthorizer
from orderdesk.services.email_base import EmailProvider
from orderdesk.services.export_service import OrderExporter
from orderdesk.services.identity_service import IdentityGateway
from orderdesk.services.notification_service import NotificationSender
from orderdesk.services.resend_service import ResendEmailProvider

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal error"
LOGIN_PATH = FUNCTIONS_PREFIX + auth.LOGIN_PATH


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure process-wide logging.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s to stdout.
    Third-party loggers that log every operation are raised to WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Service Wiring
# ══════════════════════════════════════════════════════════════════════════

def install_services(
    app: FastAPI,
    settings: Settings,
    database: Optional[Database] = None,
    identity: Optional[IdentityGateway] = None,
    email_provider: Optional[EmailProvider] = None,
) -> None:
    """
    Build every service whose configuration is present and store it on
    `app.state`. Anything left unbuilt stays None; its dependency getter
    answers with a ConfigError.
    """
    missing = settings.missing_required()
    state = app.state
    state.missing_config = missing

    if database is None and "DATABASE_URL" not in missing:
        database = Database.from_settings(settings)
    state.database = database

    if identity is None and not settings.missing_required("supabase_url", "supabase_anon_key"):
        identity = IdentityGateway(settings.supabase_url, settings.supabase_anon_key)
    state.identity = identity

    if email_provider is None and "RESEND_API_KEY" not in missing:
        email_provider = ResendEmailProvider(settings.resend_api_key, settings.resend_api_url)
    state.email_provider = email_provider

    state.exporter = None
    state.sender = None
    if database is not None and "SUPABASE_JWT_SECRET" not in missing:
        verifier = CredentialVerifier(settings.supabase_jwt_secret, settings.supabase_jwt_audience)
        authorizer = RowLevelAuthorizer(database)
        state.exporter = OrderExporter(database, authorizer, verifier)
        if email_provider is not None:
            state.sender = NotificationSender(authorizer, verifier, email_provider, settings.resend_from)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    logger.info("OrderDesk Backend %s starting up...", __version__)
    try:
        settings.validate_required()
    except ConfigError as e:
        logger.critical("%s", e.message)
        logger.critical("Fix the configuration and restart the server.")
        raise

    logger.info("Allowed origins: %s", ", ".join(settings.allowed_origins_list))
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("OrderDesk Backend shutting down...")
    for name in ("identity", "email_provider"):
        client = getattr(app.state, name, None)
        if client is not None:
            await client.aclose()
    if app.state.database is not None:
        await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(request: Request, message: str) -> dict:
    """Login failures carry only `message`; every other endpoint adds `success`."""
    if request.url.path == LOGIN_PATH:
        return {"message": message}
    return {"success": False, "message": message}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the OrderDeskError hierarchy to JSON responses.

    Input/auth/not-found messages are returned verbatim. Upstream and config
    failures are logged with their context and answered with a generic
    message. Nothing here exposes provider or driver error text.
    """

    @app.exception_handler(InputError)
    async def handle_input_error(request: Request, exc: InputError):
        rid = request_id_var.get("")
        logger.warning("[%s] Input error: %s", rid, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(request, exc.message))

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError):
        rid = request_id_var.get("")
        logger.warning("[%s] Auth error: %s", rid, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(request, exc.message))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=error_body(request, exc.message))

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        rid = request_id_var.get("")
        logger.error("[%s] Upstream error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=exc.status_code, content=error_body(request, exc.message))

    @app.exception_handler(ConfigError)
    async def handle_config_error(request: Request, exc: ConfigError):
        rid = request_id_var.get("")
        logger.error("[%s] Configuration error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content=error_body(request, GENERIC_ERROR_MESSAGE))

    @app.exception_handler(OrderDeskError)
    async def handle_orderdesk_error(request: Request, exc: OrderDeskError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(request, exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Routing errors (404 unknown path, 405 wrong method) in the same envelope."""
        status_code, message = exc.status_code, str(exc.detail)
        if exc.status_code == 405:
            error = MethodNotAllowedError(context={"method": request.method, "path": request.url.path})
            logger.warning(
                "[%s] %s: %s %s",
                request_id_var.get(""),
                error.message,
                request.method,
                request.url.path,
            )
            status_code, message = error.status_code, error.message
        return JSONResponse(
            status_code=status_code,
            content=error_body(request, message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for unexpected errors.

        This response is produced outside the middleware stack, so the CORS
        headers are added here.
        """
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        headers = cors_headers(
            request.headers.get("origin"),
            app.state.settings.allowed_origins_list,
        )
        return JSONResponse(
            status_code=500,
            content=error_body(request, GENERIC_ERROR_MESSAGE),
            headers=headers,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    identity: Optional[IdentityGateway] = None,
    email_provider: Optional[EmailProvider] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings:       Explicit configuration; read from the environment if None.
        database:       Pre-built Database (tests pass a fake).
        identity:       Pre-built IdentityGateway.
        email_provider: Pre-built EmailProvider.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="OrderDesk API",
        description=(
            "Login, per-customer CSV export of orders and order confirmation "
            "emails, with ownership enforced by the store's row-level policies."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    install_services(app, settings, database, identity, email_provider)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: CORS → RequestID → Logging → routes
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(OriginCORSMiddleware, allowed_origins=settings.allowed_origins_list)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(export.router)
    app.include_router(notify.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `orderdesk.main:app` to be importable
app = create_app()

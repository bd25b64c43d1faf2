"""FastAPI application entry point."""
import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from namingops.core.config import settings
from namingops.core.structured_logging import configure_logging
from namingops.db.session import engine

configure_logging()
logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and not settings.is_dev:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,  # Form answers stay out of Sentry
    )
    logger.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from namingops.core.rate_limit import limiter


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="NamingOps API",
    description="Naming request workflow with admin-defined submission forms",
    version=settings.VERSION,
    docs_url="/docs" if settings.is_dev else None,
    redoc_url="/redoc" if settings.is_dev else None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report body/query validation failures as 400 with per-field messages."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.setdefault(".".join(loc) or "__root__", error.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=400,
        content={"detail": {"message": "Validation failed", "errors": errors}},
    )


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Propagate or assign X-Request-ID for log correlation."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Mock-Role", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)

# ============================================================================
# Routers
# ============================================================================

from namingops.routers import (
    approved_names,
    auth,
    drafts,
    form_configurations,
    gemini,
    name_requests,
    notifications,
    users,
)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(form_configurations.router)
app.include_router(name_requests.router)
app.include_router(name_requests.legacy_router)  # PATCH /api/name-requests/{id}/hold|cancel|activate
app.include_router(drafts.router)
app.include_router(approved_names.router)

# Same Gemini and notification endpoints on the versioned and the original prefix
app.include_router(gemini.router, prefix="/api/v1/gemini")
app.include_router(gemini.router, prefix="/api/gemini")
app.include_router(notifications.router, prefix="/api/v1/notifications")
app.include_router(notifications.router, prefix="/api/notifications")


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}

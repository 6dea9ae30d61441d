import logging
from contextlib import asynccontextmanager
from http import HTTPStatus
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.errors import AppError, UpstreamFailure, ValidationError
from app.routers import admin_pages, auth, client, health, public_pages, users

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def _scheduler_enabled() -> bool:
    return settings.environment == "production" or settings.enable_scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.admin_email_list:
        from app.database import SessionLocal
        from app.services.accounts import seed_role_grants

        db = SessionLocal()
        try:
            seed_role_grants(db, settings.admin_email_list)
        finally:
            db.close()

    # Only start scheduler in production or if explicitly enabled
    # This prevents duplicate schedulers during development with --reload
    if _scheduler_enabled():
        from app.scheduler import start_scheduler
        start_scheduler()
    yield
    if _scheduler_enabled():
        from app.scheduler import shutdown_scheduler
        shutdown_scheduler()


app = FastAPI(
    title="Page CMS",
    description="Admin-authored pages with a public site and an admin panel",
    version="1.0.0",
    lifespan=lifespan,
)

# Mount the client bundle - handle both Docker (static/) and local development (../frontend/static/)
static_dir = Path("static")
if not static_dir.exists():
    static_dir = Path(__file__).parent.parent.parent / "frontend" / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

# Include routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(auth.router, prefix="/api", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(admin_pages.router, prefix="/api/admin-pages", tags=["admin-pages"])
app.include_router(public_pages.router, prefix="/api/public-pages", tags=["public-pages"])
app.include_router(client.router)


# Error handlers
def _wants_json(request: Request) -> bool:
    """Check if request expects JSON response (API routes or Accept header)."""
    if request.url.path.startswith("/api/"):
        return True
    accept = request.headers.get("accept", "")
    return "application/json" in accept


def _error_response(status_code: int, code: str, flash: str, cta: str | None = None) -> JSONResponse:
    content = {
        "error": {
            "status": status_code,
            "error": HTTPStatus(status_code).phrase,
            "code": code,
        },
        "flash": flash,
    }
    if cta:
        content["cta"] = cta
    return JSONResponse(status_code=status_code, content=content)


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        msg = err.get("msg", "Invalid value").removeprefix("Value error, ")
        messages.append(f"{field}: {msg}" if field else msg)
    return "; ".join(messages) or ValidationError.default_flash


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Domain errors carry a message that is safe to show as-is."""
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.flash)
    return _error_response(exc.status_code, exc.code, exc.flash, exc.cta)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing payload fields, rejected before the handler runs."""
    return _error_response(
        ValidationError.status_code,
        ValidationError.code,
        _validation_message(exc),
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(
        "Database error: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return _error_response(UpstreamFailure.status_code, UpstreamFailure.code, UpstreamFailure.default_flash)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with the flash shape for API, plain pages for browser."""
    if _wants_json(request):
        phrase = HTTPStatus(exc.status_code).phrase
        flash = exc.detail if exc.detail and exc.detail != phrase else f"{phrase}."
        return _error_response(exc.status_code, phrase.replace(" ", ""), flash)

    if exc.status_code == 404:
        # Unknown client paths still get the shell; the client router shows its own not-found view
        return client.render_shell(request, None, status_code=404)

    return HTMLResponse(
        content=f"<h1>Error {exc.status_code}</h1><p>{exc.detail}</p>",
        status_code=exc.status_code
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions without leaking their text to the client."""
    # Log the exception with request context for debugging
    logger.exception(
        "Unhandled exception: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    if _wants_json(request):
        return _error_response(500, "InternalServerError", "An internal server error occurred.")

    return HTMLResponse(
        content="<h1>Error 500</h1><p>An internal server error occurred.</p>",
        status_code=500
    )

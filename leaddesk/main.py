"""
LeadDesk - lead intake and admin backend for a local business website.
Main FastAPI application entry point.
"""
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from leaddesk.api.router import api_router
from leaddesk.config import Settings, get_settings
from leaddesk.database import Database
from leaddesk.errors import LeadDeskError
from leaddesk.services.access_guard import AccessGuard
from leaddesk.services.intake import IntakeService
from leaddesk.services.lead_store import LeadStore
from leaddesk.services.notifier import Notifier
from leaddesk.utils.cors import OriginRuleCORSMiddleware, parse_origin_rules
from leaddesk.utils.logging import (
    bind_request,
    configure_structured_logging,
    new_request_id,
    unbind_request,
)

logger = logging.getLogger("leaddesk")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags every log line with the request, echoes X-Correlation-ID and logs one access line."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Correlation-ID") or new_request_id()
        token = bind_request(request_id, request.method, request.url.path)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = request_id
            logger.info(
                "%s %s -> %s", request.method, request.url.path, response.status_code,
                extra={
                    "status": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                },
            )
            return response
        finally:
            unbind_request(token)


def _set_or_missing(value) -> str:
    return "set" if value else "missing"


def log_startup_summary(settings: Settings, database: Database) -> None:
    """Which settings are present. Secret values are never logged."""
    logger.info(
        "LeadDesk starting up (env=%s port=%s commit=%s)",
        settings.app_env, settings.port, settings.git_commit or "(none)",
    )
    logger.info("DB_URL=%s exists=%s", database.url, database.file_exists())
    logger.info(
        "ADMIN_HTML_PATH=%s exists=%s",
        settings.admin_html_path, Path(settings.admin_html_path).is_file(),
    )
    logger.info("CORS_ORIGINS=%s", ", ".join(settings.cors_origin_list) or "(none)")
    logger.info(
        "ADMIN_TOKEN=%s MAIL_TO=%s SMTP_HOST=%s SMTP_USER=%s MAIL_FROM=%s LOGO_URL=%s",
        _set_or_missing(settings.admin_token),
        _set_or_missing(settings.mail_to),
        _set_or_missing(settings.smtp_host),
        _set_or_missing(settings.smtp_user),
        _set_or_missing(settings.mail_from),
        _set_or_missing(settings.logo_url),
    )
    if not settings.admin_token:
        logger.warning("ADMIN_TOKEN not set - admin API will answer 500 until configured")
    if not (settings.smtp_configured and settings.mail_to):
        logger.warning("SMTP/MAIL_TO incomplete - /api/leads/email will store leads but not mail")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build every collaborator once, attach them to app.state, dispose on shutdown."""
    settings: Settings = app.state.settings
    database = Database(settings.sqlalchemy_url)
    log_startup_summary(settings, database)

    lead_store = LeadStore(database.session_factory)
    # Fatal if the database cannot be opened: the app never starts serving
    try:
        await lead_store.init_schema()
    except Exception:
        await database.dispose()
        raise

    notifier = Notifier(settings)
    app.state.database = database
    app.state.lead_store = lead_store
    app.state.notifier = notifier
    app.state.access_guard = AccessGuard(settings.admin_token)
    app.state.intake = IntakeService(lead_store, notifier)
    logger.info("LeadDesk ready")

    yield

    logger.info("LeadDesk shutting down")
    await database.dispose()


async def leaddesk_error_handler(request: Request, exc: LeadDeskError) -> JSONResponse:
    body = {"ok": False, "error": exc.message}
    if exc.lead_id is not None:
        body["id"] = exc.lead_id

    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.message,
            extra={"lead_id": exc.lead_id, "error_code": type(exc).__name__},
        )
    else:
        logger.warning(
            "%s %s rejected: %s", request.method, request.url.path, exc.message,
            extra={"error_code": type(exc).__name__},
        )
    return JSONResponse(body, status_code=exc.status_code)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        error = f"Cannot {request.method} {request.url.path}"
    else:
        error = str(exc.detail)
    return JSONResponse(
        {"ok": False, "error": error},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("%s %s invalid request: %s", request.method, request.url.path, exc.errors())
    return JSONResponse({"ok": False, "error": "invalid request"}, status_code=400)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"ok": False, "error": "Internal server error"}, status_code=500)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Application factory."""
    settings = settings or get_settings()

    configure_structured_logging(settings.log_level)

    application = FastAPI(
        title="LeadDesk",
        description="Lead intake, notification and admin API for a local business website",
        version="1.0.0",
        lifespan=lifespan,
    )
    application.state.settings = settings

    application.add_exception_handler(LeadDeskError, leaddesk_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)
    application.add_exception_handler(Exception, unhandled_error_handler)

    application.add_middleware(
        OriginRuleCORSMiddleware,
        rules=parse_origin_rules(settings.cors_origin_list),
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Correlation-ID"],
        allow_credentials=False,
        max_age=86400,
    )

    # Added after CORS so it wraps every request, preflights included
    application.add_middleware(RequestContextMiddleware)

    application.include_router(api_router)

    return application


def run() -> None:
    """Console entry point: serve with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.app_host, port=settings.port)


if __name__ == "__main__":
    run()

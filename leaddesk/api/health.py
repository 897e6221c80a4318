"""
Health check endpoints - used by the hosting platform and for quick manual checks.

- GET /              - plain-text banner
- GET /health        - basic liveness (always ok if the app is running)
- GET /health/ready  - readiness check (database)
- GET /debug         - which settings are present; never returns secret values
"""
import logging
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from leaddesk.api.deps import get_app_settings, get_database, get_lead_store
from leaddesk.config import Settings
from leaddesk.database import Database
from leaddesk.services.lead_store import LeadStore, utc_timestamp

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def root():
    return "LeadDesk backend is running"


@router.get("/health")
async def health_check(
    settings: Settings = Depends(get_app_settings),
):
    """Basic liveness check."""
    return {
        "ok": True,
        "time": utc_timestamp(datetime.now(timezone.utc)),
        "commit": settings.git_commit or None,
    }


@router.get("/health/ready")
async def readiness_check(
    store: LeadStore = Depends(get_lead_store),
):
    """Readiness check - verifies the database answers SELECT 1."""
    database_ok = await store.ping()
    return {
        "ok": database_ok,
        "checks": {"database": database_ok},
        "time": utc_timestamp(),
    }


@router.get("/debug")
async def debug_info(
    settings: Settings = Depends(get_app_settings),
    database: Database = Depends(get_database),
):
    """Configuration flags for troubleshooting a deploy."""
    return {
        "ok": True,
        "commit": settings.git_commit or None,
        "adminHtmlExists": Path(settings.admin_html_path).is_file(),
        "dbExists": database.file_exists(),
        "corsOrigins": settings.cors_origin_list,
        "adminTokenSet": bool(settings.admin_token),
        "smtpConfigured": settings.smtp_configured,
        "mailToSet": bool(settings.mail_to),
        "mailFrom": settings.mail_from or None,
        "logoUrlSet": bool(settings.logo_url),
    }

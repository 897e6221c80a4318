"""
FastAPI dependencies - hand out the collaborators built once in the app lifespan.
"""
from typing import Optional

from fastapi import Depends, Header, Query, Request

from leaddesk.config import Settings
from leaddesk.database import Database
from leaddesk.services.access_guard import AccessGuard
from leaddesk.services.intake import IntakeService
from leaddesk.services.lead_store import LeadStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_lead_store(request: Request) -> LeadStore:
    return request.app.state.lead_store


def get_intake_service(request: Request) -> IntakeService:
    return request.app.state.intake


def get_access_guard(request: Request) -> AccessGuard:
    return request.app.state.access_guard


async def require_admin(
    authorization: Optional[str] = Header(None),
    token: Optional[str] = Query(None),
    guard: AccessGuard = Depends(get_access_guard),
) -> None:
    """Dependency for admin routes. Raises ConfigurationError or AuthorizationError."""
    guard.authenticate(AccessGuard.token_from_request(authorization, token))

"""
API router - aggregates all route modules.
"""
from fastapi import APIRouter

from leaddesk.api.admin import router as admin_router
from leaddesk.api.health import router as health_router
from leaddesk.api.leads import router as leads_router

api_router = APIRouter()
api_router.include_router(leads_router)
api_router.include_router(admin_router)
api_router.include_router(health_router)

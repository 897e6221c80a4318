"""
Admin API - list and delete stored leads, plus the static admin page.
Every /api/admin route requires the shared admin token (Bearer header or ?token=).
"""
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Path as PathParam
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse

from leaddesk.api.deps import get_app_settings, get_lead_store, require_admin
from leaddesk.config import Settings
from leaddesk.services.lead_store import LeadStore

logger = logging.getLogger(__name__)
router = APIRouter(tags=["admin"])

NO_STORE = {"Cache-Control": "no-store"}
# SQLite INTEGER range; ids outside it cannot exist
MIN_LEAD_ID = -(2**63)
MAX_LEAD_ID = 2**63 - 1


@router.get("/api/admin/leads", dependencies=[Depends(require_admin)])
async def list_leads(
    store: LeadStore = Depends(get_lead_store),
):
    """All leads, newest first."""
    leads = await store.list_all()
    return {"ok": True, "rows": [lead.to_dict() for lead in leads]}


@router.delete("/api/admin/leads/{lead_id}", dependencies=[Depends(require_admin)])
async def delete_lead(
    lead_id: int = PathParam(..., ge=MIN_LEAD_ID, le=MAX_LEAD_ID),
    store: LeadStore = Depends(get_lead_store),
):
    """Delete one lead. Deleting an unknown id is not an error (deleted=0)."""
    deleted = await store.delete_by_id(lead_id)
    return {"ok": True, "deleted": deleted}


@router.get("/admin")
async def admin_page(
    settings: Settings = Depends(get_app_settings),
):
    path = Path(settings.admin_html_path)
    if not path.is_file():
        logger.error("Admin page missing at %s", path)
        return PlainTextResponse(
            "admin.html missing on server (check /debug)",
            status_code=500,
            headers=NO_STORE,
        )
    return FileResponse(path, media_type="text/html", headers=NO_STORE)


@router.get("/admin/", include_in_schema=False)
async def admin_page_slash():
    return RedirectResponse("/admin")

"""
Public lead intake endpoints - called by the website forms.

- POST /api/leads        store only
- POST /api/leads/email  store, email the owner, email a confirmation to the customer
- POST /api/email        alias kept for older form embeds
"""
import json
import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError

from leaddesk.api.deps import get_app_settings, get_intake_service
from leaddesk.config import Settings
from leaddesk.errors import PayloadTooLargeError, ValidationError
from leaddesk.schemas.leads import LeadSubmission
from leaddesk.services.intake import IntakeService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["leads"])


async def _read_body(request: Request, limit: int) -> bytes:
    """Request body, refusing anything over `limit` bytes before and while reading."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError("payload too large")

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLargeError("payload too large")
    return bytes(body)


async def _parse_submission(request: Request, settings: Settings) -> LeadSubmission:
    """Read the JSON body into a LeadSubmission; anything that isn't a JSON object of strings is rejected."""
    body = await _read_body(request, settings.max_body_bytes)
    try:
        payload = json.loads(body)
    except ValueError:
        raise ValidationError("invalid payload") from None
    if not isinstance(payload, dict):
        raise ValidationError("invalid payload")
    try:
        return LeadSubmission.model_validate(payload)
    except PydanticValidationError:
        raise ValidationError("invalid payload") from None


@router.post("/leads")
async def create_lead(
    request: Request,
    intake: IntakeService = Depends(get_intake_service),
    settings: Settings = Depends(get_app_settings),
):
    """Store a lead without sending any email."""
    submission = await _parse_submission(request, settings)
    lead_id = await intake.submit(submission)
    return {"ok": True, "id": lead_id}


@router.post("/leads/email")
@router.post("/email")
async def create_lead_and_notify(
    request: Request,
    intake: IntakeService = Depends(get_intake_service),
    settings: Settings = Depends(get_app_settings),
):
    """Store a lead, then send the owner notification and the customer confirmation."""
    submission = await _parse_submission(request, settings)
    lead_id, result = await intake.submit_and_notify(submission)
    return {
        "ok": True,
        "id": lead_id,
        "mailed": result.owner_sent,
        "confirmationMailed": result.confirmation_sent,
    }

"""
Lead intake - validate, normalize and store website submissions.

Two entry points share one path:
- submit(): store only
- submit_and_notify(): store with source="email", then email owner + customer

Persistence always happens first. If storage fails nothing is mailed; if mailing fails
the lead stays stored and the error carries its id.
"""
import logging

from leaddesk.errors import LeadDeskError, ValidationError
from leaddesk.schemas.leads import LeadSubmission
from leaddesk.services.lead_store import LeadStore
from leaddesk.services.notifier import Notifier, NotifyResult
from leaddesk.utils.email_validation import is_valid_email_format

logger = logging.getLogger(__name__)

EMAIL_SOURCE = "email"


def validate_submission(submission: LeadSubmission) -> None:
    if submission.missing_fields():
        raise ValidationError("missing fields")
    if not is_valid_email_format(submission.email):
        raise ValidationError("invalid email")


class IntakeService:
    def __init__(self, store: LeadStore, notifier: Notifier):
        self.store = store
        self.notifier = notifier

    async def submit(self, submission: LeadSubmission) -> int:
        validate_submission(submission)
        return await self.store.insert(submission)

    async def submit_and_notify(self, submission: LeadSubmission) -> tuple[int, NotifyResult]:
        validate_submission(submission)
        submission = submission.model_copy(update={"source": EMAIL_SOURCE})
        lead = await self.store.create(submission)

        try:
            result = await self.notifier.notify(lead, page_url=submission.page_url)
        except LeadDeskError as e:
            e.lead_id = lead.id
            logger.error(
                "Lead stored but notification failed: %s", e.message,
                extra={"lead_id": lead.id, "source": EMAIL_SOURCE},
            )
            raise
        return lead.id, result

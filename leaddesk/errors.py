"""
Error taxonomy shared by services and the HTTP layer.

Each error carries the HTTP status it maps to. The app's exception handler
turns any LeadDeskError into the {"ok": false, "error": ...} envelope.
"""
from typing import Optional


class LeadDeskError(Exception):
    """Base class for errors that are reported to the caller."""

    status_code = 500

    def __init__(self, message: str, lead_id: Optional[int] = None):
        super().__init__(message)
        self.message = message
        # Set when a lead was already stored before the failure
        self.lead_id = lead_id


class ValidationError(LeadDeskError):
    """Submitted data failed a required-field or format check."""

    status_code = 400


class AuthorizationError(LeadDeskError):
    """Admin token missing or wrong."""

    status_code = 401


class ConfigurationError(LeadDeskError):
    """Server is missing operational configuration (admin token, SMTP, MAIL_TO)."""


class StorageError(LeadDeskError):
    """The database failed to read or write."""


class NotificationError(LeadDeskError):
    """The mail transport failed. The lead itself is already stored."""

    def __init__(
        self,
        message: str,
        lead_id: Optional[int] = None,
        failures: Optional[dict[str, str]] = None,
    ):
        super().__init__(message, lead_id=lead_id)
        self.failures = failures or {}


class PayloadTooLargeError(LeadDeskError):
    """Request body exceeds the configured size limit."""

    status_code = 413

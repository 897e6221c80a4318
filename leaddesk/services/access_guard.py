"""
Admin access guard - one shared secret configured at startup.
Fails closed: no configured secret is a server error, anything but an exact match is 401.
"""
import hmac
from typing import Optional

from leaddesk.errors import AuthorizationError, ConfigurationError


class AccessGuard:
    def __init__(self, expected_token: str):
        self._expected = expected_token or ""

    @property
    def configured(self) -> bool:
        return bool(self._expected)

    @staticmethod
    def token_from_request(
        authorization: Optional[str],
        query_token: Optional[str],
    ) -> str:
        """Bearer token from the Authorization header, else the ?token= query parameter."""
        if authorization:
            scheme, _, credentials = authorization.strip().partition(" ")
            if scheme.lower() == "bearer" and credentials.strip():
                return credentials.strip()
        return query_token or ""

    def authenticate(self, provided: Optional[str]) -> None:
        if not self._expected:
            raise ConfigurationError("ADMIN_TOKEN missing")
        if not provided or not hmac.compare_digest(
            provided.encode("utf-8"), self._expected.encode("utf-8")
        ):
            raise AuthorizationError("Unauthorized")

"""
Email validation - basic syntactic check for addresses submitted through the forms.
local@domain.tld where the domain has a dot and the TLD is at least 2 characters.
"""
import re

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]{2,}$")


def is_valid_email_format(email: str) -> bool:
    """
    Check if email matches the basic local@domain.tld shape.

    Args:
        email: Email address to validate (surrounding whitespace is ignored)

    Returns:
        True if format is valid
    """
    if not email or len(email) > 254:
        return False
    return bool(EMAIL_REGEX.match(email.strip()))


def mask_email(email: str) -> str:
    """Mask an address for log output: 'ann@example.com' -> 'a***@example.com'."""
    if not email or "@" not in email:
        return "***"
    local, _, domain = email.partition("@")
    return f"{local[:1]}***@{domain}"

"""PII masking for display."""

import re

_EMAIL = re.compile(r"\b[\w.-]+@[\w.-]+\.\w{2,}\b")
_PHONE = re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b")
_SSN = re.compile(r"\b\d{3}-\d{2}-\d{4}\b")


def mask_pii(text: str) -> str:
    """Replace emails, phone numbers and SSNs with placeholder tokens."""
    text = _EMAIL.sub("[EMAIL_REDACTED]", text)
    text = _PHONE.sub("[PHONE_REDACTED]", text)
    return _SSN.sub("[SSN_REDACTED]", text)

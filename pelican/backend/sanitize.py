"""Shared sanitisation helpers for log output."""

from __future__ import annotations

import re

_PASSWORD_QUERY_RE = re.compile(r"(?i)(password|username)=([^&\s]+)")
_BEARER_RE = re.compile(r"Bearer\s+[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE)
_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_XML_PASSWORD_RE = re.compile(r"(?i)<password>[^<]*</password>")


def redact_text(value: str | None) -> str:
    """Return ``value`` with credentials, bearer tokens and emails removed."""

    if not value:
        return ""
    text = str(value)
    redacted = _PASSWORD_QUERY_RE.sub(lambda match: f"{match.group(1)}=***", text)
    redacted = _XML_PASSWORD_RE.sub("<password>***</password>", redacted)
    redacted = _BEARER_RE.sub("Bearer ***", redacted)
    return _EMAIL_RE.sub("***@***", redacted)


def mask_identifier(value: str | None) -> str:
    """Return a masked identifier suitable for log output."""

    if value is None:
        return ""
    trimmed = str(value).strip()
    if not trimmed:
        return ""
    if len(trimmed) <= 4:
        return "***"
    if len(trimmed) <= 8:
        return f"{trimmed[:2]}...{trimmed[-2:]}"
    return f"{trimmed[:6]}...{trimmed[-4:]}"


__all__ = ["mask_identifier", "redact_text"]

"""
Input sanitization for free-text, URL and email fields

All functions are pure and idempotent: running a value through twice gives the same
result as running it once, so full-record updates never degrade stored text.
"""

import re
from typing import Optional
from urllib.parse import urlparse

MAX_TEXT_LENGTH = 10_000

_TAG_PATTERN = re.compile(r"<[^>]*>")
# Control characters except tab (\x09), newline (\x0a) and carriage return (\x0d)
_CONTROL_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_EMAIL_PATTERN = re.compile(r"^[^@\s<>\"']+@[^@\s<>\"']+\.[a-z]{2,}$")
_ALLOWED_SCHEMES = {"http", "https"}


def sanitize_text(value: Optional[str]) -> str:
    """Strip markup and control characters from user text"""
    if not value:
        return ""
    cleaned = _TAG_PATTERN.sub("", str(value))
    cleaned = _CONTROL_PATTERN.sub("", cleaned)
    return cleaned.strip()[:MAX_TEXT_LENGTH]


def sanitize_url(value: Optional[str]) -> str:
    """Normalize a link to an http(s) URL, or empty string when unsafe"""
    if not value:
        return ""
    candidate = _CONTROL_PATTERN.sub("", str(value)).strip()
    if not candidate or any(ch in candidate for ch in '<>"\' '):
        return ""

    if "://" not in candidate:
        bare_scheme = urlparse(candidate).scheme.lower()
        # "javascript:alert(1)" style values carry a scheme without slashes
        if bare_scheme and not candidate[len(bare_scheme) + 1 :].split("/")[0].isdigit():
            return ""
        candidate = f"https://{candidate}"

    parsed = urlparse(candidate)
    if parsed.scheme.lower() not in _ALLOWED_SCHEMES or not parsed.netloc:
        return ""
    return candidate[:MAX_TEXT_LENGTH]


def sanitize_email(value: Optional[str]) -> str:
    """Lower-case and validate an email address; empty string when implausible"""
    if not value:
        return ""
    candidate = str(value).strip().lower()
    if not _EMAIL_PATTERN.match(candidate):
        return ""
    return candidate

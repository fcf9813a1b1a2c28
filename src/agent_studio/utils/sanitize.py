"""Error message sanitization to prevent credential leakage."""

from __future__ import annotations

import os
import re

_KEY_PATTERNS = (
    (r"AIza[0-9A-Za-z_-]{20,}", "[REDACTED_KEY]"),
    (r"sk-ant-[a-zA-Z0-9_-]+", "[REDACTED_KEY]"),
    (r"sk-[a-zA-Z0-9_-]{20,}", "[REDACTED_KEY]"),
    (r"Bearer\s+\S+", "Bearer [REDACTED]"),
    (r"x-goog-api-key:\s*\S+", "x-goog-api-key: [REDACTED]"),
    (r"x-api-key:\s*\S+", "x-api-key: [REDACTED]"),
    (r"Authorization:\s*\S+", "Authorization: [REDACTED]"),
    (r"([?&]key=)[^&\s]+", r"\1[REDACTED]"),
)


def sanitize_error(message: str) -> str:
    """Strip API keys and the user's home path from an error message."""
    if not message:
        return message

    sanitized = message
    for pattern, replacement in _KEY_PATTERNS:
        sanitized = re.sub(pattern, replacement, sanitized)

    home = os.environ.get("USERPROFILE") or os.environ.get("HOME") or ""
    if home and home != "/":
        sanitized = sanitized.replace(home, "[USER_HOME]")

    return sanitized

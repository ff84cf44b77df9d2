# phishguard/security.py

"""
Input hygiene for untrusted text.

    is_safe(raw)           -> SafetyCheck   (runs on the RAW input)
    sanitize(raw, limit)   -> str           (runs after is_safe passes)

is_safe() has to see the raw text: sanitize() strips tags and control
characters, which could otherwise hide the very markers it looks for.
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

DEFAULT_MAX_LENGTH = 2000
SHORT_INPUT_LIMIT = 50

# C0 and C1 control ranges (includes \t, \n and DEL)
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")
# "<" up to the next ">" or end of text, so dangling tags go too
_TAG_LIKE = re.compile(r"<[^>]*>?")


class SafetyCheck(NamedTuple):
    safe: bool
    reason: Optional[str] = None


def sanitize(raw: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Normalize and bound raw text. Pure and idempotent.

    1. strip surrounding whitespace
    2. truncate to max_length characters
    3. drop control characters
    4. drop tag-like <...> substrings

    Removing characters in steps 3-4 can expose new edge whitespace, so the
    result is stripped once more to keep sanitize(sanitize(x)) == sanitize(x).
    """
    if not raw:
        return ""

    text = raw.strip()
    text = text[:max_length]
    text = _CONTROL_CHARS.sub("", text)
    text = _TAG_LIKE.sub("", text)
    return text.strip()


def is_safe(raw: str) -> SafetyCheck:
    lowered = (raw or "").lower()

    if "javascript:" in lowered:
        return SafetyCheck(False, "Script injection pattern detected.")

    if "data:" in lowered and "base64" in lowered:
        return SafetyCheck(False, "Embedded data payloads are restricted.")

    # in short inputs these keywords are an attack signature, not prose
    if len(raw or "") < SHORT_INPUT_LIMIT and ("select " in lowered or "drop table" in lowered):
        return SafetyCheck(False, "Query injection pattern detected.")

    return SafetyCheck(True)

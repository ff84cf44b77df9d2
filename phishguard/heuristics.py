# phishguard/heuristics.py

"""
Local heuristic scorer (no network).

Additive point rules over the sanitized text. Every rule that fires adds
points AND one indicator, so the indicator list explains the score:

    urgency language                 +30  BEHAVIOR  / MEDIUM
    credential-harvesting language   +25  KEYWORD   / HIGH
    financial solicitation           +20  FINANCIAL / MEDIUM
    each embedded link               +15  URL       / LOW
      ... on a high-risk TLD         +20  URL       / MEDIUM
      ... with an IP-literal host    +30  URL       / HIGH
      ... with a punycode label      +40  URL       / HIGH

The total is capped at 100. Used on its own and as the fallback when the
intelligence service is unavailable, so it must stay deterministic.
"""

from __future__ import annotations

import re
from typing import List, Tuple

import idna
import tldextract

from .models import (
    AnalysisResult,
    Assessment,
    Indicator,
    IndicatorKind,
    Severity,
    clamp_score,
    label_for_score,
)

# ---------------------------------------------------------------------
# 1. CONSTANTS
# ---------------------------------------------------------------------

FALLBACK_EXPLANATION = (
    "Forensic engine returned a heuristic-based fallback report using enhanced "
    "local pattern matching. No real-time AI grounding was possible, but "
    "signature analysis indicates potential risk."
)

URGENCY_PHRASES = ("urgent", "immediate action", "within 24 hours")
CREDENTIAL_PHRASES = ("password", "account suspended", "verify your identity")
FINANCIAL_PHRASES = ("crypto", "bitcoin", "ethereum", "wire transfer")

# (phrases, points, kind, severity, description)
_TEXT_RULES = [
    (URGENCY_PHRASES, 30, IndicatorKind.BEHAVIOR, Severity.MEDIUM,
     "Social engineering urgency pattern detected"),
    (CREDENTIAL_PHRASES, 25, IndicatorKind.KEYWORD, Severity.HIGH,
     "Potential credential harvesting signature"),
    (FINANCIAL_PHRASES, 20, IndicatorKind.FINANCIAL, Severity.MEDIUM,
     "Suspicious financial solicitation detected"),
]

LINK_POINTS = 15
RISKY_TLD_POINTS = 20
IP_HOST_POINTS = 30
PUNYCODE_POINTS = 40

# TLDs favoured by disposable / low-cost registrations
HIGH_RISK_TLDS = {
    "xyz", "top", "pw", "bid", "club", "work",
    "support", "info", "live", "online", "site", "ninja",
}

# an IPv4 literal only after an explicit scheme (so version numbers like
# 1.2.3.4 are not links), or an optional scheme and a dotted hostname whose
# TLD is alphabetic (so prices like 19.99 are not links),
# then optional port, path, query and fragment
URL_REGEX = re.compile(
    r"(?:https?://(?:\d{1,3}\.){3}\d{1,3}"
    r"|(?:https?://)?(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+(?:xn--[a-z0-9-]{1,59}|[a-z]{2,63}))"
    r"(?::\d{1,5})?"
    r"(?:/[^?\s#]*)?"
    r"(?:\?[^#\s]*)?"
    r"(?:#\S*)?",
    re.IGNORECASE,
)

_SCHEME = re.compile(r"^[a-z][a-z0-9+\-.]*://", re.IGNORECASE)

# bundled public-suffix snapshot only; never fetched at runtime
_tld_extract = tldextract.TLDExtract(suffix_list_urls=())


# ---------------------------------------------------------------------
# 2. URL HELPERS
# ---------------------------------------------------------------------

def _host_of(url: str) -> str:
    rest = _SCHEME.sub("", url)
    host = re.split(r"[:/?#]", rest, maxsplit=1)[0]
    return host.lower().rstrip(".")


def _is_ip(host: str) -> bool:
    if not re.fullmatch(r"(?:\d{1,3}\.){3}\d{1,3}", host):
        return False
    return all(0 <= int(part) <= 255 for part in host.split("."))


def _top_level(host: str) -> str:
    suffix = _tld_extract(host).suffix
    return suffix.rsplit(".", 1)[-1] if suffix else ""


def _punycode_labels(host: str) -> List[str]:
    return [label for label in host.split(".") if label.startswith("xn--")]


def _describe_punycode(host: str) -> str:
    try:
        decoded = idna.decode(host)
    except (idna.IDNAError, UnicodeError):
        return "Punycode/Homograph attack signature detected"
    return f"Punycode/Homograph attack signature detected (renders as '{decoded}')"


def _shorten(url: str, limit: int = 30) -> str:
    return url[:limit] + ("..." if len(url) > limit else "")


def extract_urls(text: str) -> List[str]:
    return [m.group(0) for m in URL_REGEX.finditer(text)]


def _url_signals(url: str) -> Tuple[int, List[Indicator]]:
    """Points and indicators for one embedded link."""
    host = _host_of(url)
    score = LINK_POINTS
    found = [
        Indicator(
            kind=IndicatorKind.URL,
            description=f"Active link detected: {_shorten(url)}",
            severity=Severity.LOW,
        )
    ]

    if _is_ip(host):
        score += IP_HOST_POINTS
        found.append(
            Indicator(
                kind=IndicatorKind.URL,
                description="Obfuscated IP-based URL detected (potential malware host)",
                severity=Severity.HIGH,
            )
        )
    elif _top_level(host) in HIGH_RISK_TLDS:
        score += RISKY_TLD_POINTS
        found.append(
            Indicator(
                kind=IndicatorKind.URL,
                description="High-risk top-level domain detected in URL structure",
                severity=Severity.MEDIUM,
            )
        )

    if _punycode_labels(host):
        score += PUNYCODE_POINTS
        found.append(
            Indicator(
                kind=IndicatorKind.URL,
                description=_describe_punycode(host),
                severity=Severity.HIGH,
            )
        )

    return score, found


# ---------------------------------------------------------------------
# 3. MAIN PUBLIC FUNCTIONS
# ---------------------------------------------------------------------

def assess_heuristically(text: str) -> Assessment:
    """Score sanitized text with the local rules (no id / timestamp)."""
    lowered = text.lower()
    score = 0
    indicators: List[Indicator] = []

    for phrases, points, kind, severity, description in _TEXT_RULES:
        if any(p in lowered for p in phrases):
            score += points
            indicators.append(Indicator(kind=kind, description=description, severity=severity))

    for url in extract_urls(text):
        points, found = _url_signals(url)
        score += points
        indicators.extend(found)

    score = clamp_score(score)
    return Assessment(
        score=score,
        label=label_for_score(score),
        explanation=FALLBACK_EXPLANATION,
        indicators=indicators,
    )


def score_heuristically(sanitized_input: str) -> AnalysisResult:
    """Standalone heuristic analysis, committed into a full AnalysisResult."""
    return AnalysisResult.commit(sanitized_input, assess_heuristically(sanitized_input))

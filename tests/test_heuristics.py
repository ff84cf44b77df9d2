"""
Tests for the local heuristic scorer.
"""

from __future__ import annotations

import pytest

from phishguard.heuristics import (
    FALLBACK_EXPLANATION,
    assess_heuristically,
    extract_urls,
    score_heuristically,
)
from phishguard.models import IndicatorKind, Severity, ThreatLevel, label_for_score

from scenarios import BANK_ALERT, CRYPTO_AIRDROP, LEGIT_UPDATE


def _kinds(assessment):
    return [(i.kind, i.severity) for i in assessment.indicators]


def test_urgent_credential_ip_link_is_fraud():
    result = assess_heuristically("URGENT: verify your identity at http://192.168.1.1/login")

    kinds = _kinds(result)
    assert (IndicatorKind.BEHAVIOR, Severity.MEDIUM) in kinds
    assert (IndicatorKind.KEYWORD, Severity.HIGH) in kinds
    assert (IndicatorKind.URL, Severity.HIGH) in kinds
    assert result.score >= 85
    assert result.label == ThreatLevel.FRAUD


def test_benign_note_has_no_signals():
    result = assess_heuristically("Hi Team, the Q3 report is on the drive. Best, Sarah.")
    assert result.indicators == []
    assert result.score == 0
    assert result.label == ThreatLevel.SAFE


def test_explanation_discloses_fallback():
    result = assess_heuristically("hello")
    assert result.explanation == FALLBACK_EXPLANATION
    assert "heuristic" in result.explanation.lower()
    assert result.grounding_links is None


def test_bank_alert_scenario():
    result = assess_heuristically(BANK_ALERT)
    # urgency 30 + credential 25 + one plain .com link 15
    assert result.score == 70
    assert result.label == ThreatLevel.FRAUD


def test_crypto_airdrop_scenario():
    result = assess_heuristically(CRYPTO_AIRDROP)
    # link 15 + high-risk .xyz 20
    assert result.score == 35
    assert result.label == ThreatLevel.SUSPICIOUS
    assert [i.severity for i in result.indicators] == [Severity.LOW, Severity.MEDIUM]


def test_legit_update_scenario():
    result = assess_heuristically(LEGIT_UPDATE)
    assert result.score == 0
    assert result.label == ThreatLevel.SAFE


def test_financial_solicitation():
    result = assess_heuristically("Send the wire transfer today")
    assert _kinds(result) == [(IndicatorKind.FINANCIAL, Severity.MEDIUM)]
    assert result.score == 20
    assert result.label == ThreatLevel.SAFE


def test_each_rule_counts_once():
    result = assess_heuristically("urgent urgent URGENT password password")
    assert result.score == 55
    assert len(result.indicators) == 2


def test_punycode_host():
    result = assess_heuristically("Sign in at https://xn--pypal-4ve.com/account")
    descriptions = [i.description for i in result.indicators]
    assert result.score == 15 + 40
    assert any("Punycode" in d for d in descriptions)
    assert result.indicators[-1].severity == Severity.HIGH


def test_each_link_scores_separately():
    result = assess_heuristically("see example.com and example.org")
    assert result.score == 30
    assert [i.kind for i in result.indicators] == [IndicatorKind.URL, IndicatorKind.URL]


def test_score_capped_at_100():
    text = (
        "URGENT password bitcoin http://10.0.0.1 http://10.0.0.2 "
        "https://xn--80ak6aa92e.com https://login.top"
    )
    result = assess_heuristically(text)
    assert result.score == 100
    assert result.label == ThreatLevel.FRAUD


def test_long_link_description_is_shortened():
    url = "https://example.com/" + "a" * 80
    result = assess_heuristically(url)
    assert result.indicators[0].description == f"Active link detected: {url[:30]}..."


@pytest.mark.parametrize(
    "text, expected",
    [
        ("http://192.168.1.1/login", ["http://192.168.1.1/login"]),
        ("visit www.shop.example.com/deals?id=4 today", ["www.shop.example.com/deals?id=4"]),
        ("costs $19.99 only", []),
        ("upgrade to firmware 1.2.3.4 tonight", []),
        ("e.g. this", []),
    ],
)
def test_extract_urls(text, expected):
    assert extract_urls(text) == expected


def test_bare_dotted_quad_is_not_a_link():
    result = assess_heuristically("Upgrade to firmware 1.2.3.4 tonight")
    assert result.score == 0
    assert result.label == ThreatLevel.SAFE
    assert result.indicators == []


def test_not_an_ip_when_octet_out_of_range():
    result = assess_heuristically("http://999.1.1.1/")
    assert all(i.severity != Severity.HIGH for i in result.indicators)


def test_deterministic_apart_from_identity():
    first = score_heuristically(BANK_ALERT)
    second = score_heuristically(BANK_ALERT)
    assert first.id != second.id
    assert first.model_dump(exclude={"id", "timestamp"}) == second.model_dump(
        exclude={"id", "timestamp"}
    )


@pytest.mark.parametrize(
    "text",
    [
        "",
        "nothing here",
        BANK_ALERT,
        CRYPTO_AIRDROP,
        LEGIT_UPDATE,
        "urgent " * 50 + "http://1.2.3.4 " * 20,
    ],
)
def test_score_range_and_label_bands(text):
    result = assess_heuristically(text)
    assert 0 <= result.score <= 100
    assert result.label == label_for_score(result.score)

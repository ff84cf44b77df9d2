"""
Tests for input sanitation (sanitize) and the injection gate (is_safe).
"""

from __future__ import annotations

import pytest

from phishguard.security import DEFAULT_MAX_LENGTH, is_safe, sanitize


def test_sanitize_empty_input():
    assert sanitize("") == ""
    assert sanitize("   \n\t ") == ""


def test_sanitize_strips_whitespace():
    assert sanitize("  hello world  ") == "hello world"


def test_sanitize_truncates_to_default_limit():
    assert len(sanitize("a" * 5000)) == DEFAULT_MAX_LENGTH


def test_sanitize_custom_limit():
    assert sanitize("abcdefgh", max_length=3) == "abc"


def test_sanitize_removes_control_characters():
    assert sanitize("pay\x00ment\x1b now\x7f\x85") == "payment now"


def test_sanitize_removes_newlines_and_tabs_inside_text():
    # newlines and tabs are C0 control characters
    assert sanitize("line one\nline\ttwo") == "line onelinetwo"


def test_sanitize_strips_tags():
    assert sanitize("<b>Click</b> <a href='x'>here</a>") == "Click here"


def test_sanitize_strips_dangling_tag():
    assert sanitize("safe text <script src=evil") == "safe text"


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "plain text",
        "  <b> padded </b>  ",
        "\x00 leading control",
        "<<a>b>",
        "x" * 2100,
        " " * 1999 + "tail",
        "URGENT: verify your identity at http://192.168.1.1/login",
        "<p>\n\x01 nested <i>tags</i> \x9f</p>",
    ],
)
def test_sanitize_is_idempotent(raw):
    once = sanitize(raw)
    assert sanitize(once) == once


def test_is_safe_accepts_normal_text():
    check = is_safe("Your parcel is waiting, track it at https://post.example.com")
    assert check.safe is True
    assert check.reason is None


def test_is_safe_blocks_script_protocol():
    check = is_safe("javascript:alert(1)")
    assert check.safe is False
    assert check.reason


def test_is_safe_blocks_script_protocol_case_insensitive():
    assert is_safe("Click JavaScript:void(0)").safe is False


def test_is_safe_blocks_data_uri_with_base64():
    check = is_safe("data:text/html;base64,PHNjcmlwdD4=")
    assert check.safe is False
    assert "payload" in check.reason.lower()


def test_is_safe_allows_data_without_base64():
    assert is_safe("the data: it shows growth").safe is True


def test_is_safe_blocks_short_sql_keywords():
    assert is_safe("SELECT * FROM users").safe is False
    assert is_safe("'; DROP TABLE accounts;--").safe is False


def test_is_safe_allows_sql_keywords_in_long_text():
    text = "Please select your preferred delivery slot from the options in the portal below."
    assert len(text) >= 50
    assert is_safe(text).safe is True


def test_is_safe_checks_raw_text_before_tags_are_stripped():
    assert is_safe("<img src=x onerror=\"javascript:alert(1)\">").safe is False

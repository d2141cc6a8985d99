"""
Unit tests for the lexical rollup and the quick subject checks.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from outreach_qa.analyzers.report import analyze_subject_basics, run_lexical_analysis
from outreach_qa.models import EmailIntent


def test_subject_basics_penalties():
    result = analyze_subject_basics("AMAZING DEAL!!!")
    assert result["score"] == 0, f"Expected 0, got {result['score']}"
    assert len(result["issues"]) == 4, f"Expected 4 issues, got {result['issues']}"
    assert "Subject is all caps" in result["issues"]
    assert "Repeated punctuation" in result["issues"]
    print("PASS: test_subject_basics_penalties")


def test_subject_basics_good_length():
    result = analyze_subject_basics("Routing idea for your support team")
    assert result["issues"] == [], f"Unexpected issues: {result['issues']}"
    assert result["score"] == 65, f"Expected 65, got {result['score']}"
    assert not result["has_emoji"]
    print("PASS: test_subject_basics_good_length")


def test_subject_basics_emoji():
    result = analyze_subject_basics("Launch day \U0001F680")
    assert result["has_emoji"], "Rocket emoji should be detected"
    print("PASS: test_subject_basics_emoji")


def test_invalid_draft_gets_zeroed_report():
    result = run_lexical_analysis(None, "Hi Sam")
    assert not result["is_valid"]
    assert result["overall_score"] == 0
    assert "Content is null or undefined" in result["errors"], f"Got {result['errors']}"
    assert result["intent"]["primary"] == EmailIntent.COLD_OUTREACH
    print("PASS: test_invalid_draft_gets_zeroed_report")


def test_full_report_shape():
    body = ("Hi Sam,\n\nYour team is hiring three support engineers this quarter. "
            "We help support teams cut handling time.\n\n"
            "Can you book 15 minutes Thursday?\n\nThanks,\nAlex")
    result = run_lexical_analysis("Quick question about routing", body)
    assert result["is_valid"]
    for key in ("subject", "spam", "compliance", "links", "suspicious", "tone", "readability",
                "greeting", "signature", "layout", "cta", "intent", "context", "template",
                "language"):
        assert key in result, f"Missing section {key}"
    assert 0 <= result["overall_score"] <= 100
    assert result["greeting"]["has_greeting"]
    assert result["signature"]["has_signature"]
    assert result["cta"]["strength"] == "strong", f"Got {result['cta']}"
    print("PASS: test_full_report_shape")


def test_report_is_deterministic():
    first = run_lexical_analysis("Quick question", "Hi Sam,\n\nWorth a call?\n\nThanks,\nAlex")
    second = run_lexical_analysis("Quick question", "Hi Sam,\n\nWorth a call?\n\nThanks,\nAlex")
    assert first == second, "Same draft should produce the same report"
    print("PASS: test_report_is_deterministic")


if __name__ == "__main__":
    test_subject_basics_penalties()
    test_subject_basics_good_length()
    test_subject_basics_emoji()
    test_invalid_draft_gets_zeroed_report()
    test_full_report_shape()
    test_report_is_deterministic()
    print("\n=== All 6 lexical report tests passed ===")

"""
End-to-end tests for the two public entry points, driven through the shared
fixtures in conftest.py. No model host is contacted.
"""

import json

import pytest

from outreach_qa import analyze_email_comprehensive, safe_optimize_email
from outreach_qa.agents.content_validator import validate_suggestion
from outreach_qa.agents.safe_optimizer import WARNING_AI_UNAVAILABLE, WARNING_TOO_SHORT
from outreach_qa.analyzers import run_lexical_analysis
from outreach_qa.models import CategoryStatus, EmailType, Priority
from samples import FABRICATED_BANNED_PHRASES, ai_response


# ─── COMPREHENSIVE ANALYSIS ─────────────────────────────────────


class TestComprehensiveAnalysis:
    def test_weak_draft_flags_generic_opener(self, weak_draft):
        result = analyze_email_comprehensive(weak_draft.subject, weak_draft.body)
        assert result.breakdown.opening.score == 20
        assert result.breakdown.opening.status == CategoryStatus.POOR
        assert result.improvements[0].priority == Priority.CRITICAL

    def test_sales_draft_beats_weak_draft(self, sales_draft, weak_draft):
        strong = analyze_email_comprehensive(sales_draft.subject, sales_draft.body,
                                             {"name": "Dana Reyes", "company": "Acme"})
        weak = analyze_email_comprehensive(weak_draft.subject, weak_draft.body)
        assert strong.overall_score > weak.overall_score

    def test_meeting_draft_type(self, meeting_draft):
        result = analyze_email_comprehensive(meeting_draft.subject, meeting_draft.body)
        assert result.email_type == EmailType.MEETING_REQUEST

    @pytest.mark.parametrize("subject,body", [
        (None, None),
        ("", "   "),
        ("<script>alert(1)</script>", "&lt;iframe&gt;&lt;/iframe&gt;"),
        ("x" * 300, "word " * 20000),
    ])
    def test_never_raises(self, subject, body):
        result = analyze_email_comprehensive(subject, body)
        assert 0 <= result.overall_score <= 100
        json.dumps(result.to_dict())


# ─── SAFE OPTIMIZATION ─────────────────────────────────────────


class TestSafeOptimization:
    def test_meeting_draft_rejects_invented_personalization(self, meeting_draft, fake_gateway):
        gateway = fake_gateway(ai_response([
            {"element": "greeting", "original": "hello", "suggested": "Hello Sam,", "reason": "r"},
            {"element": "opening", "original": "hello how are you",
             "suggested": "Congratulations on your impressive growth", "reason": "r"},
        ]))
        result = safe_optimize_email(meeting_draft.subject, meeting_draft.body, gateway=gateway)

        texts = [s.suggested.lower() for s in result.suggestions]
        for phrase in FABRICATED_BANNED_PHRASES + ["sam"]:
            assert not any(phrase in text for text in texts), f"{phrase!r} leaked into {texts}"
        preview = result.preview_with_suggestions
        assert "sam" not in preview.body.lower()

    def test_every_shown_suggestion_passes_validator(self, sales_draft, fake_gateway):
        gateway = fake_gateway(ai_response([
            {"element": "cta", "original": "Worth a 15 minute call this week?",
             "suggested": "Open to a 15 minute call this week?", "reason": "Lower friction"},
            {"element": "body", "original": "We help teams like yours",
             "suggested": "We helped Globex and Initech", "reason": "Proof"},
        ]))
        result = safe_optimize_email(sales_draft.subject, sales_draft.body, gateway=gateway)
        full = f"{sales_draft.subject} {sales_draft.body}"

        ai = [s for s in result.suggestions if s.id.startswith("ai-")]
        assert [s.suggested for s in ai] == ["Open to a 15 minute call this week?"]
        for suggestion in ai:
            assert validate_suggestion(suggestion.original, suggestion.suggested, full)["is_valid"]
            assert suggestion.original in full

    def test_failed_call_keeps_analysis(self, sales_draft, fake_gateway):
        result = safe_optimize_email(sales_draft.subject, sales_draft.body,
                                     gateway=fake_gateway(error="Connection error"))
        assert WARNING_AI_UNAVAILABLE in result.warnings
        assert result.analysis.overall_score == analyze_email_comprehensive(
            sales_draft.subject, sales_draft.body).overall_score

    def test_disabled_ai(self, sales_draft, fake_gateway, ai_disabled):
        gateway = fake_gateway(ai_response([]))
        result = safe_optimize_email(sales_draft.subject, sales_draft.body, gateway=gateway)
        assert gateway.calls == []
        assert WARNING_AI_UNAVAILABLE in result.warnings

    def test_short_body(self, fake_gateway):
        gateway = fake_gateway(ai_response([]))
        result = safe_optimize_email("Hi", "quick one", gateway=gateway)
        assert gateway.calls == []
        assert result.warnings == [WARNING_TOO_SHORT]


# ─── LEXICAL REPORT ────────────────────────────────────────────


class TestLexicalReport:
    def test_sales_draft_report(self, sales_draft):
        report = run_lexical_analysis(sales_draft.subject, sales_draft.body)
        assert report["is_valid"]
        assert report["greeting"]["type"] == "casual"
        assert report["signature"]["has_signature"]
        assert not report["compliance"]["is_compliant"]

    def test_blank_body_is_zeroed(self):
        report = run_lexical_analysis("Subject", "")
        assert not report["is_valid"]
        assert report["errors"] == ["Content is empty"]

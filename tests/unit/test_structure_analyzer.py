"""
Unit tests for the structure analyzer: section split, per-section scoring,
sign-off detection and flow.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.dirname(__file__))

from outreach_qa.agents.structure_analyzer import (
    STRUCTURE_WEIGHTS,
    analyze_body_content,
    analyze_closing,
    analyze_cta_section,
    analyze_flow,
    analyze_introduction,
    analyze_structure,
    split_into_sections,
)
from outreach_qa.models import PRIORITY_ORDER
from samples import SALES_DRAFT


def test_weights_sum_to_one():
    assert abs(sum(STRUCTURE_WEIGHTS.values()) - 1.0) < 1e-9
    print("PASS: test_weights_sum_to_one")


def test_split_by_paragraphs():
    parts = split_into_sections("Hi Sam,\n\nMiddle part.\n\nWorth a call?")
    assert parts == {"intro": "Hi Sam,", "middle": "Middle part.", "closing": "Worth a call?"}, \
        f"Got {parts}"
    print("PASS: test_split_by_paragraphs")


def test_split_single_paragraph_by_sentences():
    parts = split_into_sections("A one. B two. C three. D four.")
    assert parts["intro"] == "A one. B two.", f"Got {parts['intro']!r}"
    assert parts["middle"] == "C three.", f"Got {parts['middle']!r}"
    assert parts["closing"] == "D four", f"Got {parts['closing']!r}"

    short = split_into_sections("Hi. Bye.")
    assert short == {"intro": "Hi. Bye.", "middle": "", "closing": ""}, f"Got {short}"
    print("PASS: test_split_single_paragraph_by_sentences")


def test_introduction_scoring():
    strong = analyze_introduction("Noticed your team is hiring because support is scaling.")
    assert strong["score"] == 85 and strong["quality"] == "strong", f"Got {strong}"
    assert strong["has_personal_hook"] and strong["has_relevance_statement"]

    weak = analyze_introduction("I hope this finds you well.")
    assert weak["score"] == 30 and weak["quality"] == "weak", f"Got {weak}"
    assert "Generic opening - replace with personalized hook" in weak["issues"]
    print("PASS: test_introduction_scoring")


def test_body_content_scoring():
    empty = analyze_body_content("")
    assert empty["score"] == 40
    assert empty["issues"] == ["Email is too short - add more value content"]

    rich = analyze_body_content("We can help you cut handling time by 30%.")
    assert rich["score"] == 95, f"Expected 95, got {rich['score']}"
    assert rich["has_value_proposition"] and rich["has_specific_benefit"]
    print("PASS: test_body_content_scoring")


def test_cta_section_scoring():
    result = analyze_cta_section("Worth a 15 minute chat this week?")
    assert result["score"] == 90, f"Expected 90, got {result['score']}"
    assert result["cta_type"] == "question" and result["is_low_friction"] and result["is_specific"]

    missing = analyze_cta_section("")
    assert missing["score"] == 20 and missing["cta_type"] == "missing"

    flat = analyze_cta_section("Thanks for reading")
    assert flat["score"] == 40 and len(flat["issues"]) == 2, f"Got {flat}"
    print("PASS: test_cta_section_scoring")


def test_sign_off_detection():
    assert analyze_closing("Worth a call?\n\nBest regards,\nAlex")["sign_off_type"] == "formal"
    assert analyze_closing("Worth a call?\n\nThanks,\nAlex")["sign_off_type"] == "casual"
    plain = analyze_closing("Our bestseller ships on Monday")
    assert plain == {"score": 60, "has_sign_off": False, "sign_off_type": "none",
                     "is_appropriate": False}, f"Sign-offs must match whole words: {plain}"
    print("PASS: test_sign_off_detection")


def test_flow():
    result = analyze_flow("I built our tool. We love it.")
    assert result["score"] == 40, f"Expected 40, got {result['score']}"
    assert len(result["issues"]) == 3, f"Got {result['issues']}"
    assert result["transition_quality"] == "choppy"

    smooth = analyze_flow("Hi Sam,\n\nYour team is growing, so your queue is too.\n\nWorth a call?")
    assert smooth["has_logical_progression"] and smooth["transition_quality"] == "smooth"
    assert smooth["score"] == 70, f"Expected 70, got {smooth['score']}"
    print("PASS: test_flow")


def test_full_structure():
    result = analyze_structure(SALES_DRAFT.body)
    assert 0 <= result["overall_score"] <= 100
    assert set(result["sections"]) == {"introduction", "body", "call_to_action", "closing"}
    ranks = [PRIORITY_ORDER[imp["priority"]] for imp in result["improvements"]]
    assert ranks == sorted(ranks), f"Improvements not sorted: {ranks}"
    print("PASS: test_full_structure")


def test_section_scores_are_bounded_ints():
    bodies = [SALES_DRAFT.body, "Hi", "I think I want I need I hope. " * 30]
    for body in bodies:
        result = analyze_structure(body)
        scores = {name: section["score"] for name, section in result["sections"].items()}
        scores["flow"] = result["flow"]["score"]
        for name, score in scores.items():
            assert isinstance(score, int) and 0 <= score <= 100, f"{name}={score!r} for {body[:20]!r}"
    print("PASS: test_section_scores_are_bounded_ints")


if __name__ == "__main__":
    test_weights_sum_to_one()
    test_split_by_paragraphs()
    test_split_single_paragraph_by_sentences()
    test_introduction_scoring()
    test_body_content_scoring()
    test_cta_section_scoring()
    test_sign_off_detection()
    test_flow()
    test_full_structure()
    test_section_scores_are_bounded_ints()
    print("\n=== All 10 structure analyzer tests passed ===")

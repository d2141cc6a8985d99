"""
Unit tests for the general best-practice checks.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.dirname(__file__))

from outreach_qa.agents.best_practices import (
    BEST_PRACTICE_WEIGHTS,
    analyze_best_practices,
    check_action_clarity,
    check_length,
    check_readability,
    check_tone,
    check_visual_structure,
    count_syllables,
)
from outreach_qa.models import EmailType
from samples import WEAK_DRAFT


def test_weights_sum_to_one():
    assert abs(sum(BEST_PRACTICE_WEIGHTS.values()) - 1.0) < 1e-9
    print("PASS: test_weights_sum_to_one")


def test_syllables_drop_silent_e():
    assert count_syllables("make") == 1
    assert count_syllables("reading") == 2
    assert count_syllables("conversation") == 4
    print("PASS: test_syllables_drop_silent_e")


def test_readability_short_body():
    result = check_readability("")
    assert result["score"] == 0
    assert result["issues"] == ["Email body is too short to analyze"]

    simple = check_readability("Here is the deck.")
    assert simple["score"] == 100, f"Expected 100, got {simple['score']}"
    assert simple["grade_level"] == 1, "Grade level floors at 1"
    print("PASS: test_readability_short_body")


def test_visual_structure():
    wall = check_visual_structure("one long paragraph")
    assert wall["score"] == 50, f"Expected 50, got {wall['score']}"
    assert "Email is one long paragraph - break it up for better readability" in wall["issues"]

    spaced = check_visual_structure("Hi Sam,\n\nBody here.\n\nThanks")
    assert spaced["score"] == 90, f"Expected 90, got {spaced['score']}"
    assert spaced["has_white_space"] and spaced["is_visually_clean"]

    loud = check_visual_structure("THIS IS GREAT!!!")
    assert not loud["is_visually_clean"]
    print("PASS: test_visual_structure")


def test_tone_detection():
    pushy = check_tone("Send it ASAP")
    assert pushy["detected_tone"] == "aggressive" and pushy["score"] == 50, f"Got {pushy}"

    stiff = check_tone(
        "Please find attached the deck. Kindly review at your earliest convenience. "
        "Pursuant to our call, do not hesitate to reply."
    )
    assert stiff["detected_tone"] == "formal", f"Got {stiff['detected_tone']}"
    assert stiff["score"] == 60, f"Expected 60, got {stiff['score']}"
    assert {"phrase": "kindly", "alternative": "please"} in stiff["stiff_phrases"]
    print("PASS: test_tone_detection")


def test_action_clarity():
    clear = check_action_clarity("Can you reply by Friday with a yes or no?")
    assert clear["score"] == 100, f"Expected 100, got {clear['score']}"

    vague = check_action_clarity("Here is the deck.")
    assert vague["score"] == 40
    assert not vague["has_next_step"] and not vague["is_specific"]
    print("PASS: test_action_clarity")


def test_length_ranges_by_type():
    body = "word " * 30
    assert check_length(body, EmailType.SALES)["recommendation"] == "too_short"
    assert check_length(body, EmailType.FOLLOW_UP)["recommendation"] == "optimal"
    meeting = check_length(body, EmailType.MEETING_REQUEST)
    assert meeting["suggested_word_count"] == {"min": 50, "max": 200}, \
        "Meeting requests use the general range"
    print("PASS: test_length_ranges_by_type")


def test_improvements_follow_check_order():
    result = analyze_best_practices("Here is the deck.")
    categories = [imp["category"] for imp in result["improvements"]]
    assert categories == ["structure", "action", "action", "length"], f"Got {categories}"
    assert result["improvements"][-1]["issue"] == "Email is too short (4 words)"
    print("PASS: test_improvements_follow_check_order")


def test_accepts_type_value_string():
    by_value = analyze_best_practices(WEAK_DRAFT.body, "sales")
    by_enum = analyze_best_practices(WEAK_DRAFT.body, EmailType.SALES)
    assert by_value == by_enum
    assert 0 <= by_enum["overall_score"] <= 100
    print("PASS: test_accepts_type_value_string")


def test_check_scores_are_bounded_ints():
    bodies = [WEAK_DRAFT.body, "word " * 2000, "BUY NOW!!! " * 40, "Hi"]
    for body in bodies:
        result = analyze_best_practices(body)
        for key in ("readability", "structure", "tone", "action_clarity"):
            score = result[key]["score"]
            assert isinstance(score, int) and 0 <= score <= 100, f"{key}={score!r} for {body[:20]!r}"
    print("PASS: test_check_scores_are_bounded_ints")


if __name__ == "__main__":
    test_weights_sum_to_one()
    test_syllables_drop_silent_e()
    test_readability_short_body()
    test_visual_structure()
    test_tone_detection()
    test_action_clarity()
    test_length_ranges_by_type()
    test_improvements_follow_check_order()
    test_accepts_type_value_string()
    test_check_scores_are_bounded_ints()
    print("\n=== All 10 best practices tests passed ===")

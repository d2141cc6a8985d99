"""
Outreach QA - Lexical Report
Runs every lexical analyzer over a sanitized draft and rolls the signals into
one quick score. Invalid input (missing/blank subject or body) gets a zeroed
report instead of partial numbers.
"""

import re

from outreach_qa.analyzers.intent import analyze_cta, classify_intent, detect_context
from outreach_qa.analyzers.layout import analyze_greeting, analyze_layout, analyze_signature
from outreach_qa.analyzers.spam import (
    analyze_links,
    check_compliance,
    detect_spam_triggers,
    detect_suspicious_content,
)
from outreach_qa.analyzers.template import detect_language, detect_template_usage
from outreach_qa.analyzers.tone import analyze_readability, analyze_tone
from outreach_qa.models import EmailIntent, clamp_score
from outreach_qa.sanitizer import sanitize_email

# ─── SUBJECT BASICS ───────────────────────────────────────────

CLICKBAIT_WORDS = ["you won't believe", "shocking", "amazing", "secret", "one weird trick"]

_EMOJI = re.compile(
    "[\U0001F300-\U0001FAFF\U00002600-\U000027BF\U0001F000-\U0001F02F]"
)


def analyze_subject_basics(subject: str) -> dict:
    """Quick subject checks: caps, clickbait, punctuation, emoji and length."""
    issues = []
    score = 50
    lower = subject.lower()

    letters = [c for c in subject if c.isalpha()]
    if letters and subject == subject.upper() and len(letters) > 3:
        issues.append("Subject is all caps")
        score -= 20

    clickbait = [word for word in CLICKBAIT_WORDS if word in lower]
    if clickbait:
        issues.append(f"Clickbait language: {', '.join(clickbait)}")
        score -= 15

    if re.search(r"!{2,}|\?{2,}", subject):
        issues.append("Repeated punctuation")
        score -= 10

    has_emoji = bool(_EMOJI.search(subject))

    length = len(subject)
    if length > 60:
        issues.append(f"Subject is long ({length} characters)")
        score -= 10
    elif length < 20:
        issues.append(f"Subject is short ({length} characters)")
        score -= 5
    else:
        score += 15

    return {
        "score": clamp_score(score),
        "length": length,
        "has_emoji": has_emoji,
        "issues": issues,
    }


# ─── LEXICAL ROLLUP ───────────────────────────────────────────

def _zeroed_report(subject_check, body_check) -> dict:
    return {
        "is_valid": False,
        "errors": subject_check.errors + body_check.errors,
        "warnings": subject_check.warnings + body_check.warnings,
        "overall_score": 0,
        "subject": {"score": 0, "length": 0, "has_emoji": False, "issues": []},
        "spam": {"score": 0, "triggers": [], "severity": "low"},
        "compliance": {"is_compliant": False, "issues": []},
        "links": {"links": [], "count": 0, "suspicious": []},
        "suspicious": {"is_suspicious": False, "issues": []},
        "tone": {"sentiment": "neutral", "formality": "neutral", "urgency": "low",
                 "confidence": 0, "counts": {}},
        "readability": {"score": 0, "grade_level": 0, "avg_words_per_sentence": 0,
                        "avg_syllables_per_word": 0, "assessment": "Very difficult to read"},
        "greeting": {"has_greeting": False, "type": None, "text": None},
        "signature": {"has_signature": False, "elements": [], "text": None},
        "layout": {"has_greeting": False, "greeting_type": None, "has_signature": False,
                   "signature_elements": [], "paragraph_count": 0, "link_count": 0,
                   "suspicious_links": []},
        "cta": {"has_cta": False, "cta_count": 0, "strength": "weak", "clarity": 0},
        "intent": {"primary": EmailIntent.COLD_OUTREACH, "secondary": [], "confidence": 0,
                   "scores": {}},
        "context": {"is_reply": False, "is_forward": False, "thread_depth": 0,
                    "sequence_position": 1},
        "template": {"is_template": False, "unmerged_tokens": [], "generic_phrases": [],
                     "confidence": 0},
        "language": {"language": "english", "confidence": 0, "is_english": True},
    }


def run_lexical_analysis(subject: str, body: str) -> dict:
    """Sanitize the draft and run every lexical analyzer over it."""
    subject_check, body_check = sanitize_email(subject, body)
    if not subject_check.is_valid or not body_check.is_valid:
        return _zeroed_report(subject_check, body_check)

    clean_subject = subject_check.sanitized_content
    clean_body = body_check.sanitized_content
    full_text = f"{clean_subject}\n{clean_body}"

    spam = detect_spam_triggers(full_text)
    compliance = check_compliance(clean_subject, clean_body)
    links = analyze_links(clean_body)
    readability = analyze_readability(clean_body)
    tone = analyze_tone(full_text)
    greeting = analyze_greeting(clean_body)
    signature = analyze_signature(clean_body)
    cta = analyze_cta(clean_body)
    intent = classify_intent(clean_subject, clean_body)

    score = 50
    if spam["score"] < 15:
        score += 15
    if readability["score"] >= 60:
        score += 10
    if tone["sentiment"] == "positive":
        score += 5
    if greeting["has_greeting"]:
        score += 5
    if signature["has_signature"]:
        score += 5
    if cta["has_cta"] and cta["strength"] != "weak":
        score += 10
    if intent["confidence"] >= 50:
        score += 5
    if compliance["is_compliant"]:
        score += 10
    if spam["score"] >= 30:
        score -= 20
    if links["suspicious"]:
        score -= 15
    if readability["score"] < 40:
        score -= 10
    if not cta["has_cta"]:
        score -= 5

    return {
        "is_valid": True,
        "errors": [],
        "warnings": subject_check.warnings + body_check.warnings,
        "overall_score": clamp_score(score),
        "subject": analyze_subject_basics(clean_subject),
        "spam": spam,
        "compliance": compliance,
        "links": links,
        "suspicious": detect_suspicious_content(full_text),
        "tone": tone,
        "readability": readability,
        "greeting": greeting,
        "signature": signature,
        "layout": analyze_layout(clean_body),
        "cta": cta,
        "intent": intent,
        "context": detect_context(clean_subject, clean_body),
        "template": detect_template_usage(full_text),
        "language": detect_language(clean_body),
    }

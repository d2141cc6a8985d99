"""
Outreach QA - CTA, Intent and Conversation Context
Keyword scoring for what the email is asking for and where it sits in a thread.
"""

import re

from outreach_qa.models import EmailIntent

# ─── CALL TO ACTION ───────────────────────────────────────────

WEAK_CTA_PHRASES = ["would you", "could you", "maybe", "perhaps", "if you want"]
MODERATE_CTA_PHRASES = ["can you", "let me know", "are you interested", "worth a chat"]
STRONG_CTA_PHRASES = ["schedule", "book", "register", "download", "click here", "call now",
                      "reply with"]


def analyze_cta(text: str) -> dict:
    """Count asks and grade their strength.

    Returns:
        {"has_cta": bool, "cta_count": int, "strength": "weak"|"moderate"|"strong",
         "clarity": 0-100}
    """
    lower = text.lower()
    questions = text.count("?")
    weak = sum(1 for phrase in WEAK_CTA_PHRASES if phrase in lower)
    moderate = sum(1 for phrase in MODERATE_CTA_PHRASES if phrase in lower)
    strong = sum(1 for phrase in STRONG_CTA_PHRASES if phrase in lower)

    cta_count = questions + weak + moderate + strong

    if strong:
        strength = "strong"
    elif moderate:
        strength = "moderate"
    else:
        strength = "weak"

    clarity = min(100, cta_count * 20 + strong * 20) if cta_count else 0

    return {
        "has_cta": cta_count > 0,
        "cta_count": cta_count,
        "strength": strength,
        "clarity": clarity,
    }


# ─── INTENT ───────────────────────────────────────────────────

INTENT_KEYWORDS = {
    EmailIntent.FOLLOW_UP: ["following up", "follow up", "checking in", "circle back",
                            "touching base", "any update"],
    EmailIntent.MEETING_REQUEST: ["meeting", "call", "chat", "discuss", "schedule",
                                  "available", "calendar", "zoom", "coffee"],
    EmailIntent.WARM_INTRODUCTION: ["mutual", "introduced", "referred", "mentioned you",
                                    "recommended", "suggested i reach"],
    EmailIntent.RE_ENGAGEMENT: ["been a while", "long time", "reconnect", "catch up",
                                "haven't heard", "miss"],
    EmailIntent.BREAKUP: ["last email", "final", "closing", "moving on", "last attempt",
                          "break up"],
    EmailIntent.VALUE_DELIVERY: ["resource", "guide", "case study", "whitepaper", "ebook",
                                 "report", "research"],
    EmailIntent.REFERRAL_REQUEST: ["referral", "refer", "know anyone", "introduce me",
                                   "connection"],
    EmailIntent.TESTIMONIAL_ASK: ["testimonial", "review", "feedback", "experience",
                                  "thoughts on"],
    EmailIntent.THANK_YOU: ["thank you", "thanks", "appreciate", "grateful", "gratitude"],
    EmailIntent.APOLOGY: ["sorry", "apologize", "apologies", "regret", "mistake"],
    EmailIntent.ANNOUNCEMENT: ["announce", "excited to share", "launching", "released",
                               "new feature"],
    EmailIntent.SURVEY_REQUEST: ["survey", "questionnaire", "poll", "feedback form",
                                 "quick questions"],
    EmailIntent.COLD_OUTREACH: ["noticed", "saw that", "came across", "quick question",
                                "reaching out"],
}

INTENT_POINTS_PER_KEYWORD = 10
SECONDARY_INTENT_RATIO = 0.2


def classify_intent(subject: str, body: str) -> dict:
    """Score every intent by keyword hits over subject + body.

    The primary intent must beat cold outreach strictly, so ties and empty
    drafts fall back to cold outreach.

    Returns:
        {"primary": EmailIntent, "secondary": [EmailIntent], "confidence": 0-100,
         "scores": {intent_value: int}}
    """
    lower = f"{subject} {body}".lower()
    scores = {}
    for intent, keywords in INTENT_KEYWORDS.items():
        scores[intent] = sum(INTENT_POINTS_PER_KEYWORD for kw in keywords if kw in lower)

    primary = EmailIntent.COLD_OUTREACH
    top = 0
    for intent, score in scores.items():
        if score > top:
            primary, top = intent, score

    secondary = [
        intent for intent, score in scores.items()
        if intent != primary and score > 0 and score >= top * SECONDARY_INTENT_RATIO
    ]

    return {
        "primary": primary,
        "secondary": secondary,
        "confidence": min(100, top * 2),
        "scores": {intent.value: score for intent, score in scores.items()},
    }


# ─── REPLY / FORWARD CONTEXT ──────────────────────────────────

REPLY_PATTERNS = [
    re.compile(r"^on .* wrote:", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^>+", re.MULTILINE),
    re.compile(r"^from:.*\nsent:", re.IGNORECASE | re.MULTILINE),
    re.compile(r"in reply to", re.IGNORECASE),
]

FORWARD_PATTERNS = [
    re.compile(r"^-+\s*forwarded message\s*-+", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^fwd:", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^begin forwarded message", re.IGNORECASE | re.MULTILINE),
]

# Checked in order; later entries override earlier ones
SEQUENCE_MARKERS = [
    (2, ["following up"]),
    (3, ["second follow-up", "third email"]),
    (4, ["last email", "final"]),
]


def detect_context(subject: str, body: str) -> dict:
    """Reply/forward markers and an estimated position in a sequence (1-4)."""
    text = f"{subject}\n{body}"
    lower = text.lower()

    is_reply = any(p.search(text) for p in REPLY_PATTERNS)
    is_forward = any(p.search(text) for p in FORWARD_PATTERNS)

    position = 1
    for step, markers in SEQUENCE_MARKERS:
        if any(marker in lower for marker in markers):
            position = step

    return {
        "is_reply": is_reply,
        "is_forward": is_forward,
        "thread_depth": 1 if is_reply else 0,
        "sequence_position": position,
    }

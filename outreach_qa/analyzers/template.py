"""
Outreach QA - Template Misuse and Language Detection
Auxiliary signals: unmerged merge tokens, mass-mail salutations, and a crude
stop-word vote for non-English drafts.
"""

import re

TEMPLATE_TOKEN_PATTERNS = [
    re.compile(r"\{\{[^}]+\}\}"),
    re.compile(r"\{[A-Z_]+\}"),
    re.compile(r"\[[A-Z_\s]+\]"),
    re.compile(r"%[A-Z_]+%"),
]

GENERIC_SALUTATIONS = [
    "dear sir/madam", "to whom it may concern", "valued customer", "this is a mass email",
]


def detect_template_usage(text: str) -> dict:
    """Find merge tokens that were never filled in and generic mass-mail phrasing.

    Returns:
        {"is_template": bool, "unmerged_tokens": [...], "generic_phrases": [...],
         "confidence": 0-100}
    """
    tokens = []
    for pattern in TEMPLATE_TOKEN_PATTERNS:
        for match in pattern.findall(text):
            if match not in tokens:
                tokens.append(match)

    lower = text.lower()
    generic = [phrase for phrase in GENERIC_SALUTATIONS if phrase in lower]

    confidence = min(100, len(tokens) * 30 + (40 if generic else 0))

    return {
        "is_template": bool(tokens or generic),
        "unmerged_tokens": tokens,
        "generic_phrases": generic,
        "confidence": confidence,
    }


LANGUAGE_STOP_WORDS = {
    "english": ["the", "and", "you", "that", "this", "have", "with", "for"],
    "spanish": ["el", "la", "de", "que", "y", "es", "en", "los", "por"],
    "french": ["le", "de", "et", "la", "les", "des", "un", "pour", "dans"],
    "german": ["der", "die", "und", "in", "den", "von", "zu", "das", "mit"],
    "portuguese": ["o", "de", "e", "a", "que", "do", "da", "em", "para"],
}


def detect_language(text: str) -> dict:
    """Vote on the draft's language by whole-word stop-word counts.

    Another language has to beat English strictly to win.

    Returns:
        {"language": str, "confidence": 0-100, "is_english": bool}
    """
    lower = text.lower()
    counts = {}
    for language, words in LANGUAGE_STOP_WORDS.items():
        counts[language] = sum(
            len(re.findall(rf"\b{re.escape(word)}\b", lower)) for word in words
        )

    detected = "english"
    best = counts["english"]
    for language, count in counts.items():
        if count > best:
            detected, best = language, count

    return {
        "language": detected,
        "confidence": min(100, best * 10),
        "is_english": detected == "english",
    }

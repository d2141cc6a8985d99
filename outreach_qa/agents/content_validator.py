"""
Outreach QA - Content Validator
The no-fabrication gate. Every piece of generated text is diffed against the
original draft before anything downstream may show it:

    new = entities(suggestion) - entities(original) - stoplist - allowlist

Any remaining entity, or a personalization claim the original never made,
rejects that suggestion. Nothing else in the engine is allowed to accept
generated text without passing through validate_suggestion().
"""

import re
from typing import Optional, Set

MIN_ENTITY_LENGTH = 3
LENGTH_EXPLOSION_RATIO = 3
MIN_TOPIC_LETTERS = 5

# Capitalized runs (names, companies), numbers/percentages/currency, quotes
_CAPITALIZED_PHRASE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")
_NUMBER_TOKEN = re.compile(r"\d+%?|\$[\d,]+")
_QUOTED = re.compile(r'"[^"]+"')
_WORD = re.compile(r"[a-z]+")

COMMON_WORDS = frozenset([
    "the", "be", "to", "of", "and", "a", "in", "that", "have", "it",
    "for", "not", "on", "with", "he", "as", "you", "do", "at", "this",
    "but", "his", "by", "from", "they", "we", "say", "her", "she", "or",
    "an", "will", "my", "one", "all", "would", "there", "their", "what",
    "so", "up", "out", "if", "about", "who", "get", "which", "go", "me",
    "when", "make", "can", "like", "time", "no", "just", "him", "know",
    "take", "people", "into", "year", "your", "good", "some", "could",
    "them", "see", "other", "than", "then", "now", "look", "only", "come",
    "its", "over", "think", "also", "back", "after", "use", "two", "how",
    "our", "work", "first", "well", "way", "even", "new", "want", "because",
    "any", "these", "give", "day", "most", "us", "hi", "hello", "hey",
    "thanks", "thank", "best", "regards", "sincerely", "cheers",
])

# Soft words a rewrite may add without changing what the email claims
GENERIC_ALLOWLIST = frozenset([
    "quick", "brief", "short", "interested", "available", "free",
    "thoughts", "sense", "worth", "open", "wondering", "curious",
    "hope", "let", "know", "soon", "tomorrow", "today", "week",
    "monday", "tuesday", "wednesday", "thursday", "friday",
    "morning", "afternoon", "evening", "pm", "am", "minutes",
])

FABRICATION_PATTERNS = [
    re.compile(r"I (noticed|saw|heard|read) (that |about )?your", re.IGNORECASE),
    re.compile(r"impressive (how|that|work)", re.IGNORECASE),
    re.compile(r"I recently (came across|discovered|found)", re.IGNORECASE),
    re.compile(r"I've been (following|watching|tracking)", re.IGNORECASE),
    re.compile(r"congratulations on", re.IGNORECASE),
    re.compile(r"I heard about your", re.IGNORECASE),
]


def extract_entities(text: str) -> Set[str]:
    """Names, companies, figures and quotes in text, lowercased."""
    entities = set()
    for phrase in _CAPITALIZED_PHRASE.findall(text):
        entities.add(phrase.lower())
    for number in _NUMBER_TOKEN.findall(text):
        entities.add(number)
    for quote in _QUOTED.findall(text):
        entities.add(quote.lower())
    return entities


def extract_topics(text: str) -> Set[str]:
    """Content words (5+ letters, not stoplisted) for topic-drift logging."""
    return {
        word for word in _WORD.findall(text.lower())
        if len(word) >= MIN_TOPIC_LETTERS and word not in COMMON_WORDS
    }


def is_common_word(word: str) -> bool:
    return word.lower() in COMMON_WORDS


def is_generic_improvement(word: str) -> bool:
    return word.lower() in GENERIC_ALLOWLIST


def _result(is_valid: bool, warnings=None, rejected_reason: Optional[str] = None) -> dict:
    return {"is_valid": is_valid, "warnings": list(warnings or []), "rejected_reason": rejected_reason}


def validate_suggestion(original: str, suggestion: str, full_original_email: str) -> dict:
    """Decide whether a rewrite of `original` stays within the source email.

    Args:
        original: The span of the draft being rewritten.
        suggestion: Proposed replacement text.
        full_original_email: Subject and body of the draft, the only source
            of facts the suggestion may draw on.

    Returns:
        {"is_valid": bool, "warnings": [...], "rejected_reason": str | None}
    """
    source_lower = full_original_email.lower()
    source_entities = extract_entities(full_original_email)

    new_entities = []
    for entity in sorted(extract_entities(suggestion)):
        if len(entity) < MIN_ENTITY_LENGTH or is_common_word(entity):
            continue
        if entity in source_entities or entity in source_lower:
            continue
        if is_generic_improvement(entity):
            continue
        new_entities.append(entity)

    if new_entities:
        listed = ", ".join(new_entities)
        return _result(
            False,
            warnings=[f"New content detected: {listed}"],
            rejected_reason=f"Suggestion introduces content not in original: {listed}",
        )

    warnings = []
    if len(suggestion) / max(len(original), 1) > LENGTH_EXPLOSION_RATIO:
        warnings.append("Suggestion is significantly longer than original - may contain added content")

    for pattern in FABRICATION_PATTERNS:
        if pattern.search(suggestion) and not pattern.search(full_original_email):
            return _result(False, rejected_reason="Suggestion adds personalization claims not in original email")

    return _result(True, warnings=warnings)


def validate_optimization_result(original_subject: str, original_body: str,
                                 optimized_subject: str, optimized_body: str) -> dict:
    """Validate a fully rewritten draft as two suggestions, subject and body."""
    full_original = f"{original_subject} {original_body}"
    subject_check = validate_suggestion(original_subject, optimized_subject, full_original)
    body_check = validate_suggestion(original_body, optimized_body, full_original)

    warnings = []
    if not subject_check["is_valid"]:
        warnings.append(f"Subject: {subject_check['rejected_reason']}")
    if not body_check["is_valid"]:
        warnings.append(f"Body: {body_check['rejected_reason']}")
    warnings.extend(subject_check["warnings"])
    warnings.extend(body_check["warnings"])

    return _result(
        subject_check["is_valid"] and body_check["is_valid"],
        warnings=warnings,
        rejected_reason=subject_check["rejected_reason"] or body_check["rejected_reason"],
    )

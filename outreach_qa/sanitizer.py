"""
Outreach QA - Input Sanitizer
Normalizes raw subject/body text before any analyzer sees it.

Steps, in order:
1. Reject missing or blank content
2. Truncate to MAX_CONTENT_LENGTH
3. Decode a fixed set of HTML entities
4. Collapse horizontal whitespace and cap blank lines
5. Strip dangerous markup (script/iframe tags, javascript: URIs, on*= handlers)

The output is always trimmed, and running it twice changes nothing.
"""

import re
from typing import Optional, Tuple

from outreach_qa.config import MAX_CONTENT_LENGTH
from outreach_qa.models import ValidationResult

# Decoded in this order
HTML_ENTITIES = [
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
]

DANGEROUS_PATTERNS = [
    ("script tag", re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)),
    ("iframe tag", re.compile(r"<iframe[^>]*>.*?</iframe>", re.IGNORECASE | re.DOTALL)),
    ("javascript: URI", re.compile(r"javascript:", re.IGNORECASE)),
    ("inline event handler", re.compile(r"on\w+\s*=", re.IGNORECASE)),
]

_HORIZONTAL_WS = re.compile(r"[ \t]+")
_WS_AROUND_NEWLINE = re.compile(r"[ \t]*\n[ \t]*")
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def _decode_entities(text: str) -> str:
    # Repeat until stable so double-encoded input cannot decode further on a second pass
    previous = None
    while previous != text:
        previous = text
        for entity, char in HTML_ENTITIES:
            text = text.replace(entity, char)
    return text


def _normalize_whitespace(text: str) -> str:
    text = _HORIZONTAL_WS.sub(" ", text)
    text = _WS_AROUND_NEWLINE.sub("\n", text)
    return _EXTRA_BLANK_LINES.sub("\n\n", text)


def _strip_dangerous(text: str) -> Tuple[str, list]:
    """Remove denylisted markup until none is left. Returns (text, labels matched)."""
    matched = []
    previous = None
    while previous != text:
        previous = text
        for label, pattern in DANGEROUS_PATTERNS:
            if pattern.search(text):
                text = pattern.sub("", text)
                if label not in matched:
                    matched.append(label)
        text = _decode_entities(text)
    return text, matched


def sanitize_content(content: Optional[str], max_length: int = MAX_CONTENT_LENGTH) -> ValidationResult:
    """Sanitize one field of an email draft.

    Args:
        content: Raw subject or body text (may be None).
        max_length: Truncation limit in characters.

    Returns:
        ValidationResult. is_valid is False only for missing or blank input.
    """
    if content is None:
        return ValidationResult(is_valid=False, sanitized_content="",
                                errors=["Content is null or undefined"])

    if not content.strip():
        return ValidationResult(is_valid=False, sanitized_content="",
                                errors=["Content is empty"])

    warnings = []
    sanitized = content

    if len(sanitized) > max_length:
        warnings.append(
            f"Content exceeds {max_length} characters, truncated from {len(sanitized)}"
        )
        sanitized = sanitized[:max_length]

    sanitized = _decode_entities(sanitized)

    before = len(sanitized)
    sanitized = _normalize_whitespace(sanitized)
    if len(sanitized) < before * 0.5:
        warnings.append("Excessive whitespace removed")

    sanitized, removed = _strip_dangerous(sanitized)
    for label in removed:
        warnings.append(f"Potentially dangerous content removed ({label})")

    # Removing markup can leave new whitespace runs behind
    sanitized = _normalize_whitespace(sanitized).strip()

    return ValidationResult(is_valid=True, sanitized_content=sanitized, warnings=warnings)


def sanitize_email(subject: Optional[str], body: Optional[str]) -> Tuple[ValidationResult, ValidationResult]:
    """Sanitize both fields of a draft. Returns (subject_result, body_result)."""
    return sanitize_content(subject), sanitize_content(body)

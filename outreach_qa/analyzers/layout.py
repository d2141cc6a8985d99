"""
Outreach QA - Greeting, Signature and Layout
Looks at the edges of the body (first lines, last lines) and its paragraphing.
"""

import re

from outreach_qa.analyzers.spam import analyze_links

PROFESSIONAL_GREETINGS = ["dear", "hello", "good morning", "good afternoon", "greetings"]
CASUAL_GREETINGS = ["hi", "hey", "yo", "sup", "hiya"]

SIGNATURE_PHRASES = ["best regards", "sincerely", "thanks", "cheers", "warm regards",
                     "kind regards"]

SIGNATURE_ELEMENTS = {
    "phone": re.compile(r"\d{3}[-.\s]?\d{3}[-.\s]?\d{4}"),
    "email": re.compile(r"[\w.+-]+@[\w-]+\.[\w.]+"),
    "website": re.compile(r"https?://", re.IGNORECASE),
    "social": re.compile(r"linkedin|twitter|facebook", re.IGNORECASE),
}


def analyze_greeting(body: str) -> dict:
    """Detect a greeting in the first one or two lines.

    Returns:
        {"has_greeting": bool, "type": "professional"|"casual"|None, "text": str|None}
    """
    lines = [line.strip() for line in body.strip().split("\n") if line.strip()]
    if not lines:
        return {"has_greeting": False, "type": None, "text": None}

    first_line = lines[0].lower()
    opening = " ".join(lines[:2]).lower()

    greeting_type = None
    if any(word in opening for word in PROFESSIONAL_GREETINGS):
        greeting_type = "professional"
    # A casual first word wins over a professional phrase further along
    first_word = re.split(r"[\s,!.]+", first_line)[0]
    if first_word in CASUAL_GREETINGS:
        greeting_type = "casual"

    if greeting_type is None:
        return {"has_greeting": False, "type": None, "text": None}
    return {"has_greeting": True, "type": greeting_type, "text": lines[0]}


def analyze_signature(body: str) -> dict:
    """Detect a sign-off in the last five lines and the contact details near it.

    Returns:
        {"has_signature": bool, "elements": [...], "text": str|None}
    """
    lines = [line.strip() for line in body.strip().split("\n") if line.strip()]
    tail = lines[-5:]
    tail_text = "\n".join(tail)
    tail_lower = tail_text.lower()

    has_signature = any(phrase in tail_lower for phrase in SIGNATURE_PHRASES)
    elements = [name for name, pattern in SIGNATURE_ELEMENTS.items() if pattern.search(tail_text)]

    return {
        "has_signature": has_signature,
        "elements": elements,
        "text": tail_text if has_signature else None,
    }


def analyze_layout(body: str) -> dict:
    """Greeting, signature, paragraphing and links in one summary."""
    paragraphs = [p for p in re.split(r"\n\s*\n", body) if p.strip()]
    links = analyze_links(body)
    greeting = analyze_greeting(body)
    signature = analyze_signature(body)

    return {
        "has_greeting": greeting["has_greeting"],
        "greeting_type": greeting["type"],
        "has_signature": signature["has_signature"],
        "signature_elements": signature["elements"],
        "paragraph_count": len(paragraphs),
        "link_count": links["count"],
        "suspicious_links": links["suspicious"],
    }

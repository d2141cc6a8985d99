"""
Outreach QA - Spam, Compliance, Link and Suspicious-Content Checks
Pure functions over sanitized text. Each returns a plain dict; nothing here
depends on another analyzer except analyze_links reuse by callers.
"""

import re
from typing import List

# ─── SPAM TRIGGERS ────────────────────────────────────────────

SPAM_TRIGGER_WORDS = [
    "free", "urgent", "act now", "limited time", "click here", "buy now",
    "order now", "prize", "winner", "congratulations", "cash", "bonus",
    "earn money", "extra income", "guarantee", "no cost", "no fees",
    "risk free", "satisfaction guaranteed", "as seen on", "call now",
    "don't delete", "don't hesitate", "for instant access", "get it now",
    "get paid", "get started now", "great offer", "increase sales",
    "incredible deal", "limited offer", "make money", "million dollars",
    "money back", "once in lifetime", "one time", "opportunity", "order today",
    "please read", "special promotion", "this isn't spam", "urgent response",
    "what are you waiting", "while supplies last", "you have been selected",
    "act immediately", "apply now", "become a member", "cards accepted",
    "claim your", "double your income", "financial freedom",
]

SPAM_POINTS_PER_TRIGGER = 5
SPAM_CAPS_RATIO = 0.3
SPAM_CAPS_POINTS = 15
SPAM_PUNCTUATION_POINTS = 10
SPAM_DOLLAR_POINTS = 8

_REPEATED_PUNCTUATION = re.compile(r"!{3,}|\?{3,}")


def spam_severity(score: int) -> str:
    if score >= 50:
        return "critical"
    if score >= 30:
        return "high"
    if score >= 15:
        return "medium"
    return "low"


def detect_spam_triggers(text: str) -> dict:
    """Score text for spam-filter risk.

    Returns:
        {"score": 0-100, "triggers": [...], "severity": "low"|"medium"|"high"|"critical"}
    """
    lower = text.lower()
    triggers = []
    score = 0

    for word in SPAM_TRIGGER_WORDS:
        if word in lower:
            triggers.append(word)
            score += SPAM_POINTS_PER_TRIGGER

    letters = [c for c in text if c.isalpha()]
    if letters:
        caps = sum(1 for c in letters if c.isupper())
        if caps / len(letters) > SPAM_CAPS_RATIO:
            triggers.append("Excessive capitalization")
            score += SPAM_CAPS_POINTS

    if _REPEATED_PUNCTUATION.search(text):
        triggers.append("Excessive punctuation")
        score += SPAM_PUNCTUATION_POINTS

    if text.count("$") >= 3:
        triggers.append("Multiple dollar signs")
        score += SPAM_DOLLAR_POINTS

    score = min(score, 100)
    return {"score": score, "triggers": triggers, "severity": spam_severity(score)}


# ─── LINKS ────────────────────────────────────────────────────

URL_PATTERN = re.compile(r"https?://[^\s]+")
IP_HOST_PATTERN = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}")
SHORTENER_PATTERN = re.compile(r"bit\.ly|tinyurl|goo\.gl|t\.co", re.IGNORECASE)


def analyze_links(text: str) -> dict:
    """Extract http(s) URLs and flag IP-literal hosts and URL shorteners."""
    links = URL_PATTERN.findall(text)
    suspicious = [
        link for link in links
        if IP_HOST_PATTERN.search(link) or SHORTENER_PATTERN.search(link)
    ]
    return {"links": links, "count": len(links), "suspicious": suspicious}


# ─── SUSPICIOUS CONTENT ───────────────────────────────────────

PHISHING_PATTERNS = [
    r"verify.*account",
    r"confirm.*password",
    r"update.*payment",
    r"suspended.*account",
    r"unusual.*activity",
    r"click.*immediately",
    r"secure.*account",
    r"verify.*identity",
    r"update.*billing",
    r"expire.*\d+.*hour",
]

URL_SHORTENERS = ["bit.ly", "tinyurl", "goo.gl"]

PROFANITY_WORDS = ["damn", "hell", "crap", "suck"]


def detect_suspicious_content(text: str) -> dict:
    """Flag phishing language, risky links and inappropriate words.

    Returns:
        {"is_suspicious": bool, "issues": [{"type", "description", "severity"}]}
    """
    issues = []

    for pattern in PHISHING_PATTERNS:
        if re.search(pattern, text, re.IGNORECASE):
            issues.append({
                "type": "phishing",
                "description": f"Contains phishing-like language: {pattern}",
                "severity": "high",
            })

    for url in URL_PATTERN.findall(text):
        if IP_HOST_PATTERN.search(url):
            issues.append({
                "type": "phishing",
                "description": "URL uses an IP address instead of a domain",
                "severity": "high",
            })
        if any(shortener in url.lower() for shortener in URL_SHORTENERS):
            issues.append({
                "type": "malicious_link",
                "description": "Shortened URL detected",
                "severity": "medium",
            })

    for word in PROFANITY_WORDS:
        if re.search(rf"\b{word}\b", text, re.IGNORECASE):
            issues.append({
                "type": "inappropriate",
                "description": f"Inappropriate language: {word}",
                "severity": "medium",
            })

    return {"is_suspicious": bool(issues), "issues": issues}


# ─── COMPLIANCE ───────────────────────────────────────────────

UNSUBSCRIBE_PATTERN = re.compile(r"unsubscribe|opt-out|opt out", re.IGNORECASE)
STREET_ADDRESS_PATTERN = re.compile(
    r"\d+\s+\w+\s+(street|st|avenue|ave|road|rd|boulevard|blvd)", re.IGNORECASE
)


def check_compliance(subject: str, body: str) -> dict:
    """CAN-SPAM style checks.

    Returns:
        {"is_compliant": bool, "issues": [{"type", "description", "severity"}]}
    """
    issues: List[dict] = []

    if not UNSUBSCRIBE_PATTERN.search(body):
        issues.append({
            "type": "CAN-SPAM",
            "description": "Missing unsubscribe or opt-out option",
            "severity": "high",
        })

    if not STREET_ADDRESS_PATTERN.search(body):
        issues.append({
            "type": "CAN-SPAM",
            "description": "Missing physical mailing address",
            "severity": "medium",
        })

    if "re:" in subject.lower() and "reply" not in body.lower():
        issues.append({
            "type": "Misleading",
            "description": "Subject suggests a reply but the body does not read as one",
            "severity": "medium",
        })

    return {"is_compliant": not issues, "issues": issues}

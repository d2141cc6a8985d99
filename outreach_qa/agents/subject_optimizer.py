"""
Outreach QA - Subject Line Optimizer
Length banding, hook detection, emotional triggers, spam risk, mobile preview
truncation and personalization tokens, rolled into one 0-100 score.

The "boost" figures attached to hooks and triggers are explanatory labels
shown to the user. They do not change the score beyond presence/absence.
"""

import re

from outreach_qa.models import PRIORITY_ORDER, Priority, clamp_score, coerce_recipient

# ─── DATA TABLES ──────────────────────────────────────────────

# name -> (patterns, label, boost)
HOOK_PATTERNS = {
    "question": ([r"\?$"], "Question", "+44%"),
    "number": ([r"\d+"], "Number/Statistic", "+57%"),
    "curiosity": ([r"secret|discover|revealed|truth|why"], "Curiosity Gap", "+38%"),
    "personalization": ([r"\{|\["], "Personalization Token", "+26%"),
    "how_to": ([r"^how to", r"^how i"], "How-To", "+32%"),
    "list": ([r"^\d+\s+(ways?|tips?|steps?|things?|reasons?)"], "List Format", "+45%"),
    "urgency": ([r"today|now|deadline|last chance|limited"], "Urgency", "+22%"),
    "exclusive": ([r"exclusive|invite|private|vip|only you"], "Exclusivity", "+14%"),
}

EMOTIONAL_TRIGGERS = {
    "fear": (["miss", "missing", "losing", "behind", "risk", "danger", "avoid", "never"], "+22%"),
    "excitement": (["breakthrough", "amazing", "incredible", "finally", "announcing", "new"], "+18%"),
    "curiosity": (["secret", "revealed", "truth", "discover", "unknown", "hidden", "why"], "+35%"),
    "greed": (["save", "free", "bonus", "discount", "deal", "value", "profit"], "+15%"),
    "pride": (["exclusive", "selected", "elite", "top", "best", "winner", "chosen"], "+12%"),
}

# (word, risk tier, suggested alternative)
SUBJECT_SPAM_TRIGGERS = [
    ("free", "high", "complimentary or no-cost"),
    ("guarantee", "high", "promise or ensure"),
    ("no obligation", "high", "no commitment"),
    ("winner", "high", "selected"),
    ("congratulations", "high", "great news"),
    ("act now", "high", "take a look"),
    ("limited time", "high", "this week"),
    ("click here", "high", "learn more"),
    ("buy now", "high", "check it out"),
    ("order now", "high", "see details"),
    ("urgent", "medium", "important"),
    ("amazing", "medium", "impressive"),
    ("incredible", "medium", "notable"),
    ("unbelievable", "medium", "remarkable"),
    ("100%", "medium", "fully"),
    ("don't miss", "medium", "worth seeing"),
]
SPAM_RISK_POINTS = {"high": 20, "medium": 10}

WEAK_LEAD_WORDS = {"the", "a", "an", "our", "your", "i"}

MOBILE_PREVIEW_CHARS = 35
DESKTOP_PREVIEW_CHARS = 70

_ALL_CAPS_WORD = re.compile(r"[A-Z]{4,}")
_EXCESSIVE_PUNCTUATION = re.compile(r"[!?]{2,}")
_TOKEN = re.compile(r"\{[^}]+\}|\[[^\]]+\]")


# ─── SUB-ANALYSES ─────────────────────────────────────────────

def analyze_subject_length(subject: str) -> dict:
    char_count = len(subject)
    if char_count < 20:
        status = "too_short"
    elif char_count <= 35:
        status = "mobile_optimal"
    elif char_count <= 60:
        status = "optimal"
    else:
        status = "too_long"

    return {
        "char_count": char_count,
        "word_count": len(subject.split()),
        "status": status,
        "mobile_visible": min(char_count, MOBILE_PREVIEW_CHARS),
        "desktop_visible": min(char_count, DESKTOP_PREVIEW_CHARS),
    }


def analyze_hook_type(subject: str) -> dict:
    detected = []
    recommendations = []

    for patterns, label, boost in HOOK_PATTERNS.values():
        if any(re.search(p, subject, re.IGNORECASE) for p in patterns):
            detected.append(f"{label} ({boost})")

    if not detected:
        recommendations.append("Add a hook: question, number, or curiosity gap")
        recommendations.append("Questions increase open rates by 44%")

    # Lowercase subjects read as personal notes; needs letters to count
    if any(c.isalpha() for c in subject) and subject == subject.lower():
        detected.append("All lowercase (+32%)")

    return {"detected": detected, "effective": bool(detected), "recommendations": recommendations}


def analyze_emotional_triggers(subject: str) -> dict:
    """At most one trigger per emotion type counts."""
    lower = subject.lower()
    triggers = []
    for emotion, (words, boost) in EMOTIONAL_TRIGGERS.items():
        for word in words:
            if word in lower:
                triggers.append({"type": emotion, "word": word, "boost": boost})
                break
    return {"triggers": triggers, "score": min(100, 50 + 15 * len(triggers))}


def analyze_spam_risk(subject: str) -> dict:
    """0 = no risk, 100 = almost certainly filtered."""
    lower = subject.lower()
    score = 0
    triggers = []
    recommendations = []

    for word, risk, alternative in SUBJECT_SPAM_TRIGGERS:
        if word in lower:
            score += SPAM_RISK_POINTS[risk]
            triggers.append(word)
            recommendations.append(f'Replace "{word}" with "{alternative}"')

    if _ALL_CAPS_WORD.search(subject):
        score += 25
        triggers.append("ALL CAPS words")
        recommendations.append("Avoid all-caps words - they trigger spam filters")

    if _EXCESSIVE_PUNCTUATION.search(subject):
        score += 20
        triggers.append("Excessive punctuation")
        recommendations.append("Use single punctuation marks only")

    if "$" in subject:
        score += 15
        triggers.append("Dollar amounts")
        recommendations.append("Avoid mentioning specific dollar amounts in subject lines")

    return {"score": min(100, score), "triggers": triggers, "recommendations": recommendations}


def analyze_mobile_preview(subject: str) -> dict:
    preview = subject[:MOBILE_PREVIEW_CHARS]
    truncated = len(subject) > MOBILE_PREVIEW_CHARS
    recommendations = []

    if truncated:
        recommendations.append(f'Only "{preview}..." visible on mobile')
        recommendations.append(f"Put key message in first {MOBILE_PREVIEW_CHARS} characters")

    words = subject.split()
    if words and words[0].lower() in WEAK_LEAD_WORDS:
        recommendations.append("Lead with a strong word, not articles or pronouns")

    return {
        "preview_text": preview + ("..." if truncated else ""),
        # A single unbroken word cut at 35 chars means nothing readable survives
        "is_complete": not truncated or " " in preview,
        "recommendations": recommendations,
    }


def analyze_subject_personalization(subject: str, recipient=None) -> dict:
    has_tokens = bool(_TOKEN.search(subject))
    has_name = bool(re.search(r"\{(first_?name|name)\}|\[(first_?name|name)\]", subject, re.IGNORECASE))
    has_company = bool(re.search(r"\{company\}|\[company\]", subject, re.IGNORECASE))

    # A literal merge of the recipient's details counts as well as a token
    lower = subject.lower()
    if recipient is not None:
        if recipient.name and recipient.name.strip() and recipient.name.split()[0].lower() in lower:
            has_name = True
        if recipient.company and recipient.company.strip() and recipient.company.lower() in lower:
            has_company = True

    score = 40 + 20 * sum([has_tokens, has_name, has_company])
    return {
        "has_tokens": has_tokens,
        "has_name": has_name,
        "has_company": has_company,
        "score": min(100, score),
    }


# ─── IMPROVEMENTS & ALTERNATIVES ──────────────────────────────

def generate_subject_improvements(analysis: dict) -> list:
    improvements = []
    length = analysis["length"]

    if length["status"] == "too_long":
        improvements.append({
            "category": "subject",
            "priority": Priority.HIGH,
            "issue": f"Subject line too long ({length['char_count']} chars)",
            "suggestion": "Shorten to under 50 characters for better open rates",
            "impact": "+21% open rate for shorter subjects",
        })
    elif length["status"] == "too_short":
        improvements.append({
            "category": "subject",
            "priority": Priority.MEDIUM,
            "issue": f"Subject line too short ({length['char_count']} chars)",
            "suggestion": "Add more context or intrigue (aim for 30-50 chars)",
            "impact": "Short subjects lack context and intrigue",
        })

    if not analysis["hook_type"]["effective"]:
        improvements.append({
            "category": "subject",
            "priority": Priority.CRITICAL,
            "issue": "No effective hook detected",
            "suggestion": "Add a question, number, or curiosity gap to grab attention",
            "impact": "Hooks increase open rates by 20-44%",
        })

    spam = analysis["spam_risk"]
    if spam["score"] > 30:
        improvements.append({
            "category": "subject",
            "priority": Priority.CRITICAL,
            "issue": f"High spam risk ({', '.join(spam['triggers'])})",
            "suggestion": spam["recommendations"][0] if spam["recommendations"] else "Remove spam trigger words",
            "impact": "Reduces deliverability and trust",
        })

    for rec in analysis["mobile_preview"]["recommendations"]:
        improvements.append({
            "category": "subject",
            "priority": Priority.MEDIUM,
            "issue": "Mobile preview optimization needed",
            "suggestion": rec,
            "impact": "60% of emails opened on mobile",
        })

    if analysis["personalization"]["score"] < 60:
        improvements.append({
            "category": "subject",
            "priority": Priority.HIGH,
            "issue": "Missing personalization",
            "suggestion": "Add {name} or {company} tokens to subject line",
            "impact": "+26% higher open rates with personalization",
        })

    return sorted(improvements, key=lambda imp: PRIORITY_ORDER[imp["priority"]])


def generate_subject_alternatives(subject: str) -> list:
    """Rewrites built only from the subject's own words."""
    base = re.sub(r"[?!.]$", "", subject).strip()
    if not base:
        return []

    alternatives = []
    if not subject.endswith("?"):
        alternatives.append({"text": f"{base}?", "hook_type": "Question", "predicted_boost": "+44%"})
    if subject != subject.lower():
        alternatives.append({"text": subject.lower(), "hook_type": "All lowercase",
                             "predicted_boost": "+32%"})
    if not re.search(r"\d", subject):
        alternatives.append({"text": f"3 ways to {base.lower()}", "hook_type": "List format",
                             "predicted_boost": "+45%"})
    if not subject.endswith("?"):
        alternatives.append({"text": f"Quick question about {base.lower()}",
                             "hook_type": "Pattern interrupt", "predicted_boost": "+35%"})
    return alternatives


# ─── ENTRY POINT ──────────────────────────────────────────────

def analyze_subject_line(subject: str, recipient_data=None) -> dict:
    """Full subject-line analysis.

    Score: base 50, +15 mobile_optimal / +10 optimal / -10 too_long, +20 for
    any hook, +5 per emotional trigger (max 15), minus a third of the spam
    risk (max 30), +10 when a personalization token is present.

    Returns:
        {"score", "analysis": {...six sub-dicts...}, "improvements", "alternatives"}
    """
    recipient = coerce_recipient(recipient_data)
    analysis = {
        "length": analyze_subject_length(subject),
        "hook_type": analyze_hook_type(subject),
        "emotional_triggers": analyze_emotional_triggers(subject),
        "spam_risk": analyze_spam_risk(subject),
        "mobile_preview": analyze_mobile_preview(subject),
        "personalization": analyze_subject_personalization(subject, recipient),
    }

    score = 50.0
    status = analysis["length"]["status"]
    if status == "mobile_optimal":
        score += 15
    elif status == "optimal":
        score += 10
    elif status == "too_long":
        score -= 10

    if analysis["hook_type"]["effective"]:
        score += 20
    score += min(15, len(analysis["emotional_triggers"]["triggers"]) * 5)
    score -= min(30, analysis["spam_risk"]["score"] / 3)
    if analysis["personalization"]["has_tokens"]:
        score += 10

    return {
        "score": clamp_score(score),
        "analysis": analysis,
        "improvements": generate_subject_improvements(analysis),
        "alternatives": generate_subject_alternatives(subject),
    }

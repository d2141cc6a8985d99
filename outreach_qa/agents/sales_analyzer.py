"""
Outreach QA - Sales Email Analyzer
Scores a cold/sales email on the six things reply-rate data keeps pointing at:

1. Opening line (generic opener vs. observation/question/pattern interrupt)
2. Personalization (company/name mentions, research markers, merge tokens)
3. Value proposition (you vs. I ratio, benefit verbs, causal language)
4. Social proof (metrics, similar companies, named brands)
5. Urgency (natural is rewarded, artificial and aggressive are penalized)
6. CTA (time-boxed, low-friction, single ask)

Overall = weighted sum of the six (see SALES_WEIGHTS).
"""

import re
from typing import Optional

from outreach_qa.models import PRIORITY_ORDER, Priority, RecipientData, coerce_recipient

# ─── WORD LISTS ───────────────────────────────────────────────

GENERIC_OPENERS = [
    "i hope this email finds you well",
    "i hope you are doing well",
    "i wanted to reach out",
    "i am reaching out",
    "i hope you had a great weekend",
    "i hope this finds you in good spirits",
    "i just wanted to touch base",
    "i am following up",
    "my name is",
    "i am writing to",
    "i wanted to introduce myself",
    "hope all is well",
    "i trust this email finds you well",
    "good morning/afternoon",
    "happy monday",
    "happy friday",
]

# (phrase, opener type, score boost over the base of 70)
EFFECTIVE_OPENERS = [
    ("quick question", "question", 20),
    ("noticed", "observation", 25),
    ("saw your", "observation", 25),
    ("came across", "observation", 20),
    ("congrats on", "personalized", 30),
    ("loved your", "personalized", 30),
    ("permission to be blunt", "pattern_interrupt", 15),
    ("not a sales email", "pattern_interrupt", 15),
    ("weird ask", "pattern_interrupt", 12),
]

# (pattern, weight); confidence = share of total weight matched, doubled
SALES_SIGNALS = [
    (r"(\bsales\b|revenue|pipeline|deal|close)", 2),
    (r"(demo|meeting|call|chat|coffee)", 1.5),
    (r"(solution|product|service|platform|tool)", 1),
    (r"(challenge|problem|struggle|pain point)", 1.5),
    (r"(help (you|your)|assist your|support your)", 1.5),
    (r"(increase|improve|boost|grow|scale)", 1),
    (r"(roi|results|outcomes|impact)", 1.5),
    (r"(competitor|market|industry)", 1),
]

RESEARCH_MARKERS = [
    r"saw (your|you|that)",
    r"noticed (your|you|that)",
    r"read (your|about)",
    r"listened to",
    r"watched your",
    r"your (recent|latest)",
    r"congrats on",
    r"loved your",
]

BENEFIT_WORDS = ["save", "increase", "improve", "reduce", "grow", "boost", "accelerate",
                 "simplify", "automate", "eliminate"]

VALUE_STATEMENTS = [r"help you", r"enable you", r"so that you", r"which means",
                    r"resulting in", r"leading to"]

# (pattern, proof type); "example" is recognized but adds nothing
SOCIAL_PROOF_PATTERNS = [
    (r"\d+%", "metric"),
    (r"\d+x", "metric"),
    (r"companies like", "similar_company"),
    (r"similar to", "similar_company"),
    (r"other \w+ (leaders?|teams?|companies)", "similar_company"),
    (r"(increased|improved|reduced|saved|generated)", "result"),
    (r"case study", "testimonial"),
    (r"for example", "example"),
]
SOCIAL_PROOF_POINTS = {"metric": 20, "similar_company": 25, "testimonial": 15, "result": 10}

BRAND_NAMES = r"\b(fortune \d+|google|amazon|microsoft|meta|salesforce|hubspot)\b"

NATURAL_URGENCY = [r"end of (quarter|month|year)", r"before (the|your)", r"upcoming",
                   r"this week", r"planning for"]
ARTIFICIAL_URGENCY = [r"limited time", r"only \d+ (spots|seats)", r"offer expires", r"act now",
                      r"don't miss out"]
AGGRESSIVE_URGENCY = [r"last chance", r"final opportunity", r"hurry", r"urgent", r"asap"]

# Only the first matching strong pattern counts
STRONG_CTA_PATTERNS = [
    (r"worth a (\d+|quick|brief) (min|minute)", 25),
    (r"\d+ minutes?", 20),
    (r"quick call", 20),
    (r"open to", 18),
    (r"interested in", 15),
    (r"would you be against", 22),
    (r"does that sound", 18),
]
WEAK_CTA_PATTERNS = [
    (r"let me know if you have any questions", 10),
    (r"feel free to reach out", 10),
    (r"don't hesitate", 8),
    (r"at your earliest convenience", 12),
    (r"whenever you get a chance", 10),
]

SALES_WEIGHTS = {
    "opening_line": 0.2,
    "personalization": 0.2,
    "value_proposition": 0.2,
    "social_proof": 0.1,
    "urgency": 0.05,
    "call_to_action": 0.25,
}


def _matches(pattern: str, text: str) -> bool:
    return re.search(pattern, text, re.IGNORECASE) is not None


# ─── DETECTION ────────────────────────────────────────────────

def detect_sales_email(subject: str, body: str) -> dict:
    """Weighted keyword vote on whether this is a sales email.

    Returns:
        {"is_sales_email": bool, "confidence": 0-100}
    """
    content = f"{subject} {body}".lower()
    total = sum(weight for _, weight in SALES_SIGNALS)
    hit = sum(weight for pattern, weight in SALES_SIGNALS if _matches(pattern, content))
    confidence = min(100, round(hit / total * 100 * 2))
    return {"is_sales_email": confidence > 40, "confidence": confidence}


# ─── SUB-SCORES ───────────────────────────────────────────────

def analyze_opening_line(body: str) -> dict:
    """Score the first line (and the first two for generic openers)."""
    lines = [line for line in re.split(r"[.\n]", body) if line.strip()]
    first_line = lines[0].lower().strip() if lines else ""
    first_two = " ".join(lines[:2]).lower()

    for opener in GENERIC_OPENERS:
        if opener in first_two:
            return {
                "score": 20,
                "type": "generic",
                "issue": "Generic opener detected - these are ignored by 95% of recipients",
                "suggestion": f'Replace "{opener}" with a specific observation about the recipient or their company',
            }

    for phrase, opener_type, boost in EFFECTIVE_OPENERS:
        if phrase in first_line:
            return {"score": 70 + boost, "type": opener_type, "issue": None, "suggestion": None}

    if "?" in first_line:
        return {"score": 75, "type": "question", "issue": None, "suggestion": None}

    return {
        "score": 55,
        "type": "generic",
        "issue": "Opening lacks a strong hook",
        "suggestion": "Start with a specific observation, relevant question, or personalized reference",
    }


def analyze_personalization(content: str, recipient: Optional[RecipientData] = None) -> dict:
    score = 30
    lower = content.lower()
    result = {
        "has_company_mention": False,
        "has_name_mention": False,
        "has_specific_reference": False,
        "has_research": False,
    }

    company = recipient.company if recipient else None
    name = recipient.name if recipient else None

    if company and company.strip() and company.lower() in lower:
        result["has_company_mention"] = True
        score += 20
    elif _matches(r"your (company|team|organization)", content):
        score += 10

    if name and name.strip() and name.split()[0].lower() in lower:
        result["has_name_mention"] = True
        score += 10

    if any(_matches(pattern, content) for pattern in RESEARCH_MARKERS):
        result["has_research"] = True
        result["has_specific_reference"] = True
        score += 20

    if re.search(r"\{[^}]+\}|\[[^\]]+\]", content):
        score += 5

    result["score"] = min(100, score)
    return result


def analyze_value_proposition(body: str) -> dict:
    score = 40
    lower = body.lower()
    result = {"clarity": "vague", "benefit_focused": False, "recipient_centric": False}

    you_count = len(re.findall(r"\byou\b|\byour\b", body, re.IGNORECASE))
    i_count = len(re.findall(r"\bi\b|\bwe\b|\bour\b", body, re.IGNORECASE))

    if you_count > i_count:
        result["recipient_centric"] = True
        score += 20
    elif i_count > you_count * 1.5:
        score -= 10

    if any(word in lower for word in BENEFIT_WORDS):
        result["benefit_focused"] = True
        score += 15

    if any(_matches(pattern, body) for pattern in VALUE_STATEMENTS):
        result["clarity"] = "clear"
        score += 15
    elif _matches(r"our (product|solution|platform|tool)", body):
        score -= 5

    result["score"] = max(0, min(100, score))
    return result


def analyze_social_proof(body: str) -> dict:
    score = 30
    result = {
        "has_company_proof": False,
        "has_metrics": False,
        "has_testimonial": False,
        "has_similar_company": False,
    }

    for pattern, proof_type in SOCIAL_PROOF_PATTERNS:
        if not _matches(pattern, body):
            continue
        score += SOCIAL_PROOF_POINTS.get(proof_type, 0)
        if proof_type == "metric":
            result["has_metrics"] = True
        elif proof_type == "similar_company":
            result["has_similar_company"] = True
        elif proof_type == "testimonial":
            result["has_testimonial"] = True

    if _matches(BRAND_NAMES, body):
        result["has_company_proof"] = True
        score += 15

    result["score"] = min(100, score)
    return result


def analyze_urgency(body: str) -> dict:
    """Aggressive beats artificial beats natural; no urgency at all scores 60."""
    if any(_matches(p, body) for p in AGGRESSIVE_URGENCY):
        return {"score": 30, "type": "aggressive", "appropriate": False}
    if any(_matches(p, body) for p in ARTIFICIAL_URGENCY):
        return {"score": 50, "type": "artificial", "appropriate": False}
    if any(_matches(p, body) for p in NATURAL_URGENCY):
        return {"score": 80, "type": "natural", "appropriate": True}
    return {"score": 60, "type": "none", "appropriate": True}


def analyze_sales_cta(body: str) -> dict:
    score = 40
    result = {"has_clear_cta": False, "single_ask": True, "low_friction": False,
              "specific": False}

    for pattern, points in STRONG_CTA_PATTERNS:
        if _matches(pattern, body):
            result["has_clear_cta"] = True
            result["specific"] = True
            score += points
            break

    for pattern, penalty in WEAK_CTA_PATTERNS:
        if _matches(pattern, body):
            score -= penalty

    last_segments = " ".join(re.split(r"[.\n]", body)[-3:])
    if "?" in last_segments:
        result["has_clear_cta"] = True
        score += 15

    if _matches(r"\d+ (min|minute)", body):
        result["low_friction"] = True
        score += 10

    if body.count("?") > 2:
        result["single_ask"] = False
        score -= 15

    result["score"] = max(0, min(100, score))
    return result


# ─── IMPROVEMENTS ─────────────────────────────────────────────

def generate_sales_improvements(scores: dict) -> list:
    """Turn weak sub-scores into improvement dicts, most urgent first."""
    improvements = []
    opening = scores["opening_line"]
    value = scores["value_proposition"]
    cta = scores["call_to_action"]
    urgency = scores["urgency"]

    if opening["score"] < 60:
        improvements.append({
            "category": "opening",
            "priority": Priority.CRITICAL,
            "issue": opening["issue"] or "Weak opening line",
            "suggestion": opening["suggestion"] or "Start with a personalized observation or pattern interrupt",
            "impact": "+35% reply rate with strong openers",
            "example": 'Try: "Noticed you recently [specific observation] - quick question about that..."',
        })

    if scores["personalization"]["score"] < 60:
        improvements.append({
            "category": "personalization",
            "priority": Priority.HIGH,
            "issue": "Low personalization detected",
            "suggestion": "Add specific references to the recipient's company, role, or recent activity",
            "impact": "+26% response rate with relevant personalization",
            "example": "Reference a recent company announcement, LinkedIn post, or industry news",
        })

    if value["score"] < 60:
        improvements.append({
            "category": "value_prop",
            "priority": Priority.HIGH,
            "issue": "No clear value proposition" if value["clarity"] == "missing" else "Vague value proposition",
            "suggestion": "Focus on specific benefits and outcomes for the recipient, not your product features",
            "impact": "+22% engagement with clear value statements",
            "example": 'Instead of "Our platform has X feature", say "This helps you achieve Y result"',
        })

    if not value["recipient_centric"]:
        improvements.append({
            "category": "value_prop",
            "priority": Priority.MEDIUM,
            "issue": "Too much I/we language, not enough you/your",
            "suggestion": 'Rewrite to focus on the recipient - use "you" and "your" more than "I" and "we"',
            "impact": "+18% higher engagement with recipient-focused copy",
            "example": None,
        })

    if scores["social_proof"]["score"] < 50:
        improvements.append({
            "category": "social_proof",
            "priority": Priority.MEDIUM,
            "issue": "Missing social proof elements",
            "suggestion": "Add relevant metrics, case studies, or mentions of similar companies",
            "impact": "+15% credibility boost",
            "example": '"We helped companies like [similar company] achieve [specific result]"',
        })

    if not urgency["appropriate"]:
        improvements.append({
            "category": "urgency",
            "priority": Priority.MEDIUM,
            "issue": f"{urgency['type']} urgency detected",
            "suggestion": "Use natural urgency tied to real events rather than artificial pressure",
            "impact": "Avoid spam filters and improve trust",
            "example": None,
        })

    if cta["score"] < 60:
        improvements.append({
            "category": "cta",
            "priority": Priority.CRITICAL,
            "issue": "Weak CTA" if cta["has_clear_cta"] else "Missing clear call-to-action",
            "suggestion": "End with a specific, low-friction ask with a clear time commitment",
            "impact": "+28% response rate with strong CTAs",
            "example": 'Try: "Worth a 15-minute call this week?" or "Would you be open to a quick chat?"',
        })

    if not cta["single_ask"]:
        improvements.append({
            "category": "cta",
            "priority": Priority.HIGH,
            "issue": "Multiple asks detected",
            "suggestion": "Focus on one clear ask - multiple options reduce response rates",
            "impact": "Single ask increases responses by 25%",
            "example": None,
        })

    return sorted(improvements, key=lambda imp: PRIORITY_ORDER[imp["priority"]])


# ─── ENTRY POINT ──────────────────────────────────────────────

def analyze_sales_email(subject: str, body: str, recipient_data=None) -> dict:
    """Run all six sales sub-analyzers and the weighted rollup.

    Args:
        subject: Sanitized subject line.
        body: Sanitized body.
        recipient_data: Optional RecipientData or dict with name/company.

    Returns:
        {"is_sales_email", "confidence", "scores": {...six sub-dicts...},
         "overall_score", "improvements": [...]}
    """
    recipient = coerce_recipient(recipient_data)
    detection = detect_sales_email(subject, body)

    scores = {
        "opening_line": analyze_opening_line(body),
        "personalization": analyze_personalization(f"{subject}\n{body}", recipient),
        "value_proposition": analyze_value_proposition(body),
        "social_proof": analyze_social_proof(body),
        "urgency": analyze_urgency(body),
        "call_to_action": analyze_sales_cta(body),
    }

    overall = round(sum(scores[key]["score"] * weight for key, weight in SALES_WEIGHTS.items()))

    return {
        "is_sales_email": detection["is_sales_email"],
        "confidence": detection["confidence"],
        "scores": scores,
        "overall_score": overall,
        "improvements": generate_sales_improvements(scores),
    }

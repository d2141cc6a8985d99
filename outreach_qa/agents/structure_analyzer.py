"""
Outreach QA - Structure Analyzer
Splits the body into introduction / middle / closing and scores each section,
then scores the flow between them.

Overall = intro 25% + body 25% + CTA 30% + closing 5% + flow 15%.
"""

import re

from outreach_qa.models import PRIORITY_ORDER, Priority, clamp_score

# ─── PATTERNS ─────────────────────────────────────────────────

STRONG_OPENERS = [
    r"^(noticed|saw|came across|read|heard|congratulations)",
    r"^quick question",
    r"^(i|we)'ll be (brief|quick)",
    r"^\{name\}",
]

WEAK_OPENERS = [
    r"^(i hope|hope this|i wanted to|my name is)",
    r"^(hello|hi|hey|dear|good morning|good afternoon)",
    r"^(i'm reaching out|i am reaching out|i'm writing|i am writing)",
]

RELEVANCE_MARKERS = r"because|since|noticed|saw|given that"

VALUE_INDICATORS = [
    r"help (you|your)",
    r"enable you",
    r"increase your",
    r"reduce your",
    r"save you",
    r"improve your",
    r"so you can",
    r"which means",
]

SOCIAL_PROOF_PATTERNS = [
    r"companies like",
    r"teams like yours",
    r"similar to",
    r"\d+%",
    r"\d+x",
    r"(increased|improved|grew|reduced) (by|to)",
]

SPECIFIC_BENEFIT = r"\d+%|\d+x|\d+ hours?|\d+ minutes?|\$\d+"

LOW_FRICTION_PHRASES = [r"worth a", r"open to", r"interested in", r"make sense", r"sound good"]
SPECIFIC_TIME = r"\d+\s*(min|minute|mins|minutes)|this week|tomorrow|today"

# Checked in this order; first type with a hit wins
SIGN_OFFS = {
    "formal": ["best regards", "sincerely", "respectfully", "kind regards", "warmly"],
    "casual": ["cheers", "thanks", "best", "later", "talk soon"],
    "professional": ["thank you", "looking forward", "appreciate it", "let me know"],
}

TRANSITION_WORDS = ["because", "so", "which is why", "that's why", "specifically", "for example"]

STRUCTURE_WEIGHTS = {
    "introduction": 0.25,
    "body": 0.25,
    "call_to_action": 0.3,
    "closing": 0.05,
    "flow": 0.15,
}


def _matches(pattern: str, text: str) -> bool:
    return re.search(pattern, text, re.IGNORECASE) is not None


def split_into_sections(body: str) -> dict:
    """Paragraph split; single-paragraph bodies fall back to sentence positions."""
    paragraphs = [p for p in re.split(r"\n\n+", body) if p.strip()]

    if len(paragraphs) <= 1:
        only = paragraphs[0] if paragraphs else ""
        sentences = [s for s in re.split(r"[.!?]+", only) if s.strip()]
        if len(sentences) <= 2:
            return {"intro": only, "middle": "", "closing": ""}
        return {
            "intro": ". ".join(s.strip() for s in sentences[:2]) + ".",
            "middle": ". ".join(s.strip() for s in sentences[2:-1]) + ("." if len(sentences) > 3 else ""),
            "closing": sentences[-1].strip(),
        }

    return {
        "intro": paragraphs[0],
        "middle": "\n\n".join(paragraphs[1:-1]),
        "closing": paragraphs[-1],
    }


# ─── SECTION SCORERS ──────────────────────────────────────────

def analyze_introduction(intro: str) -> dict:
    words = intro.split()
    opening = intro.strip()
    score = 50
    issues = []

    has_hook = any(_matches(p, opening) for p in STRONG_OPENERS)
    if has_hook:
        score += 20

    if any(_matches(p, opening) for p in WEAK_OPENERS):
        score -= 20
        issues.append("Generic opening - replace with personalized hook")

    has_relevance = _matches(RELEVANCE_MARKERS, intro)
    if has_relevance:
        score += 15

    if len(words) > 40:
        score -= 10
        issues.append("Introduction too long - get to the point faster")

    if score >= 70 and has_hook:
        quality = "strong"
    elif score < 50:
        quality = "weak"
    else:
        quality = "adequate"

    return {
        "score": clamp_score(score),
        "line_count": len([line for line in intro.split("\n") if line.strip()]),
        "word_count": len(words),
        "quality": quality,
        "has_personal_hook": has_hook,
        "has_relevance_statement": has_relevance,
        "issues": issues,
    }


def analyze_body_content(middle: str) -> dict:
    if not middle.strip():
        return {
            "score": 40,
            "paragraph_count": 0,
            "avg_paragraph_words": 0,
            "has_value_proposition": False,
            "has_social_proof": False,
            "has_specific_benefit": False,
            "issues": ["Email is too short - add more value content"],
        }

    paragraphs = [p for p in re.split(r"\n\n+", middle) if p.strip()]
    word_count = len(middle.split())
    score = 60
    issues = []

    has_value = any(_matches(p, middle) for p in VALUE_INDICATORS)
    if has_value:
        score += 15
    else:
        issues.append("Missing clear value proposition")

    has_proof = any(_matches(p, middle) for p in SOCIAL_PROOF_PATTERNS)
    if has_proof:
        score += 10

    has_specific = _matches(SPECIFIC_BENEFIT, middle)
    if has_specific:
        score += 10

    avg_words = word_count / len(paragraphs) if paragraphs else word_count
    if avg_words > 50:
        score -= 10
        issues.append("Paragraphs too long - break into smaller chunks")

    return {
        "score": clamp_score(score),
        "paragraph_count": len(paragraphs),
        "avg_paragraph_words": round(avg_words),
        "has_value_proposition": has_value,
        "has_social_proof": has_proof,
        "has_specific_benefit": has_specific,
        "issues": issues,
    }


def analyze_cta_section(closing: str) -> dict:
    closing = closing.strip()
    if not closing:
        return {
            "score": 20,
            "has_closing_paragraph": False,
            "cta_type": "missing",
            "is_low_friction": False,
            "is_specific": False,
            "issues": ["Missing closing paragraph with call-to-action"],
        }

    score = 40
    issues = []

    if closing.endswith("?"):
        cta_type = "question"
        score += 20
    elif _matches(r"offer|free|bonus", closing):
        cta_type = "offer"
        score += 10
    else:
        cta_type = "statement"

    is_low_friction = any(_matches(p, closing) for p in LOW_FRICTION_PHRASES)
    if is_low_friction:
        score += 15
    else:
        issues.append("CTA could be lower friction - make it easier to say yes")

    is_specific = _matches(SPECIFIC_TIME, closing)
    if is_specific:
        score += 15
    else:
        issues.append("Add specific timeframe to increase response rate")

    return {
        "score": clamp_score(score),
        "has_closing_paragraph": True,
        "cta_type": cta_type,
        "is_low_friction": is_low_friction,
        "is_specific": is_specific,
        "issues": issues,
    }


def analyze_closing(body: str) -> dict:
    lower = body.lower()
    sign_off_type = "none"
    for kind, phrases in SIGN_OFFS.items():
        if any(re.search(rf"\b{re.escape(p)}\b", lower) for p in phrases):
            sign_off_type = kind
            break

    has_sign_off = sign_off_type != "none"
    return {
        "score": 70 if has_sign_off else 60,
        "has_sign_off": has_sign_off,
        "sign_off_type": sign_off_type,
        "is_appropriate": has_sign_off,
    }


def analyze_flow(body: str) -> dict:
    paragraphs = [p for p in re.split(r"\n\n+", body) if p.strip()]
    lower = body.lower()
    score = 70
    issues = []

    has_progression = 2 <= len(paragraphs) <= 4
    if not has_progression:
        score -= 10
        if len(paragraphs) <= 1:
            issues.append("Email needs paragraph breaks for better flow")
        else:
            issues.append("Too many paragraphs - consolidate ideas")

    has_transitions = any(re.search(rf"\b{re.escape(w)}\b", lower) for w in TRANSITION_WORDS)
    if not has_transitions:
        score -= 10
        issues.append("Add transition words to improve flow between ideas")

    you_count = len(re.findall(r"\byou\b|\byour\b", lower))
    i_count = len(re.findall(r"\bi\b|\bwe\b|\bour\b|\bmy\b", lower))
    focus = round(you_count / (you_count + i_count + 1) * 100)
    if focus < 40:
        score -= 10
        issues.append('Email is too self-focused - use more "you" language')

    return {
        "score": clamp_score(score),
        "has_logical_progression": has_progression,
        "transition_quality": "smooth" if has_transitions else "choppy",
        "focus_score": focus,
        "issues": issues,
    }


# ─── IMPROVEMENTS ─────────────────────────────────────────────

def generate_structure_improvements(sections: dict, flow: dict) -> list:
    improvements = []
    intro = sections["introduction"]

    for issue in intro["issues"]:
        improvements.append({
            "category": "introduction",
            "priority": Priority.CRITICAL if intro["quality"] == "weak" else Priority.HIGH,
            "issue": issue,
            "suggestion": "Start with a personalized observation or pattern-interrupt question",
            "impact": "Strong openers increase read-through rate by 35%",
            "example": 'Try: "Noticed your recent [specific thing] - quick question..."',
        })

    for issue in sections["body"]["issues"]:
        improvements.append({
            "category": "body",
            "priority": Priority.HIGH,
            "issue": issue,
            "suggestion": "Focus on specific benefits with concrete numbers or outcomes",
            "impact": "Clear value props increase engagement by 40%",
            "example": None,
        })

    for issue in sections["call_to_action"]["issues"]:
        improvements.append({
            "category": "cta",
            "priority": Priority.CRITICAL,
            "issue": issue,
            "suggestion": "End with a specific, low-friction question",
            "impact": "Specific CTAs get 28% more responses",
            "example": '"Worth a 15-minute call this week?"',
        })

    for issue in flow["issues"]:
        improvements.append({
            "category": "flow",
            "priority": Priority.MEDIUM,
            "issue": issue,
            "suggestion": "Use transition words and focus on recipient benefits",
            "impact": "Better flow increases comprehension and action",
            "example": None,
        })

    return sorted(improvements, key=lambda imp: PRIORITY_ORDER[imp["priority"]])


# ─── ENTRY POINT ──────────────────────────────────────────────

def analyze_structure(body: str) -> dict:
    """Section-by-section structure analysis of an email body.

    Returns:
        {"overall_score", "sections": {introduction, body, call_to_action, closing},
         "flow", "improvements"}
    """
    parts = split_into_sections(body)
    sections = {
        "introduction": analyze_introduction(parts["intro"]),
        "body": analyze_body_content(parts["middle"]),
        "call_to_action": analyze_cta_section(parts["closing"]),
        "closing": analyze_closing(body),
    }
    flow = analyze_flow(body)

    overall = round(
        sections["introduction"]["score"] * STRUCTURE_WEIGHTS["introduction"]
        + sections["body"]["score"] * STRUCTURE_WEIGHTS["body"]
        + sections["call_to_action"]["score"] * STRUCTURE_WEIGHTS["call_to_action"]
        + sections["closing"]["score"] * STRUCTURE_WEIGHTS["closing"]
        + flow["score"] * STRUCTURE_WEIGHTS["flow"]
    )

    return {
        "overall_score": overall,
        "sections": sections,
        "flow": flow,
        "improvements": generate_structure_improvements(sections, flow),
    }

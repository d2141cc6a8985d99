"""
Outreach QA - Best Practices Analyzer
General-purpose checks that apply to any email, sales or not:
readability, visual structure, tone, action clarity and length-for-type.

Overall = readability 25% + structure 20% + tone 20% + action 20%
          + length 15% (100 when the word count is in range, else 60).
"""

import re

from outreach_qa.models import EmailType, Priority, clamp_score

# ─── DATA TABLES ──────────────────────────────────────────────

# (stiff phrase, plain alternative)
FORMAL_PHRASES = [
    ("as per our conversation", "as we discussed"),
    ("please find attached", "I've attached"),
    ("at your earliest convenience", "when you can"),
    ("do not hesitate to", "feel free to"),
    ("kindly", "please"),
    ("in regards to", "about"),
    ("in reference to", "about"),
    ("pursuant to", "following"),
    ("hereby", "(remove)"),
    ("herewith", "(remove)"),
    ("leveraging", "using"),
    ("utilizing", "using"),
    ("synergize", "work together"),
    ("paradigm", "model or approach"),
    ("circle back", "follow up"),
]

PASSIVE_PATTERNS = [
    r"\b(is|are|was|were|been|being)\s+\w+ed\b",
    r"\b(has|have|had)\s+been\s+\w+ed\b",
]

POSITIVE_WORDS = ["great", "excited", "happy", "pleased", "excellent", "amazing", "wonderful",
                  "fantastic"]
NEGATIVE_WORDS = ["unfortunately", "problem", "issue", "concern", "sorry", "apologize", "regret",
                  "disappointing"]

NEXT_STEP_MARKERS = [r"let me know", r"can you", r"would you", r"please (respond|reply|confirm|let)",
                     r"looking forward to", r"\?\s*$"]
SPECIFIC_ACTION_MARKERS = [r"by (monday|tuesday|wednesday|thursday|friday|saturday|sunday)",
                           r"by \d{1,2}(:\d{2})?\s*(am|pm)?", r"this week", r"tomorrow",
                           r"\d+ (minutes?|hours?|days?)"]
EASY_ACTION_MARKERS = [r"reply to this email", r"click (here|below|the link)", r"yes or no",
                       r"quick (response|reply)", r"one word"]

# Target word counts per email type; meeting requests use the general range
LENGTH_RANGES = {
    EmailType.SALES: (50, 125),
    EmailType.FOLLOW_UP: (25, 75),
    EmailType.GENERAL: (50, 200),
}

BEST_PRACTICE_WEIGHTS = {
    "readability": 0.25,
    "structure": 0.2,
    "tone": 0.2,
    "action_clarity": 0.2,
    "length": 0.15,
}


def _sentences(text: str) -> list:
    return [s for s in re.split(r"[.!?]+", text) if s.strip()]


def _paragraphs(text: str) -> list:
    return [p for p in re.split(r"\n\n+", text) if p.strip()]


def count_syllables(word: str) -> int:
    """Vowel-group estimate with a silent trailing 'e' dropped."""
    word = re.sub(r"[^a-z]", "", word.lower())
    if len(word) <= 3:
        return 1
    word = re.sub(r"e$", "", word)
    return len(re.findall(r"[aeiouy]+", word)) or 1


# ─── CHECKS ───────────────────────────────────────────────────

def check_readability(text: str) -> dict:
    sentences = _sentences(text)
    words = text.split()
    if not sentences or not words:
        return {
            "score": 0,
            "grade_level": 0,
            "avg_sentence_length": 0,
            "avg_word_length": 0,
            "complex_word_percentage": 0,
            "issues": ["Email body is too short to analyze"],
        }

    avg_sentence = len(words) / len(sentences)
    avg_word = sum(len(w) for w in words) / len(words)
    complex_pct = sum(1 for w in words if count_syllables(w) >= 3) / len(words) * 100
    grade = round(0.39 * avg_sentence + 11.8 * (avg_word / 4) - 15.59)

    score = 100.0
    if grade > 12:
        score -= (grade - 12) * 10
    if avg_sentence > 20:
        score -= (avg_sentence - 20) * 2
    if complex_pct > 15:
        score -= (complex_pct - 15) * 2

    issues = []
    if avg_sentence > 25:
        issues.append("Sentences are too long (aim for under 20 words)")
    if complex_pct > 20:
        issues.append("Too many complex words - simplify language")
    if grade > 10:
        issues.append("Reading level too high for quick comprehension")

    return {
        "score": clamp_score(score),
        "grade_level": max(1, grade),
        "avg_sentence_length": round(avg_sentence, 1),
        "avg_word_length": round(avg_word, 1),
        "complex_word_percentage": round(complex_pct, 1),
        "issues": issues,
    }


def check_visual_structure(text: str) -> dict:
    paragraphs = _paragraphs(text)
    lines = [line for line in text.split("\n") if line.strip()]
    count = len(paragraphs)
    score = 70
    issues = []

    if count <= 1:
        score -= 20
        issues.append("Email is one long paragraph - break it up for better readability")
    elif count > 5:
        score -= 10
        issues.append("Too many paragraphs - consolidate related ideas")
    else:
        score += 10

    if any(len(_sentences(p)) > 4 for p in paragraphs):
        score -= 10
        issues.append("Some paragraphs are too long - aim for 2-3 sentences each")

    has_white_space = count > 1 or len(lines) > count
    if has_white_space:
        score += 10

    is_clean = "!!!" not in text and "???" not in text and not re.search(r"[A-Z]{5,}", text)
    if not is_clean:
        score -= 15
        issues.append("Avoid excessive punctuation, caps, or formatting")

    avg_length = sum(len(p.split()) for p in paragraphs) / count if count else 0

    return {
        "score": clamp_score(score),
        "paragraph_count": count,
        "avg_paragraph_length": round(avg_length),
        "has_white_space": has_white_space,
        "is_visually_clean": is_clean,
        "issues": issues,
    }


def check_tone(text: str) -> dict:
    lower = text.lower()
    score = 70

    stiff = [(phrase, alt) for phrase, alt in FORMAL_PHRASES if phrase in lower]
    formality = len(stiff) * 10

    sentences = re.split(r"[.!?]+", text)
    passive = sum(
        1 for sentence in sentences for pattern in PASSIVE_PATTERNS
        if re.search(pattern, sentence, re.IGNORECASE)
    )

    positive = sum(1 for w in POSITIVE_WORDS if w in lower)
    negative = sum(1 for w in NEGATIVE_WORDS if w in lower)
    if positive > negative + 1:
        sentiment = "positive"
    elif negative > positive + 1:
        sentiment = "negative"
    else:
        sentiment = "neutral"

    if formality > 30:
        detected = "formal"
    elif passive > len(sentences) / 3:
        detected = "passive"
    elif "!" in text and positive > 2:
        detected = "friendly"
    elif "ASAP" in text or re.search(r"!{2,}", text):
        detected = "aggressive"
    else:
        detected = "professional"

    if detected == "aggressive":
        score -= 20
    if detected == "passive":
        score -= 10
    if formality > 20:
        score -= 10

    return {
        "score": clamp_score(score),
        "detected_tone": detected,
        "sentiment_balance": sentiment,
        "stiff_phrases": [{"phrase": p, "alternative": a} for p, a in stiff],
    }


def check_action_clarity(text: str) -> dict:
    has_next_step = any(re.search(p, text, re.IGNORECASE) for p in NEXT_STEP_MARKERS)
    is_specific = any(re.search(p, text, re.IGNORECASE) for p in SPECIFIC_ACTION_MARKERS)
    is_easy = any(re.search(p, text, re.IGNORECASE) for p in EASY_ACTION_MARKERS)

    score = 40 + 20 * sum([has_next_step, is_specific, is_easy])
    return {
        "score": clamp_score(score),
        "has_next_step": has_next_step,
        "is_specific": is_specific,
        "is_easy_to_action": is_easy,
    }


def check_length(text: str, email_type: EmailType = EmailType.GENERAL) -> dict:
    low, high = LENGTH_RANGES.get(email_type, LENGTH_RANGES[EmailType.GENERAL])
    word_count = len(text.split())

    if word_count < low:
        recommendation = "too_short"
    elif word_count > high:
        recommendation = "too_long"
    else:
        recommendation = "optimal"

    return {
        "word_count": word_count,
        "char_count": len(text),
        "sentence_count": len(_sentences(text)),
        "paragraph_count": len(_paragraphs(text)),
        "recommendation": recommendation,
        "suggested_word_count": {"min": low, "max": high},
    }


# ─── IMPROVEMENTS ─────────────────────────────────────────────

def generate_best_practice_improvements(result: dict) -> list:
    """Improvements in check order (readability, structure, tone, action, length)."""
    improvements = []

    if result["readability"]["score"] < 70:
        for issue in result["readability"]["issues"]:
            improvements.append({
                "category": "readability",
                "priority": Priority.HIGH,
                "issue": issue,
                "suggestion": "Simplify language and shorten sentences for faster comprehension",
                "impact": "Emails at 8th-grade level get 36% higher response rates",
            })

    if result["structure"]["score"] < 70:
        for issue in result["structure"]["issues"]:
            improvements.append({
                "category": "structure",
                "priority": Priority.MEDIUM,
                "issue": issue,
                "suggestion": "Use short paragraphs (2-3 sentences) with line breaks between",
                "impact": "Visual clarity increases readership by 25%",
            })

    tone = result["tone"]["detected_tone"]
    if tone == "formal":
        improvements.append({
            "category": "tone",
            "priority": Priority.MEDIUM,
            "issue": "Overly formal language detected",
            "suggestion": "Use conversational language - write like you speak",
            "impact": "Casual tone increases reply rates by 20%",
        })
    elif tone == "aggressive":
        improvements.append({
            "category": "tone",
            "priority": Priority.HIGH,
            "issue": "Aggressive or pushy tone detected",
            "suggestion": "Soften language, remove excessive punctuation and urgent demands",
            "impact": "Aggressive emails have 50% lower response rates",
        })

    action = result["action_clarity"]
    if not action["has_next_step"]:
        improvements.append({
            "category": "action",
            "priority": Priority.HIGH,
            "issue": "No clear call-to-action",
            "suggestion": "End with a specific ask or question",
            "impact": "Clear CTAs increase response rates by 28%",
        })
    if not action["is_specific"]:
        improvements.append({
            "category": "action",
            "priority": Priority.MEDIUM,
            "issue": "Vague or open-ended request",
            "suggestion": "Add specific timeframes or options to make responding easier",
            "impact": "Specific asks get 40% faster responses",
        })

    length = result["length"]
    if length["recommendation"] != "optimal":
        too_long = length["recommendation"] == "too_long"
        bounds = length["suggested_word_count"]
        improvements.append({
            "category": "length",
            "priority": Priority.HIGH if too_long else Priority.MEDIUM,
            "issue": (f"Email is too long ({length['word_count']} words)" if too_long
                      else f"Email is too short ({length['word_count']} words)"),
            "suggestion": f"Aim for {bounds['min']}-{bounds['max']} words for optimal engagement",
            "impact": "Optimal length emails have 18% higher response rates",
        })

    return improvements


# ─── ENTRY POINT ──────────────────────────────────────────────

def analyze_best_practices(body: str, email_type: EmailType = EmailType.GENERAL) -> dict:
    """Run every best-practice check over an email body.

    Args:
        body: Sanitized email body.
        email_type: Picks the target word-count range.

    Returns:
        {"overall_score", "readability", "structure", "tone", "action_clarity",
         "length", "improvements"}
    """
    email_type = EmailType(email_type)
    result = {
        "readability": check_readability(body),
        "structure": check_visual_structure(body),
        "tone": check_tone(body),
        "action_clarity": check_action_clarity(body),
        "length": check_length(body, email_type),
    }

    length_score = 100 if result["length"]["recommendation"] == "optimal" else 60
    result["overall_score"] = round(
        result["readability"]["score"] * BEST_PRACTICE_WEIGHTS["readability"]
        + result["structure"]["score"] * BEST_PRACTICE_WEIGHTS["structure"]
        + result["tone"]["score"] * BEST_PRACTICE_WEIGHTS["tone"]
        + result["action_clarity"]["score"] * BEST_PRACTICE_WEIGHTS["action_clarity"]
        + length_score * BEST_PRACTICE_WEIGHTS["length"]
    )
    result["improvements"] = generate_best_practice_improvements(result)
    return result

"""
Outreach QA - Tone and Readability
Word-list tone signals and a Flesch-style readability estimate.
"""

import re

# ─── TONE WORD LISTS ──────────────────────────────────────────

POSITIVE_WORDS = ["great", "excellent", "amazing", "wonderful", "excited", "happy",
                  "love", "thank", "appreciate"]
NEGATIVE_WORDS = ["bad", "terrible", "awful", "disappointing", "frustrated", "angry",
                  "hate", "sorry", "apologize"]
CASUAL_WORDS = ["hey", "yeah", "cool", "awesome", "gonna", "wanna", "kinda"]
FORMAL_WORDS = ["regarding", "furthermore", "therefore", "sincerely", "respectfully",
                "accordingly"]
URGENCY_WORDS = ["urgent", "asap", "immediately", "deadline", "expires", "limited time",
                 "now", "today"]


def _count_hits(lower: str, words: list) -> int:
    return sum(1 for word in words if word in lower)


def analyze_tone(text: str) -> dict:
    """Sentiment, formality and urgency from word-list hits.

    Returns:
        {"sentiment", "formality", "urgency", "confidence",
         "counts": {"positive", "negative", "casual", "formal", "urgency"}}
    """
    lower = text.lower()
    counts = {
        "positive": _count_hits(lower, POSITIVE_WORDS),
        "negative": _count_hits(lower, NEGATIVE_WORDS),
        "casual": _count_hits(lower, CASUAL_WORDS),
        "formal": _count_hits(lower, FORMAL_WORDS),
        "urgency": _count_hits(lower, URGENCY_WORDS),
    }

    if counts["positive"] > counts["negative"]:
        sentiment = "positive"
    elif counts["negative"] > counts["positive"]:
        sentiment = "negative"
    else:
        sentiment = "neutral"

    if counts["casual"] > counts["formal"]:
        formality = "casual"
    elif counts["formal"] > counts["casual"]:
        formality = "formal"
    else:
        formality = "neutral"

    if counts["urgency"] >= 3:
        urgency = "high"
    elif counts["urgency"] >= 1:
        urgency = "medium"
    else:
        urgency = "low"

    confidence = min(100, sum(counts.values()) * 10)

    return {
        "sentiment": sentiment,
        "formality": formality,
        "urgency": urgency,
        "confidence": confidence,
        "counts": counts,
    }


# ─── READABILITY ──────────────────────────────────────────────

READABILITY_BANDS = [
    (80, "Very easy to read"),
    (60, "Easy to read"),
    (40, "Moderate difficulty"),
    (20, "Difficult to read"),
]

_VOWEL_GROUP = re.compile(r"[aeiouy]{1,2}")


def count_syllables(word: str) -> int:
    """Approximate syllables by vowel groups. Short words count as one."""
    word = word.lower()
    if len(word) <= 3:
        return 1
    return len(_VOWEL_GROUP.findall(word)) or 1


def analyze_readability(text: str) -> dict:
    """Flesch reading ease (0-100) plus a Flesch-Kincaid grade level.

    Returns:
        {"score", "grade_level", "avg_words_per_sentence",
         "avg_syllables_per_word", "assessment"}
    """
    sentences = [s for s in re.split(r"[.!?]+", text) if s.strip()]
    words = text.split()

    if not sentences or not words:
        return {
            "score": 0,
            "grade_level": 0,
            "avg_words_per_sentence": 0,
            "avg_syllables_per_word": 0,
            "assessment": "Very difficult to read",
        }

    avg_words = len(words) / len(sentences)
    avg_syllables = sum(count_syllables(w) for w in words) / len(words)

    grade = max(0.0, 0.39 * avg_words + 11.8 * avg_syllables - 15.59)
    ease = 206.835 - 1.015 * avg_words - 84.6 * avg_syllables
    score = int(max(0, min(100, round(ease))))

    assessment = "Very difficult to read"
    for threshold, label in READABILITY_BANDS:
        if score >= threshold:
            assessment = label
            break

    return {
        "score": score,
        "grade_level": round(grade, 1),
        "avg_words_per_sentence": round(avg_words, 1),
        "avg_syllables_per_word": round(avg_syllables, 2),
        "assessment": assessment,
    }

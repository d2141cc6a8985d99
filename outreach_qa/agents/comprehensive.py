"""
Outreach QA - Comprehensive Analyzer
Runs the four domain analyzers over one draft and folds them into a single
graded report: five category scores, a merged top-10 improvement list,
performance predictions and a handful of writing tips.

The category weights below are a second-level aggregation. They are tuned
separately from each domain analyzer's internal weights and must not be
merged with them.
"""

import re

from outreach_qa.agents.best_practices import analyze_best_practices
from outreach_qa.agents.sales_analyzer import analyze_sales_email, detect_sales_email
from outreach_qa.agents.structure_analyzer import analyze_structure
from outreach_qa.agents.subject_optimizer import analyze_subject_line
from outreach_qa.logging_config import get_agent_logger
from outreach_qa.models import (
    PRIORITY_ORDER,
    CategoryScore,
    CategoryStatus,
    ComprehensiveAnalysis,
    EmailType,
    Improvement,
    Predictions,
    Priority,
    ScoreBreakdown,
    Tip,
    coerce_recipient,
)
from outreach_qa.sanitizer import sanitize_content

logger = get_agent_logger("comprehensive")

# ─── WEIGHTS & LIMITS ─────────────────────────────────────────

CATEGORY_WEIGHTS = {
    "subject_line": 0.2,
    "opening": 0.2,
    "value_proposition": 0.2,
    "structure": 0.15,
    "call_to_action": 0.25,
}

MAX_IMPROVEMENTS = 10
MAX_TIPS = 5
DEDUP_PREFIX_CHARS = 20

FOLLOW_UP_PATTERN = r"follow.?up|following up|checking in|any update"
MEETING_PATTERN = r"meeting|call|chat|coffee|catch up|schedule|calendar"
SALES_CONFIDENCE_THRESHOLD = 50

# (min score, grade)
GRADE_BANDS = [(90, "A"), (75, "B"), (60, "C"), (40, "D")]

# (min score, open rate, response rate, sentiment)
PREDICTION_BANDS = [
    (80, "35-45%", "15-25%", "Very likely positive reception"),
    (60, "25-35%", "8-15%", "Likely positive reception"),
    (40, "15-25%", "3-8%", "Neutral reception expected"),
    (0, "10-15%", "1-3%", "May need significant improvements"),
]

_ALL_TYPES = [EmailType.SALES, EmailType.GENERAL, EmailType.FOLLOW_UP, EmailType.MEETING_REQUEST]

# ─── TIPS CATALOG ─────────────────────────────────────────────

EMAIL_WRITING_TIPS = [
    Tip(
        id="tip-subject-length",
        category="subject",
        title="The 44-Character Subject Line",
        description="Subject lines around 44 characters get the highest open rates. "
                    "This is the sweet spot for mobile and desktop visibility.",
        example="Quick question about your onboarding flow",
        applicable_types=list(_ALL_TYPES),
    ),
    Tip(
        id="tip-lead-with-name",
        category="opening",
        title="Lead with Their Name",
        description="Emails that use the recipient's first name in the first sentence "
                    "see 26% higher response rates.",
        example="{name}, quick thought on your hiring plans.",
        applicable_types=[EmailType.SALES, EmailType.FOLLOW_UP, EmailType.MEETING_REQUEST],
    ),
    Tip(
        id="tip-75-words",
        category="body",
        title="The 75-Word Rule",
        description="Sales emails between 50-125 words get the best response rates. "
                    "Aim for 75 words as your target.",
        example="Three short paragraphs: the hook, the value, the ask.",
        applicable_types=[EmailType.SALES, EmailType.FOLLOW_UP],
    ),
    Tip(
        id="tip-one-ask",
        category="cta",
        title="One Ask Per Email",
        description="Emails with a single clear call-to-action get 3x more responses "
                    "than those with multiple asks.",
        example="Worth a quick call this week?",
        applicable_types=list(_ALL_TYPES),
    ),
    Tip(
        id="tip-question-close",
        category="cta",
        title="The Question Close",
        description="Ending with a question increases reply rates by 44%. "
                    "Make it easy to answer with a simple yes/no.",
        example="Open to a short chat on Thursday?",
        applicable_types=[EmailType.SALES, EmailType.FOLLOW_UP, EmailType.MEETING_REQUEST],
    ),
    Tip(
        id="tip-you-ratio",
        category="body",
        title="You vs. I Ratio",
        description='High-performing emails use "you" and "your" 2x more than "I" and "we". '
                    "Focus on the recipient.",
        example='Swap "We built a tool that..." for "You could cut..."',
        applicable_types=list(_ALL_TYPES),
    ),
    Tip(
        id="tip-pattern-interrupt",
        category="opening",
        title="Pattern Interrupt Opener",
        description='Avoid generic openers like "I hope this finds you well." '
                    "Start with an observation, question, or compliment about them.",
        example="Quick question - how is your team handling renewals today?",
        applicable_types=[EmailType.SALES, EmailType.FOLLOW_UP],
    ),
    Tip(
        id="tip-social-proof",
        category="body",
        title="Social Proof Boost",
        description="Mentioning similar companies or specific metrics increases "
                    "credibility and responses by 45%.",
        example="Teams like yours cut review time by 30%.",
        applicable_types=[EmailType.SALES],
    ),
    Tip(
        id="tip-lowercase-subject",
        category="subject",
        title="Lowercase Subject Lines",
        description="All-lowercase subject lines feel more personal and can increase "
                    "open rates by up to 32%.",
        example="quick question",
        applicable_types=[EmailType.SALES, EmailType.FOLLOW_UP],
    ),
    Tip(
        id="tip-15-minutes",
        category="cta",
        title="The 15-Minute Ask",
        description='Requesting "15 minutes" feels less daunting than "a call" '
                    "and gets higher acceptance rates.",
        example="Do you have 15 minutes on Tuesday?",
        applicable_types=[EmailType.SALES, EmailType.MEETING_REQUEST],
    ),
]

# Tip category -> breakdown category it reinforces, and the rank when weak
_TIP_RELEVANCE = {
    "subject": ("subject_line", 3),
    "opening": ("opening", 3),
    "body": ("value_proposition", 2),
    "cta": ("call_to_action", 3),
}


# ─── CLASSIFICATION ───────────────────────────────────────────

def detect_email_type(subject: str, body: str) -> EmailType:
    """Follow-up and meeting language always beat sales framing."""
    content = f"{subject} {body}"
    if re.search(FOLLOW_UP_PATTERN, content, re.IGNORECASE):
        return EmailType.FOLLOW_UP
    if re.search(MEETING_PATTERN, content, re.IGNORECASE):
        return EmailType.MEETING_REQUEST

    sales = detect_sales_email(subject, body)
    if sales["is_sales_email"] and sales["confidence"] > SALES_CONFIDENCE_THRESHOLD:
        return EmailType.SALES
    return EmailType.GENERAL


def score_to_grade(score: float) -> str:
    for threshold, grade in GRADE_BANDS:
        if score >= threshold:
            return grade
    return "F"


def predict_performance(overall_score: float) -> Predictions:
    for threshold, open_rate, response_rate, sentiment in PREDICTION_BANDS:
        if overall_score >= threshold:
            return Predictions(open_rate, response_rate, sentiment)
    _, open_rate, response_rate, sentiment = PREDICTION_BANDS[-1]
    return Predictions(open_rate, response_rate, sentiment)


# ─── BREAKDOWN ────────────────────────────────────────────────

def build_category_scores(subject_result: dict, sales_result: dict,
                          structure_result: dict, practices_result: dict) -> ScoreBreakdown:
    scores = sales_result["scores"]
    opening = scores["opening_line"]
    value = scores["value_proposition"]
    cta = scores["call_to_action"]
    readability = practices_result["readability"]

    if not cta["has_clear_cta"]:
        cta_issues = ["Missing or unclear call-to-action"]
    elif not cta["low_friction"]:
        cta_issues = ["CTA could be lower friction"]
    else:
        cta_issues = []

    return ScoreBreakdown(
        subject_line=CategoryScore.build(
            "Subject Line", subject_result["score"],
            [imp["issue"] for imp in subject_result["improvements"]],
        ),
        opening=CategoryScore.build(
            "Opening", opening["score"],
            [opening["issue"]] if opening.get("issue") else [],
        ),
        value_proposition=CategoryScore.build(
            "Value Proposition", value["score"],
            [] if value["benefit_focused"] else ["Missing clear benefits for the recipient"],
        ),
        structure=CategoryScore.build(
            "Structure & Readability",
            (structure_result["overall_score"] + readability["score"]) / 2,
            readability["issues"] + practices_result["structure"]["issues"],
        ),
        call_to_action=CategoryScore.build("Call to Action", cta["score"], cta_issues),
    )


def weighted_overall(breakdown: ScoreBreakdown) -> int:
    categories = breakdown.categories()
    return round(sum(categories[key].score * weight for key, weight in CATEGORY_WEIGHTS.items()))


# ─── IMPROVEMENTS ─────────────────────────────────────────────

def _is_duplicate(existing: list, category: str, issue: str) -> bool:
    prefix = issue.lower()[:DEDUP_PREFIX_CHARS]
    return any(imp.category == category and prefix in imp.issue.lower() for imp in existing)


def combine_improvements(sales: list, practices: list, subject: list, structure: list) -> list:
    """Concatenate in source order, drop near-duplicates, rank, keep the top 10.

    Best-practice and structure items are checked against everything already
    collected. ids share one counter so they stay unique across sources.
    """
    combined = []
    counter = 0

    sources = [
        ("sales", sales, False),
        ("bp", practices, True),
        ("subj", subject, False),
        ("struct", structure, True),
    ]
    for prefix, items, dedupe in sources:
        for item in items:
            category = item["category"]
            if dedupe and _is_duplicate(combined, category, item["issue"]):
                continue
            combined.append(Improvement(
                id=f"{prefix}-{counter}",
                category=category,
                priority=Priority(item["priority"]),
                issue=item["issue"],
                suggestion=item["suggestion"],
                impact=item["impact"],
                example=item.get("example"),
            ))
            counter += 1

    combined.sort(key=lambda imp: PRIORITY_ORDER[imp.priority])
    return combined[:MAX_IMPROVEMENTS]


def select_tips(email_type: EmailType, breakdown: ScoreBreakdown) -> list:
    categories = breakdown.categories()
    ranked = []
    for tip in EMAIL_WRITING_TIPS:
        if email_type not in tip.applicable_types:
            continue
        relevance = 1
        if tip.category in _TIP_RELEVANCE:
            key, weak_rank = _TIP_RELEVANCE[tip.category]
            if categories[key].status != CategoryStatus.EXCELLENT:
                relevance = weak_rank
        ranked.append((relevance, tip))

    ranked.sort(key=lambda pair: pair[0], reverse=True)
    return [tip for _, tip in ranked[:MAX_TIPS]]


# ─── ENTRY POINT ──────────────────────────────────────────────

def run_full_analysis(subject: str, body: str, recipient_data=None) -> dict:
    """Raw outputs of the four domain analyzers, keyed by analyzer."""
    email_type = detect_email_type(subject, body)
    # No meeting-specific length range; meetings use the general one
    practices_type = EmailType.GENERAL if email_type == EmailType.MEETING_REQUEST else email_type

    return {
        "email_type": email_type,
        "sales": analyze_sales_email(subject, body, recipient_data),
        "best_practices": analyze_best_practices(body, practices_type),
        "subject": analyze_subject_line(subject, recipient_data),
        "structure": analyze_structure(body),
    }


def analyze_email_comprehensive(subject: str, body: str, recipient_data=None) -> ComprehensiveAnalysis:
    """Score a draft across every domain analyzer.

    Pure and deterministic: no I/O, no clock, no randomness. Invalid subject
    or body text (None, blank) is analyzed as an empty string instead of
    raising.

    Args:
        subject: Raw subject line.
        body: Raw body text.
        recipient_data: Optional RecipientData or dict with name/company.

    Returns:
        ComprehensiveAnalysis
    """
    recipient = coerce_recipient(recipient_data)
    clean_subject = sanitize_content(subject)
    clean_body = sanitize_content(body)
    subject = clean_subject.sanitized_content if clean_subject.is_valid else ""
    body = clean_body.sanitized_content if clean_body.is_valid else ""

    full = run_full_analysis(subject, body, recipient)
    breakdown = build_category_scores(full["subject"], full["sales"],
                                      full["structure"], full["best_practices"])
    overall = weighted_overall(breakdown)
    improvements = combine_improvements(
        full["sales"]["improvements"],
        full["best_practices"]["improvements"],
        full["subject"]["improvements"],
        full["structure"]["improvements"],
    )

    logger.debug("Comprehensive analysis complete", extra={
        "email_type": full["email_type"].value, "phase": "comprehensive",
    })

    return ComprehensiveAnalysis(
        email_type=full["email_type"],
        overall_score=overall,
        letter_grade=score_to_grade(overall),
        breakdown=breakdown,
        improvements=improvements,
        predictions=predict_performance(overall),
        tips=select_tips(full["email_type"], breakdown),
    )

"""
Outreach QA - Shared Data Model
Result types passed between the sanitizer, the analyzers, the aggregator and
the safe optimizer. Everything here is plain data: dataclasses serialize with
to_dict() and every enum is a str subclass, so results go straight to JSON.
"""

import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger("outreach_qa.models")


# ============================================================
# SECTION 1: CLOSED TAGS
# ============================================================

class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CategoryStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_WORK = "needs_work"
    POOR = "poor"


class EmailType(str, Enum):
    SALES = "sales"
    GENERAL = "general"
    FOLLOW_UP = "follow_up"
    MEETING_REQUEST = "meeting_request"


class EmailIntent(str, Enum):
    COLD_OUTREACH = "cold_outreach"
    FOLLOW_UP = "follow_up"
    MEETING_REQUEST = "meeting_request"
    WARM_INTRODUCTION = "warm_introduction"
    RE_ENGAGEMENT = "re_engagement"
    BREAKUP = "breakup"
    VALUE_DELIVERY = "value_delivery"
    REFERRAL_REQUEST = "referral_request"
    TESTIMONIAL_ASK = "testimonial_ask"
    THANK_YOU = "thank_you"
    APOLOGY = "apology"
    ANNOUNCEMENT = "announcement"
    SURVEY_REQUEST = "survey_request"
    NURTURE = "nurture"


class SuggestionElement(str, Enum):
    SUBJECT = "subject"
    OPENING = "opening"
    GREETING = "greeting"
    BODY = "body"
    CLOSING = "closing"
    CTA = "cta"


# Sort key for improvements; sorted() is stable so ties keep source order
PRIORITY_ORDER = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


# ============================================================
# SECTION 2: SCORE HELPERS
# ============================================================

def clamp_score(value: float) -> int:
    """Round and clamp a raw score into 0..100."""
    return int(max(0, min(100, round(value))))


def score_to_status(score: float) -> CategoryStatus:
    """Map a 0-100 score to its status band. Used by every CategoryScore."""
    if score >= 80:
        return CategoryStatus.EXCELLENT
    if score >= 60:
        return CategoryStatus.GOOD
    if score >= 40:
        return CategoryStatus.NEEDS_WORK
    return CategoryStatus.POOR


def sort_by_priority(items: list) -> list:
    """Stable sort of anything with a .priority attribute."""
    return sorted(items, key=lambda item: PRIORITY_ORDER[Priority(item.priority)])


# ============================================================
# SECTION 3: INPUTS
# ============================================================

@dataclass(frozen=True)
class EmailDraft:
    subject: str
    body: str

    def to_dict(self) -> dict:
        return asdict(self)


class RecipientData(BaseModel):
    """Optional recipient context supplied by the contact system.

    Read-only. Unknown keys are ignored so raw CRM records can be passed in.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: Optional[str] = None
    company: Optional[str] = None
    industry: Optional[str] = None
    previous_engagement: Optional[bool] = None
    timezone: Optional[str] = None


def coerce_recipient(data: Any) -> Optional[RecipientData]:
    """Accept None, a RecipientData or a plain dict (camelCase or snake_case keys).

    Never raises: fields that fail validation are dropped and logged, and
    anything that is not a mapping is treated as no recipient at all.
    """
    if data is None or isinstance(data, RecipientData):
        return data
    if not isinstance(data, dict):
        logger.warning("Ignoring recipient_data of type %s", type(data).__name__)
        return None

    normalized = {k: v for k, v in data.items() if isinstance(k, str)}
    if "previousEngagement" in normalized and "previous_engagement" not in normalized:
        normalized["previous_engagement"] = normalized.pop("previousEngagement")

    try:
        return RecipientData.model_validate(normalized)
    except ValidationError as e:
        dropped = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        logger.warning("Dropping invalid recipient fields: %s", ", ".join(dropped))
        return RecipientData.model_validate({k: v for k, v in normalized.items() if k not in dropped})


# ============================================================
# SECTION 4: RESULTS
# ============================================================

@dataclass
class ValidationResult:
    is_valid: bool
    sanitized_content: str
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Improvement:
    id: str
    category: str
    priority: Priority
    issue: str
    suggestion: str
    impact: str
    example: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CategoryScore:
    name: str
    score: int
    status: CategoryStatus
    issues: List[str] = field(default_factory=list)
    max_score: int = 100

    @classmethod
    def build(cls, name: str, score: float, issues: List[str] = None) -> "CategoryScore":
        """Clamp the score and derive its status in one place."""
        clamped = clamp_score(score)
        return cls(name=name, score=clamped, status=score_to_status(clamped),
                   issues=list(issues or []))

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Tip:
    id: str
    category: str
    title: str
    description: str
    example: str
    applicable_types: List[EmailType]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Predictions:
    open_rate: str
    response_rate: str
    sentiment_likelihood: str


@dataclass
class ScoreBreakdown:
    subject_line: CategoryScore
    opening: CategoryScore
    value_proposition: CategoryScore
    structure: CategoryScore
    call_to_action: CategoryScore

    def categories(self) -> Dict[str, CategoryScore]:
        return {
            "subject_line": self.subject_line,
            "opening": self.opening,
            "value_proposition": self.value_proposition,
            "structure": self.structure,
            "call_to_action": self.call_to_action,
        }


@dataclass
class ComprehensiveAnalysis:
    email_type: EmailType
    overall_score: int
    letter_grade: str
    breakdown: ScoreBreakdown
    improvements: List[Improvement]
    predictions: Predictions
    tips: List[Tip]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SafeSuggestion:
    id: str
    element: SuggestionElement
    original: str
    suggested: str
    reason: str
    impact: str
    is_valid: bool = True
    validation_warning: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SafeOptimizationResult:
    original_email: EmailDraft
    analysis: ComprehensiveAnalysis
    suggestions: List[SafeSuggestion]
    warnings: List[str]
    preview_with_suggestions: Optional[EmailDraft] = None

    def to_dict(self) -> dict:
        return asdict(self)

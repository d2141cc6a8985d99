"""
Outreach QA - Safe Optimizer
Rewrite suggestions that never add facts the draft does not already contain.

Flow:
  1. Comprehensive analysis (always runs, never blocked by the model)
  2. Rule-based suggestions (no model, no validation needed)
  3. One model call when the body has at least 5 words
  4. Every model suggestion passes the content validator; rejects are dropped
     and their reasons reported in warnings
  5. Merge, dedupe on (element, original), build a preview

A failed, timed-out or disabled model call degrades to step 1-2 output plus a
warning. Nothing on this path raises for content or transport reasons.
"""

import json
import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from outreach_qa.agents.comprehensive import analyze_email_comprehensive
from outreach_qa.agents.content_validator import extract_topics, validate_suggestion
from outreach_qa.agents.error_handler import log_engine_error
from outreach_qa.agents.llm_gateway import LLMResult, get_gateway
from outreach_qa.config import (
    ENABLE_AI_SUGGESTIONS,
    OPTIMIZER_MAX_TOKENS,
    OPTIMIZER_TEMPERATURE,
)
from outreach_qa.logging_config import get_agent_logger
from outreach_qa.models import (
    EmailDraft,
    SafeOptimizationResult,
    SafeSuggestion,
    SuggestionElement,
    coerce_recipient,
)

logger = get_agent_logger("safe_optimizer")

MIN_WORDS_FOR_AI = 5
SHORT_BODY_WORDS = 10
MAX_AI_SUGGESTIONS = 5

EMPTY_MARKER = "(empty)"
MISSING_MARKER_PREFIX = "(no "

WARNING_AI_UNAVAILABLE = "AI optimization unavailable - showing rule-based suggestions only"
WARNING_TOO_SHORT = "Email is too short for AI optimization - showing rule-based suggestions"

ELEMENT_IMPACT = {
    SuggestionElement.SUBJECT: "Improves open rate",
    SuggestionElement.OPENING: "Increases read-through",
    SuggestionElement.GREETING: "Adds personal touch",
    SuggestionElement.BODY: "Improves clarity",
    SuggestionElement.CLOSING: "Strengthens impression",
    SuggestionElement.CTA: "Increases response rate",
}

_GENERIC_GREETING = re.compile(r"^(hi|hello|hey)[\s,!]*$", re.IGNORECASE)
_CTA_MARKER = re.compile(r"\?|let me know|interested|available|thoughts|call|meet|chat", re.IGNORECASE)
_VAGUE_MEETING = re.compile(r"let's meet|catch up|get together", re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


# ─── PROMPTS ──────────────────────────────────────────────────

SAFE_SYSTEM_PROMPT = """You are an email optimization expert. Your job is to suggest IMPROVEMENTS to an email.

CRITICAL RULES - FOLLOW EXACTLY:
1. NEVER add information, claims, facts, names, companies, or topics not in the original email
2. NEVER invent personalization like "I noticed your..." or "Congratulations on..."
3. ONLY suggest improvements to the EXISTING content
4. If the email is too short or vague, say so - do NOT invent context
5. Focus on: clarity, structure, call-to-action, and tone - not adding new content

You may suggest:
- Better word choices for existing ideas
- Restructuring existing sentences
- Adding a specific time to vague "let's meet" requests
- Making existing CTAs clearer
- Improving the subject line based on the email content

You may NOT suggest:
- Compliments or observations not in the original
- Claims about the recipient's company or work
- Statistics or benefits not mentioned
- Social proof not in the original
- Rewrites that introduce new topics"""


def build_user_prompt(subject: str, body: str, recipient=None) -> str:
    lines = [
        "ORIGINAL EMAIL:",
        f"Subject: {subject or '(no subject)'}",
        "Body:",
        body,
        "",
    ]
    if recipient is not None and recipient.name:
        lines.append(f"Recipient name: {recipient.name}")
    if recipient is not None and recipient.company:
        lines.append(f"Recipient company: {recipient.company}")

    lines.append("""
TASK: Suggest up to 5 specific improvements. For each, provide:
1. Which element (subject/opening/body/closing/cta)
2. The EXACT original text being improved
3. Your suggested improvement
4. Why this helps (1 sentence)

IMPORTANT: If the email is very short or lacks context, acknowledge this limitation instead of inventing content.

Respond in JSON format:
{
  "emailQuality": "good" | "needs_work" | "too_short",
  "qualityNote": "Brief assessment",
  "suggestions": [
    {
      "element": "subject" | "opening" | "body" | "closing" | "cta",
      "original": "exact text from email",
      "suggested": "improved version",
      "reason": "why this helps"
    }
  ]
}""")
    return "\n".join(lines)


# ─── RESPONSE PARSING ─────────────────────────────────────────

class AISuggestionPayload(BaseModel):
    """One suggestion as the model returns it. Missing fields become empty."""

    model_config = ConfigDict(extra="ignore")

    element: str = "body"
    original: str = ""
    suggested: str = ""
    reason: str = ""


class AIOptimizationResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    email_quality: Optional[str] = Field(default=None, alias="emailQuality")
    quality_note: Optional[str] = Field(default=None, alias="qualityNote")
    suggestions: List[AISuggestionPayload] = Field(default_factory=list)


def parse_ai_response(content: str) -> Optional[AIOptimizationResponse]:
    """Pull the first JSON object out of free text.

    Returns None when there is no usable object. Individual malformed
    suggestions are skipped rather than failing the whole response.
    """
    if not isinstance(content, str):
        return None
    match = _JSON_OBJECT.search(content)
    if not match:
        return None
    try:
        raw = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        log_engine_error(phase="parse", error=e, agent_name="safe_optimizer")
        return None
    if not isinstance(raw, dict):
        return None

    items = raw.get("suggestions")
    suggestions = []
    for item in items if isinstance(items, list) else []:
        try:
            suggestions.append(AISuggestionPayload.model_validate(item))
        except ValidationError:
            logger.debug("Skipping malformed AI suggestion: %r", item)
        if len(suggestions) >= MAX_AI_SUGGESTIONS:
            break

    note = raw.get("qualityNote")
    quality = raw.get("emailQuality")
    return AIOptimizationResponse(
        email_quality=quality if isinstance(quality, str) else None,
        quality_note=note if isinstance(note, str) else None,
        suggestions=suggestions,
    )


def _element(value: str) -> SuggestionElement:
    try:
        return SuggestionElement(value.strip().lower())
    except ValueError:
        return SuggestionElement.BODY


# ─── RULE-BASED SUGGESTIONS ───────────────────────────────────

def _word_count(text: str) -> int:
    return len(text.split())


def generate_rule_based_suggestions(subject: str, body: str, recipient=None) -> List[SafeSuggestion]:
    """Structural suggestions that need no model and make no claims."""
    suggestions = []

    def add(element, original, suggested, reason, impact):
        suggestions.append(SafeSuggestion(
            id=f"rule-{len(suggestions)}", element=element, original=original,
            suggested=suggested, reason=reason, impact=impact,
        ))

    if not subject.strip():
        add(SuggestionElement.SUBJECT, EMPTY_MARKER,
            "Add a clear subject line based on your email content",
            "Emails without subjects have 70% lower open rates",
            "Critical for email deliverability")

    if body.strip() and _word_count(body) < SHORT_BODY_WORDS:
        add(SuggestionElement.BODY, body,
            f"{body} [add context: why you are writing and what you need]",
            "Very short emails may lack the context needed for a response",
            "Improves clarity")

    first_line = body.split("\n")[0].strip()
    if first_line and _GENERIC_GREETING.match(first_line):
        word = re.match(r"[a-z]+", first_line, re.IGNORECASE).group(0)
        name = "[name]"
        if recipient is not None and recipient.name and recipient.name.strip():
            name = recipient.name.split()[0]
        add(SuggestionElement.GREETING, first_line, f"{word} {name},",
            "Personalized greetings increase engagement",
            "+26% response rate with names")

    if not _CTA_MARKER.search(body):
        add(SuggestionElement.CTA, "(no clear call-to-action)",
            "End with a clear question or request",
            "Emails with questions get more replies",
            "+44% response rate with question CTAs")

    meeting = _VAGUE_MEETING.search(body)
    if meeting and not re.search(r"\d", body):
        phrase = meeting.group(0)
        add(SuggestionElement.CTA, phrase, f"{phrase} at [specific time]?",
            "Specific times make scheduling easier",
            "Reduces back-and-forth emails")

    return suggestions


# ─── AI SUGGESTIONS ───────────────────────────────────────────

def request_ai_suggestions(subject: str, body: str, recipient, gateway) -> LLMResult:
    return gateway.generate_result(
        build_user_prompt(subject, body, recipient),
        stage_name="safe_optimize",
        system=SAFE_SYSTEM_PROMPT,
        temperature=OPTIMIZER_TEMPERATURE,
        max_tokens=OPTIMIZER_MAX_TOKENS,
    )


def validate_ai_suggestions(payloads: List[AISuggestionPayload], full_original: str,
                            start_index: int, warnings: List[str]) -> List[SafeSuggestion]:
    """Run every payload through the content validator; keep only the valid ones."""
    accepted = []
    for payload in payloads:
        element = _element(payload.element)
        check = validate_suggestion(payload.original, payload.suggested, full_original)

        if not check["is_valid"]:
            warnings.append(f"Rejected AI suggestion: {check['rejected_reason']}")
            drift = sorted(extract_topics(payload.suggested) - extract_topics(full_original))
            logger.info("Rejected AI suggestion for %s: %s (new topics: %s)",
                        element.value, check["rejected_reason"], ", ".join(drift) or "none",
                        extra={"element": element.value, "phase": "validation"})
            continue

        if not payload.original or payload.original not in full_original:
            warnings.append("Rejected AI suggestion: original text not found in email")
            logger.info("Rejected AI suggestion for %s: original not verbatim", element.value,
                        extra={"element": element.value, "phase": "validation"})
            continue

        accepted.append(SafeSuggestion(
            id=f"ai-{start_index + len(accepted)}",
            element=element,
            original=payload.original,
            suggested=payload.suggested,
            reason=payload.reason,
            impact=ELEMENT_IMPACT.get(element, "Improves email quality"),
            is_valid=True,
            validation_warning="; ".join(check["warnings"]) or None,
        ))
    return accepted


# ─── MERGE & PREVIEW ──────────────────────────────────────────

def deduplicate_suggestions(suggestions: List[SafeSuggestion]) -> List[SafeSuggestion]:
    seen = set()
    unique = []
    for suggestion in suggestions:
        key = (suggestion.element, suggestion.original.lower().strip())
        if key in seen:
            continue
        seen.add(key)
        unique.append(suggestion)
    return unique


def _is_meta(original: str) -> bool:
    return not original or original == EMPTY_MARKER or original.startswith(MISSING_MARKER_PREFIX)


def generate_preview(subject: str, body: str, suggestions: List[SafeSuggestion]) -> EmailDraft:
    """Apply valid suggestions to a copy of the draft.

    Subject suggestions replace the whole subject; everything else replaces
    the first occurrence of its original text in the body.
    """
    preview_subject = subject
    preview_body = body
    for suggestion in suggestions:
        if not suggestion.is_valid or _is_meta(suggestion.original):
            continue
        if suggestion.element == SuggestionElement.SUBJECT:
            preview_subject = suggestion.suggested
        elif suggestion.original in preview_body:
            preview_body = preview_body.replace(suggestion.original, suggestion.suggested, 1)
    return EmailDraft(subject=preview_subject, body=preview_body)


# ─── ENTRY POINT ──────────────────────────────────────────────

def safe_optimize_email(subject: str, body: str, recipient_data=None, gateway=None) -> SafeOptimizationResult:
    """Analyze a draft and suggest fabrication-free improvements.

    Args:
        subject: Subject line as written.
        body: Body as written.
        recipient_data: Optional RecipientData or dict; name and company are
            passed to the model as context.
        gateway: Object with generate_result(prompt, **kwargs) -> LLMResult.
            Defaults to the module-level LLM gateway.

    Returns:
        SafeOptimizationResult. Degraded paths are reported in .warnings.
    """
    subject = subject or ""
    body = body or ""
    recipient = coerce_recipient(recipient_data)
    full_original = f"{subject} {body}"
    warnings = []

    analysis = analyze_email_comprehensive(subject, body, recipient)
    suggestions = generate_rule_based_suggestions(subject, body, recipient)

    if _word_count(body) < MIN_WORDS_FOR_AI:
        warnings.append(WARNING_TOO_SHORT)
    elif not ENABLE_AI_SUGGESTIONS:
        logger.info("AI suggestions disabled by configuration", extra={"phase": "ai_call"})
        warnings.append(WARNING_AI_UNAVAILABLE)
    else:
        try:
            result = request_ai_suggestions(subject, body, recipient, gateway or get_gateway())
        except Exception as e:
            # Injected gateways are not bound to the LLMResult contract
            result = LLMResult(ok=False, error=f"{type(e).__name__}: {e}")
        if not result.ok:
            log_engine_error(phase="ai_call", error_message=result.error,
                             agent_name="safe_optimizer", request_id=result.request_id)
            warnings.append(WARNING_AI_UNAVAILABLE)
        else:
            parsed = parse_ai_response(result.text)
            if parsed is not None:
                suggestions.extend(validate_ai_suggestions(
                    parsed.suggestions, full_original, len(suggestions), warnings))
                if parsed.quality_note:
                    warnings.append(f"AI assessment: {parsed.quality_note}")

    suggestions = deduplicate_suggestions(suggestions)

    return SafeOptimizationResult(
        original_email=EmailDraft(subject=subject, body=body),
        analysis=analysis,
        suggestions=suggestions,
        warnings=warnings,
        preview_with_suggestions=generate_preview(subject, body, suggestions),
    )

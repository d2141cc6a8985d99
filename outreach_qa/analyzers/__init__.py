"""Lexical analyzers: pure functions over sanitized subject/body text."""

from outreach_qa.analyzers.intent import analyze_cta, classify_intent, detect_context
from outreach_qa.analyzers.layout import analyze_greeting, analyze_layout, analyze_signature
from outreach_qa.analyzers.report import analyze_subject_basics, run_lexical_analysis
from outreach_qa.analyzers.spam import (
    analyze_links,
    check_compliance,
    detect_spam_triggers,
    detect_suspicious_content,
)
from outreach_qa.analyzers.template import detect_language, detect_template_usage
from outreach_qa.analyzers.tone import analyze_readability, analyze_tone

__all__ = [
    "analyze_cta", "classify_intent", "detect_context",
    "analyze_greeting", "analyze_layout", "analyze_signature",
    "analyze_subject_basics", "run_lexical_analysis",
    "analyze_links", "check_compliance", "detect_spam_triggers", "detect_suspicious_content",
    "detect_language", "detect_template_usage",
    "analyze_readability", "analyze_tone",
]

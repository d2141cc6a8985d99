"""
Sample drafts and a fake model gateway shared by the unit tests.

Importable both under pytest and when a test file is run as a script, since
each test file puts its own directory on sys.path.
"""

import json

from outreach_qa.agents.llm_gateway import LLMResult
from outreach_qa.models import EmailDraft

SALES_DRAFT = EmailDraft(
    subject="Quick question about your onboarding",
    body=(
        "Hi Dana,\n\n"
        "Noticed your team is scaling support this quarter. We help teams like yours "
        "reduce ticket handling time by 30%, which means your agents can focus on the "
        "harder cases.\n\n"
        "Worth a 15 minute call this week?\n\n"
        "Thanks,\nAlex"
    ),
)

MEETING_DRAFT = EmailDraft(subject="Meeting", body="hello how are you let's meet Tuesday")

WEAK_DRAFT = EmailDraft(
    subject="Introduction",
    body=(
        "I hope this email finds you well. My name is Alex and I am reaching out because "
        "our company has built a platform that we think is great. We have many features "
        "and we work with lots of companies. Our product is the best in the market and "
        "we would love to tell you more about it sometime."
    ),
)

FABRICATED_BANNED_PHRASES = [
    "noticed your", "congratulations", "impressive", "i recently came across",
    "i've been following",
]


def ai_response(suggestions, quality_note=None, quality="needs_work", wrapper="{}") -> str:
    """Model-style free text wrapping one JSON object."""
    payload = {"emailQuality": quality, "suggestions": suggestions}
    if quality_note:
        payload["qualityNote"] = quality_note
    return wrapper.replace("{}", json.dumps(payload))


class FakeGateway:
    """Stands in for LLMGateway; returns one canned LLMResult and records calls."""

    def __init__(self, text: str = "", error: str = None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_result(self, prompt: str, stage_name: str = "unknown", **kwargs) -> LLMResult:
        self.calls.append({"prompt": prompt, "stage_name": stage_name, **kwargs})
        if self.error:
            return LLMResult(ok=False, error=self.error, request_id="fake")
        return LLMResult(ok=True, text=self.text, request_id="fake")

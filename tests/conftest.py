"""
Shared pytest fixtures for the Outreach QA test suite.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
# Unit test files import their shared samples as a top-level module
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "unit"))

from samples import MEETING_DRAFT, SALES_DRAFT, WEAK_DRAFT, FakeGateway  # noqa: E402

import outreach_qa.agents.safe_optimizer as safe_optimizer  # noqa: E402


@pytest.fixture
def sales_draft():
    return SALES_DRAFT


@pytest.fixture
def meeting_draft():
    return MEETING_DRAFT


@pytest.fixture
def weak_draft():
    return WEAK_DRAFT


@pytest.fixture
def fake_gateway():
    """Factory for a FakeGateway with a canned response or error."""
    def _make(text: str = "", error: str = None) -> FakeGateway:
        return FakeGateway(text=text, error=error)
    return _make


@pytest.fixture
def ai_disabled(monkeypatch):
    """Turn off the model call the same way ENABLE_AI_SUGGESTIONS=false does."""
    monkeypatch.setattr(safe_optimizer, "ENABLE_AI_SUGGESTIONS", False)

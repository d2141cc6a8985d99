"""
Outreach QA - email content analysis and guarded rewrite engine.

Entry points:
    analyze_email_comprehensive(subject, body, recipient_data=None)
    safe_optimize_email(subject, body, recipient_data=None, gateway=None)
"""

from outreach_qa.agents.comprehensive import analyze_email_comprehensive
from outreach_qa.agents.safe_optimizer import safe_optimize_email

__all__ = ["analyze_email_comprehensive", "safe_optimize_email"]

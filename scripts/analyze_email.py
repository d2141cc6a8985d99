#!/usr/bin/env python3
"""
Analyze one email draft from the command line and print the result as JSON.

Usage:
    python scripts/analyze_email.py --subject "Quick question" --body "Hi Sam, ..."
    python scripts/analyze_email.py --subject "Quick question" --body-file draft.txt
    python scripts/analyze_email.py --subject "..." --body-file draft.txt --optimize
    python scripts/analyze_email.py --subject "..." --body "..." --lexical
    python scripts/analyze_email.py ... --name "Sam Lee" --company "Acme"

--optimize calls the configured Ollama model (see OLLAMA_HOST / OLLAMA_MODEL)
and falls back to rule-based suggestions if it is unavailable.
"""

import sys
import os
import json
import argparse

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from outreach_qa.config import LOG_FILE, LOG_FORMAT, LOG_LEVEL
from outreach_qa.logging_config import setup_logging
from outreach_qa.agents.comprehensive import analyze_email_comprehensive
from outreach_qa.agents.safe_optimizer import safe_optimize_email
from outreach_qa.analyzers.report import run_lexical_analysis


def read_body(args) -> str:
    if args.body_file:
        with open(args.body_file, encoding="utf-8") as f:
            return f.read()
    return args.body or ""


def build_recipient(args):
    recipient = {"name": args.name, "company": args.company, "industry": args.industry}
    recipient = {k: v for k, v in recipient.items() if v}
    return recipient or None


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Score an outreach email draft")
    parser.add_argument("--subject", default="", help="Subject line")
    body_group = parser.add_mutually_exclusive_group()
    body_group.add_argument("--body", help="Body text")
    body_group.add_argument("--body-file", help="Read the body from this file")
    parser.add_argument("--name", help="Recipient name")
    parser.add_argument("--company", help="Recipient company")
    parser.add_argument("--industry", help="Recipient industry")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--optimize", action="store_true",
                      help="Also request fabrication-checked rewrite suggestions from the model")
    mode.add_argument("--lexical", action="store_true",
                      help="Print the lexical signal report instead of the full analysis")
    args = parser.parse_args(argv)

    setup_logging(level=LOG_LEVEL, fmt=LOG_FORMAT, log_file=LOG_FILE or None)

    body = read_body(args)
    recipient = build_recipient(args)

    if args.lexical:
        output = run_lexical_analysis(args.subject, body)
    elif args.optimize:
        output = safe_optimize_email(args.subject, body, recipient).to_dict()
    else:
        output = analyze_email_comprehensive(args.subject, body, recipient).to_dict()

    print(json.dumps(output, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
LLM Smoketest - Checks the Ollama host the safe optimizer depends on.

Usage:
    python scripts/llm_smoketest.py
    python scripts/llm_smoketest.py --optimize   # Also run one safe optimization end to end

Environment variables:
    OLLAMA_HOST (default: http://127.0.0.1:11434)
    OLLAMA_MODEL (default: qwen2.5:7b)
    OPTIMIZER_TIMEOUT_SECONDS (default: 30)

Exit codes:
    0 - OK (Ollama reachable and model responds)
    1 - FAIL (Ollama unreachable or model error)
    2 - DEGRADED (Ollama reachable but model not found)
"""

import sys
import os
import argparse

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from outreach_qa.config import OLLAMA_HOST, OLLAMA_MODEL, OPTIMIZER_TIMEOUT
from outreach_qa.agents.llm_gateway import LLMGateway
from outreach_qa.agents.safe_optimizer import WARNING_AI_UNAVAILABLE, safe_optimize_email

SAMPLE_SUBJECT = "Quick question about onboarding"
SAMPLE_BODY = (
    "Hi Sam,\n\n"
    "Your team is hiring three support engineers this quarter. "
    "We help support teams cut ticket handling time with better routing.\n\n"
    "Worth a 15 minute call this week?\n\n"
    "Thanks,\nAlex"
)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Check the model host used for rewrite suggestions")
    parser.add_argument("--optimize", action="store_true",
                        help="Run one safe optimization against the live model")
    args = parser.parse_args(argv)

    print("=" * 50)
    print("LLM SMOKETEST")
    print("=" * 50)
    print(f"Host:    {OLLAMA_HOST}")
    print(f"Model:   {OLLAMA_MODEL}")
    print(f"Timeout: {OPTIMIZER_TIMEOUT}s")
    print()

    gateway = LLMGateway()

    print("[1/2] Health check...")
    health = gateway.health_check()
    if not health["healthy"]:
        print(f"  FAIL: {health.get('error', 'Unknown error')}")
        print()
        print("Troubleshooting:")
        print("  1. Is Ollama running? Try: ollama serve")
        print(f"  2. Is the host correct? Current: {OLLAMA_HOST}")
        print("  3. Set OLLAMA_HOST env var if needed")
        return 1

    print("  OK: Ollama reachable")
    print(f"  Models: {', '.join(health['models'][:5])}")
    if not health["model_available"]:
        print(f"  WARN: Model '{OLLAMA_MODEL}' not found")
        print(f"  Run: ollama pull {OLLAMA_MODEL}")
        return 2
    print(f"  OK: Model '{OLLAMA_MODEL}' available")

    print()
    print("[2/2] Test prompt...")
    result = gateway.generate_result("Reply with exactly: OLLAMA_OK", stage_name="smoketest",
                                     temperature=0.0, max_tokens=20)
    if not result.ok:
        print(f"  FAIL: {result.error}")
        return 1
    print(f"  Response: {result.text.strip()[:50]}")
    print(f"  Time: {result.duration_ms}ms")

    if args.optimize:
        print()
        print("[extra] Safe optimization...")
        optimized = safe_optimize_email(SAMPLE_SUBJECT, SAMPLE_BODY, gateway=gateway)
        print(f"  Suggestions: {len(optimized.suggestions)}")
        for warning in optimized.warnings:
            print(f"  Warning: {warning}")
        if WARNING_AI_UNAVAILABLE in optimized.warnings:
            return 1

    print()
    print("OK - LLM is working")
    return 0


if __name__ == "__main__":
    sys.exit(main())

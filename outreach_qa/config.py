"""
Centralized Configuration - Single source of truth for engine settings.

All environment variables are read here, validated, and exposed as module-level
constants. Other modules import from here instead of reading os.environ directly.

Usage:
    from outreach_qa.config import OLLAMA_HOST, OPTIMIZER_TIMEOUT, LOG_LEVEL
"""

import os
import sys

# ─── PATHS ───────────────────────────────────────────────────

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
LOGS_DIR = os.path.join(PROJECT_ROOT, "logs")

# ─── LLM ─────────────────────────────────────────────────────

OLLAMA_HOST = os.environ.get("OLLAMA_HOST", "http://127.0.0.1:11434")
OLLAMA_MODEL = os.environ.get("OLLAMA_MODEL", "qwen2.5:7b")

# ─── SAFE OPTIMIZER ──────────────────────────────────────────

OPTIMIZER_TIMEOUT = int(os.environ.get("OPTIMIZER_TIMEOUT_SECONDS", "30"))
OPTIMIZER_TEMPERATURE = float(os.environ.get("OPTIMIZER_TEMPERATURE", "0.3"))
OPTIMIZER_MAX_TOKENS = int(os.environ.get("OPTIMIZER_MAX_TOKENS", "1000"))
ENABLE_AI_SUGGESTIONS = os.environ.get("ENABLE_AI_SUGGESTIONS", "true").lower() == "true"

# ─── SANITIZER ───────────────────────────────────────────────

MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", "50000"))

# ─── LOGGING ─────────────────────────────────────────────────

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")  # "text" or "json"
LOG_FILE = os.environ.get("LOG_FILE", "")  # empty = stdout only

# ─── VALIDATION ──────────────────────────────────────────────

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_VALID_LOG_FORMATS = {"text", "json"}

_errors = []

if LOG_LEVEL not in _VALID_LOG_LEVELS:
    _errors.append(f"LOG_LEVEL must be one of {_VALID_LOG_LEVELS}, got '{LOG_LEVEL}'")

if LOG_FORMAT not in _VALID_LOG_FORMATS:
    _errors.append(f"LOG_FORMAT must be one of {_VALID_LOG_FORMATS}, got '{LOG_FORMAT}'")

if OPTIMIZER_TIMEOUT < 1:
    _errors.append(f"OPTIMIZER_TIMEOUT_SECONDS must be positive, got {OPTIMIZER_TIMEOUT}")

if not 0.0 <= OPTIMIZER_TEMPERATURE <= 2.0:
    _errors.append(f"OPTIMIZER_TEMPERATURE must be between 0 and 2, got {OPTIMIZER_TEMPERATURE}")

if OPTIMIZER_MAX_TOKENS < 1:
    _errors.append(f"OPTIMIZER_MAX_TOKENS must be positive, got {OPTIMIZER_MAX_TOKENS}")

if MAX_CONTENT_LENGTH < 1000:
    _errors.append(f"MAX_CONTENT_LENGTH must be at least 1000, got {MAX_CONTENT_LENGTH}")

if _errors:
    for e in _errors:
        print(f"[config] ERROR: {e}", file=sys.stderr)


def validate(strict: bool = False) -> list:
    """Validate all configuration settings.

    Args:
        strict: If True, raise ValueError on any errors.

    Returns:
        List of error messages (empty if all valid).
    """
    if strict and _errors:
        raise ValueError(f"Configuration errors: {'; '.join(_errors)}")
    return list(_errors)


def print_config():
    """Print current configuration (safe - no secrets)."""
    print("=" * 50)
    print("Outreach QA Configuration")
    print("=" * 50)
    print(f"  OLLAMA_HOST:            {OLLAMA_HOST}")
    print(f"  OLLAMA_MODEL:           {OLLAMA_MODEL}")
    print(f"  OPTIMIZER_TIMEOUT:      {OPTIMIZER_TIMEOUT}s")
    print(f"  OPTIMIZER_TEMPERATURE:  {OPTIMIZER_TEMPERATURE}")
    print(f"  OPTIMIZER_MAX_TOKENS:   {OPTIMIZER_MAX_TOKENS}")
    print(f"  ENABLE_AI_SUGGESTIONS:  {ENABLE_AI_SUGGESTIONS}")
    print(f"  MAX_CONTENT_LENGTH:     {MAX_CONTENT_LENGTH}")
    print(f"  LOG_LEVEL:              {LOG_LEVEL}")
    print(f"  LOG_FORMAT:             {LOG_FORMAT}")
    print(f"  LOG_FILE:               {LOG_FILE or '(stdout)'}")
    print("=" * 50)

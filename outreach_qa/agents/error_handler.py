"""
Engine Error Handler - Records non-fatal failures on degraded paths.

The engine never raises for content or model problems; it degrades and says
so in the result's warnings. Every such path also calls log_engine_error()
so the failure is visible in the logs with structured extras.

Usage:
    from outreach_qa.agents.error_handler import log_engine_error

    result = gateway.generate_result(prompt)
    if not result.ok:
        log_engine_error(phase="safe_optimize", error_message=result.error,
                         request_id=result.request_id)
"""

import logging

logger = logging.getLogger("outreach_qa.error_handler")


def log_engine_error(
    phase: str,
    error: Exception = None,
    error_message: str = None,
    agent_name: str = None,
    request_id: str = None,
    element: str = None,
    severity: str = "warning",
) -> str:
    """Log a non-fatal engine error.

    Args:
        phase: Where it happened (ai_call, parse, validation, ...).
        error: The exception object (optional if error_message provided).
        error_message: Human-readable description.
        agent_name: Which agent hit the error.
        request_id: Trace id of the model call, if any.
        element: Suggestion element involved, if any.
        severity: "warning", "error", or "critical".

    Returns:
        The message that was logged.
    """
    msg = error_message or (str(error) if error else "Unknown error")
    error_type = type(error).__name__ if error else "EngineError"

    log_extra = {
        "phase": phase,
        "agent_name": agent_name or "",
        "request_id": request_id or "",
        "element": element or "",
    }

    if severity == "critical":
        logger.critical("Engine error in %s (%s): %s", phase, error_type, msg, extra=log_extra)
    elif severity == "error":
        logger.error("Engine error in %s (%s): %s", phase, error_type, msg, extra=log_extra)
    else:
        logger.warning("Engine error in %s (%s): %s", phase, error_type, msg, extra=log_extra)
    return msg

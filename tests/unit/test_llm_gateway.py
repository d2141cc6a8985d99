"""
Unit tests for the LLM gateway, the engine error logger and the JSON log
formatter. The Ollama client is stubbed; the only socket opened is a
refused connection to a closed local port.
"""

import json
import logging
import sys
import os
from http.client import IncompleteRead
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

import outreach_qa.agents.llm_gateway as llm_gateway
import outreach_qa.agents.safe_optimizer as safe_optimizer
from outreach_qa.agents.error_handler import log_engine_error
from outreach_qa.agents.llm_gateway import (
    LLMError,
    LLMGateway,
    LLMResult,
    ModelNotFoundError,
    OllamaClient,
    get_gateway,
)
from outreach_qa.agents.safe_optimizer import WARNING_AI_UNAVAILABLE, safe_optimize_email
from outreach_qa.config import OPTIMIZER_TIMEOUT
from outreach_qa.logging_config import JSONFormatter, get_agent_logger

CLOSED_PORT_HOST = "http://127.0.0.1:9"


class _StubClient:
    """Replaces OllamaClient; returns a canned response or raises."""

    def __init__(self, response="OK", error=None):
        self.response = response
        self.error = error
        self.model = "stub-model"
        self.calls = []

    def generate(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return {"response": self.response, "model": self.model, "eval_count": 3}


class _Capture(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def _gateway(stub) -> LLMGateway:
    gateway = LLMGateway(ollama_host=CLOSED_PORT_HOST)
    gateway.ollama = stub
    return gateway


# ─── GATEWAY ─────────────────────────────────────────────────

def test_error_hierarchy():
    assert issubclass(ModelNotFoundError, LLMError)
    assert issubclass(LLMError, Exception)
    print("PASS: test_error_hierarchy")


def test_client_defaults():
    client = OllamaClient(host="http://localhost:11434/")
    assert client.host == "http://localhost:11434"
    assert client.timeout == OPTIMIZER_TIMEOUT
    print("PASS: test_client_defaults")


def test_generate_result_success():
    stub = _StubClient(response='{"suggestions": []}')
    result = _gateway(stub).generate_result("prompt text", stage_name="safe_optimize",
                                            system="SYSTEM", temperature=0.1)
    assert isinstance(result, LLMResult)
    assert result.ok and result.text == '{"suggestions": []}'
    assert result.error is None
    assert len(result.request_id) == 12, f"Got {result.request_id!r}"
    assert stub.calls[0]["system"] == "SYSTEM"
    assert stub.calls[0]["temperature"] == 0.1
    print("PASS: test_generate_result_success")


def test_generate_result_failure_is_data():
    stub = _StubClient(error=LLMError("Timed out after 30s"))
    result = _gateway(stub).generate_result("prompt", stage_name="safe_optimize",
                                            request_id="req123")
    assert not result.ok
    assert result.error == "Timed out after 30s"
    assert result.request_id == "req123"
    assert result.text == ""
    print("PASS: test_generate_result_failure_is_data")


def test_model_not_found_is_caught():
    stub = _StubClient(error=ModelNotFoundError("Model 'x' not found"))
    result = _gateway(stub).generate_result("prompt")
    assert not result.ok and "not found" in result.error
    print("PASS: test_model_not_found_is_caught")


def test_generate_raises():
    stub = _StubClient(error=LLMError("Connection error"))
    try:
        _gateway(stub).generate("prompt")
    except LLMError as e:
        assert "Connection error" in str(e)
    else:
        raise AssertionError("generate() should raise LLMError")
    print("PASS: test_generate_raises")


def test_unreachable_host():
    client = OllamaClient(host=CLOSED_PORT_HOST, timeout=1)
    try:
        client.generate("prompt")
    except LLMError:
        pass
    else:
        raise AssertionError("Unreachable host should raise LLMError")

    health = client.health_check()
    assert not health["healthy"] and health["error"], f"Got {health}"
    print("PASS: test_unreachable_host")


def test_singleton():
    assert get_gateway() is get_gateway()
    assert isinstance(get_gateway(), LLMGateway)
    print("PASS: test_singleton")


# ─── BROKEN TRANSPORT ────────────────────────────────────────

class _FakeResponse:
    """Context-manager stand-in for the object urlopen returns."""

    def __init__(self, body: bytes = b"", error: Exception = None):
        self.body = body
        self.error = error

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def read(self):
        if self.error:
            raise self.error
        return self.body


def _with_urlopen(response, fn):
    saved = llm_gateway.urlopen
    llm_gateway.urlopen = lambda req, timeout=None: response
    try:
        return fn()
    finally:
        llm_gateway.urlopen = saved


def test_truncated_body_becomes_llm_error():
    client = OllamaClient(host=CLOSED_PORT_HOST)
    try:
        _with_urlopen(_FakeResponse(error=IncompleteRead(b"partial")),
                      lambda: client.generate("prompt"))
    except LLMError as e:
        assert "IncompleteRead" in str(e), f"Got {e}"
    else:
        raise AssertionError("IncompleteRead should surface as LLMError")

    gateway = LLMGateway(ollama_host=CLOSED_PORT_HOST)
    result = _with_urlopen(_FakeResponse(error=IncompleteRead(b"partial")),
                           lambda: gateway.generate_result("prompt"))
    assert not result.ok and "IncompleteRead" in result.error, f"Got {result}"
    print("PASS: test_truncated_body_becomes_llm_error")


def test_non_object_reply_becomes_llm_error():
    gateway = LLMGateway(ollama_host=CLOSED_PORT_HOST)
    for body in (b"[1,2]", b'"text"', b'{"response": 42}'):
        result = _with_urlopen(_FakeResponse(body), lambda: gateway.generate_result("prompt"))
        assert not result.ok, f"Expected failure for {body!r}, got {result}"
        assert "Unexpected response shape" in result.error, f"Got {result.error}"
    print("PASS: test_non_object_reply_becomes_llm_error")


def test_optimizer_survives_broken_transport():
    subject, body = "Meeting", "hello how are you let's meet Tuesday afternoon please"
    gateway = LLMGateway(ollama_host=CLOSED_PORT_HOST)
    saved = safe_optimizer.ENABLE_AI_SUGGESTIONS
    safe_optimizer.ENABLE_AI_SUGGESTIONS = True
    try:
        for response in (_FakeResponse(error=IncompleteRead(b"partial")), _FakeResponse(b"[1,2]")):
            result = _with_urlopen(response,
                                   lambda: safe_optimize_email(subject, body, gateway=gateway))
            assert WARNING_AI_UNAVAILABLE in result.warnings, f"Got {result.warnings}"
            assert all(s.id.startswith("rule-") for s in result.suggestions)
    finally:
        safe_optimizer.ENABLE_AI_SUGGESTIONS = saved
    print("PASS: test_optimizer_survives_broken_transport")


# ─── ERROR LOGGING ───────────────────────────────────────────

def test_log_engine_error_records_extras():
    capture = _Capture()
    logger = logging.getLogger("outreach_qa.error_handler")
    logger.addHandler(capture)
    try:
        msg = log_engine_error(phase="ai_call", error=TimeoutError("slow"),
                               agent_name="safe_optimizer", request_id="abc")
        fallback = log_engine_error(phase="parse")
    finally:
        logger.removeHandler(capture)

    assert msg == "slow"
    assert fallback == "Unknown error"
    record = capture.records[0]
    assert record.levelno == logging.WARNING
    assert record.phase == "ai_call" and record.request_id == "abc"
    assert "TimeoutError" in record.getMessage()
    print("PASS: test_log_engine_error_records_extras")


def test_json_formatter_includes_extras():
    logger = get_agent_logger("safe_optimizer")
    assert logger.name == "outreach_qa.agents.safe_optimizer"
    record = logger.makeRecord(logger.name, logging.INFO, __file__, 1, "Model call finished",
                               None, None, extra={"request_id": "ab12", "duration_ms": 840})
    entry = json.loads(JSONFormatter().format(record))
    assert entry["message"] == "Model call finished"
    assert entry["request_id"] == "ab12" and entry["duration_ms"] == 840
    assert entry["level"] == "INFO"
    print("PASS: test_json_formatter_includes_extras")


if __name__ == "__main__":
    test_error_hierarchy()
    test_client_defaults()
    test_generate_result_success()
    test_generate_result_failure_is_data()
    test_model_not_found_is_caught()
    test_generate_raises()
    test_unreachable_host()
    test_singleton()
    test_truncated_body_becomes_llm_error()
    test_non_object_reply_becomes_llm_error()
    test_optimizer_survives_broken_transport()
    test_log_engine_error_records_extras()
    test_json_formatter_includes_extras()
    print("\n=== All 13 LLM gateway tests passed ===")

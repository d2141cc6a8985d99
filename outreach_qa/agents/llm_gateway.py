"""
Outreach QA - LLM Gateway
Single interface for the one generative call the engine makes (the safe
optimizer's rewrite request).

Features:
- Ollama client with a health check and a bounded timeout
- One attempt per request: a failure or timeout is reported, never retried
- generate_result() wraps every failure in an LLMResult so callers handle it
  as data instead of catching exceptions
- Request tracing with a request id and a redacted prompt preview
"""

import json
import logging
import time
import uuid
from dataclasses import dataclass
from http.client import HTTPException
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from outreach_qa.config import OLLAMA_HOST, OLLAMA_MODEL, OPTIMIZER_TIMEOUT

logger = logging.getLogger("outreach_qa.agents.llm_gateway")

HEALTH_CHECK_TIMEOUT = 10
PROMPT_PREVIEW_CHARS = 80


# ─── ERRORS & RESULT ──────────────────────────────────────────

class LLMError(Exception):
    """Raised when the model host returns an error or is unreachable."""
    pass


class ModelNotFoundError(LLMError):
    """Raised when the requested model is not available."""
    pass


@dataclass
class LLMResult:
    """Outcome of one model call: either text or the reason there is none."""
    ok: bool
    text: str = ""
    error: Optional[str] = None
    request_id: str = ""
    duration_ms: int = 0


# ─── OLLAMA CLIENT ────────────────────────────────────────────

class OllamaClient:
    """Minimal Ollama HTTP client."""

    def __init__(self, host: str = None, model: str = None, timeout: int = None):
        self.host = (host or OLLAMA_HOST).rstrip("/")
        self.model = model or OLLAMA_MODEL
        self.timeout = timeout or OPTIMIZER_TIMEOUT

    def health_check(self) -> dict:
        """Check the host is reachable and the model is pulled.

        Returns:
            {"healthy": bool, "models": [...], "model_available": bool, "error": str|None}
        """
        result = {"healthy": False, "models": [], "model_available": False, "error": None}

        try:
            req = Request(f"{self.host}/api/tags", method="GET")
            with urlopen(req, timeout=HEALTH_CHECK_TIMEOUT) as resp:
                data = json.loads(resp.read().decode())
        except URLError as e:
            result["error"] = f"Cannot reach Ollama at {self.host}. Is the service running? Try: ollama serve"
            logger.warning("Ollama health check failed: %s", e)
            return result
        except (OSError, ValueError) as e:
            result["error"] = f"Unexpected response during health check: {e}"
            logger.error("Ollama health check error: %s", e)
            return result

        models = [m.get("name", "") for m in data.get("models", [])]
        result["models"] = models
        result["healthy"] = True

        # Tags may carry a different size suffix; match on the base name too
        model_base = self.model.split(":")[0]
        result["model_available"] = any(self.model in m or model_base in m for m in models)
        if not result["model_available"]:
            result["error"] = (
                f"Model '{self.model}' not found. Available: {', '.join(models[:5])}. "
                f"Run: ollama pull {self.model}"
            )
        return result

    def generate(self, prompt: str, model: str = None, temperature: float = 0.3,
                 max_tokens: int = 1000, system: str = None) -> dict:
        """Send one generation request.

        Returns:
            {"response": str, "model": str, "eval_count": int}

        Raises:
            ModelNotFoundError: If the model is not available.
            LLMError: On any other failure, including timeout.
        """
        model = model or self.model
        payload = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": temperature, "num_predict": max_tokens},
        }
        if system:
            payload["system"] = system

        req = Request(
            f"{self.host}/api/generate",
            data=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                data = json.loads(resp.read().decode())
        except HTTPError as e:
            error_body = e.read().decode(errors="replace")
            if e.code == 404 or ("model" in error_body.lower() and "not found" in error_body.lower()):
                raise ModelNotFoundError(f"Model '{model}' not found. Run: ollama pull {model}") from e
            raise LLMError(f"HTTP {e.code}: {error_body[:200]}") from e
        except URLError as e:
            raise LLMError(f"Connection error: {e.reason}") from e
        except TimeoutError as e:
            raise LLMError(f"Timed out after {self.timeout}s") from e
        except OSError as e:
            raise LLMError(f"Socket error: {e}") from e
        except HTTPException as e:
            # Truncated bodies (IncompleteRead) and bad status lines
            raise LLMError(f"Broken HTTP response: {e!r}") from e
        except ValueError as e:
            raise LLMError(f"Malformed response from Ollama: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("response", ""), str):
            raise LLMError(f"Unexpected response shape from Ollama: {type(data).__name__}")

        return {
            "response": data.get("response", ""),
            "model": data.get("model", model),
            "eval_count": data.get("eval_count", 0),
        }


# ─── LLM GATEWAY ──────────────────────────────────────────────

class LLMGateway:
    """Traced front door to the model host.

    Usage:
        gateway = LLMGateway()
        result = gateway.generate_result(prompt, stage_name="safe_optimize", system=SYSTEM)
        if result.ok:
            ...
    """

    def __init__(self, ollama_host: str = None, ollama_model: str = None, timeout: int = None):
        self.ollama = OllamaClient(host=ollama_host, model=ollama_model, timeout=timeout)

    def health_check(self) -> dict:
        return self.ollama.health_check()

    def generate(self, prompt: str, stage_name: str = "unknown", model: str = None,
                 temperature: float = 0.3, max_tokens: int = 1000, system: str = None,
                 request_id: str = None) -> dict:
        """Generate text, raising on failure.

        Returns:
            {"response": str, "model": str, "request_id": str, "stage": str, "duration_ms": int}

        Raises:
            LLMError: If the call fails or times out.
        """
        request_id = request_id or uuid.uuid4().hex[:12]
        start = time.time()

        preview = prompt[:PROMPT_PREVIEW_CHARS].replace("\n", " ")
        if len(prompt) > PROMPT_PREVIEW_CHARS:
            preview += "..."
        logger.info("[%s] LLM request: stage=%s, prompt='%s'", request_id, stage_name, preview,
                    extra={"request_id": request_id, "phase": stage_name})

        result = self.ollama.generate(prompt=prompt, model=model, temperature=temperature,
                                      max_tokens=max_tokens, system=system)
        duration_ms = int((time.time() - start) * 1000)
        logger.info("[%s] Ollama responded in %dms, tokens=%s", request_id, duration_ms,
                    result.get("eval_count", "?"),
                    extra={"request_id": request_id, "duration_ms": duration_ms})
        return {
            "response": result["response"],
            "model": result.get("model", self.ollama.model),
            "request_id": request_id,
            "stage": stage_name,
            "duration_ms": duration_ms,
        }

    def generate_result(self, prompt: str, stage_name: str = "unknown", **kwargs) -> LLMResult:
        """Like generate(), but every failure comes back as LLMResult(ok=False)."""
        request_id = kwargs.pop("request_id", None) or uuid.uuid4().hex[:12]
        start = time.time()
        try:
            data = self.generate(prompt, stage_name=stage_name, request_id=request_id, **kwargs)
        except LLMError as e:
            duration_ms = int((time.time() - start) * 1000)
            logger.warning("[%s] LLM call failed: %s", request_id, e,
                           extra={"request_id": request_id, "duration_ms": duration_ms})
            return LLMResult(ok=False, error=str(e), request_id=request_id, duration_ms=duration_ms)
        return LLMResult(ok=True, text=data["response"], request_id=request_id,
                         duration_ms=data["duration_ms"])


# ─── MODULE-LEVEL SINGLETON ───────────────────────────────────

_gateway_instance = None


def get_gateway() -> LLMGateway:
    """Get or create the module-level LLM Gateway singleton."""
    global _gateway_instance
    if _gateway_instance is None:
        _gateway_instance = LLMGateway()
    return _gateway_instance

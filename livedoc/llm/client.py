"""HTTP client for the text-generation service with retry and backoff."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from enum import Enum
from http.client import HTTPException
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from ..config import DEFAULT_ENDPOINT, DEFAULT_MODEL, ConfigError, GenerationConfig
from ..logging import get_logger
from ..models import GenerationRequest

logger = get_logger("llm.client")


class GenerationError(RuntimeError):
    """Base class for generation failures."""


class ClientError(GenerationError):
    """The service rejected the request (4xx other than 429); never retried."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"API call failed with status {status}: {_truncate(body)}")
        self.status = status
        self.body = body


class TransientError(GenerationError):
    """A retryable failure: 5xx, 429, or a transport-level error."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class RetriesExhaustedError(GenerationError):
    """Every attempt ended in a transient failure."""

    def __init__(self, attempts: int, last_error: GenerationError) -> None:
        super().__init__(f"Generation failed after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class InvalidResponseError(GenerationError):
    """A 2xx response that carried no usable generated text."""


class Outcome(str, Enum):
    SUCCESS = "success"
    RETRY = "retry"
    FATAL_CLIENT = "fatal_client"
    INVALID = "invalid"


@dataclass(frozen=True)
class Classification:
    """Result of inspecting one response."""

    outcome: Outcome
    text: Optional[str] = None
    error: Optional[GenerationError] = None


@dataclass(frozen=True)
class HTTPResult:
    """Raw status and body of one HTTP exchange."""

    status: int
    body: str


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and exponential backoff schedule."""

    max_attempts: int = 3
    base_delay: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must not be negative")

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after failed attempt ``attempt`` (1-based)."""
        return self.base_delay * (2**attempt)


Transport = Callable[[str, bytes, Mapping[str, str], float], HTTPResult]


def classify_response(status: int, body: str) -> Classification:
    """Map an HTTP status and body to the next step of the retry loop."""
    if status == 429 or status >= 500:
        return Classification(
            Outcome.RETRY,
            error=TransientError(
                f"API call failed with status {status}: {_truncate(body)}", status=status
            ),
        )
    if 400 <= status < 500:
        return Classification(Outcome.FATAL_CLIENT, error=ClientError(status, body))
    if not 200 <= status < 300:
        return Classification(
            Outcome.INVALID,
            error=InvalidResponseError(f"Unexpected status {status} from generation service"),
        )

    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return Classification(
            Outcome.INVALID, error=InvalidResponseError("Generation service returned invalid JSON")
        )
    text = extract_text(payload)
    if not text:
        return Classification(
            Outcome.INVALID,
            error=InvalidResponseError(
                "Generation service response has no candidates[0].content.parts[0].text"
            ),
        )
    return Classification(Outcome.SUCCESS, text=text)


def extract_text(payload: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` or an empty string."""
    if not isinstance(payload, dict):
        return ""
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return ""
    text = parts[0].get("text")
    return text if isinstance(text, str) else ""


def build_payload(request: GenerationRequest) -> Dict[str, Any]:
    options = request.options
    return {
        "contents": [{"parts": [{"text": request.prompt}]}],
        "generationConfig": {
            "temperature": options.temperature,
            "maxOutputTokens": options.max_output_tokens,
        },
    }


class GenerationClient:
    """Sends generation requests and applies the retry policy.

    Every attempt is classified by ``classify_response``: client errors and
    invalid success payloads end the call immediately, transient failures are
    retried after ``RetryPolicy.delay_for(attempt)`` until the budget is spent.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_MODEL,
        endpoint: str = DEFAULT_ENDPOINT,
        retry: RetryPolicy | None = None,
        request_timeout: float = 60.0,
        transport: Transport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not api_key:
            raise ConfigError("An API key is required for the generation service.")
        self.api_key = api_key
        self.model = model
        self.endpoint = endpoint.rstrip("/")
        self.retry = retry or RetryPolicy()
        self.request_timeout = request_timeout
        self._transport = transport or _urllib_transport
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: GenerationConfig, **kwargs: Any) -> "GenerationClient":
        return cls(
            config.api_key,
            model=config.model,
            endpoint=config.endpoint,
            retry=RetryPolicy(max_attempts=config.max_attempts, base_delay=config.base_delay),
            request_timeout=config.request_timeout,
            **kwargs,
        )

    @property
    def url(self) -> str:
        return f"{self.endpoint}/{self.model}:generateContent"

    def generate(self, request: GenerationRequest) -> str:
        data = json.dumps(build_payload(request)).encode("utf-8")
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        label = request.function_name or "request"

        last_error: GenerationError | None = None
        for attempt in range(1, self.retry.max_attempts + 1):
            try:
                result = self._transport(self.url, data, headers, self.request_timeout)
            except (OSError, HTTPException) as exc:
                last_error = TransientError(f"Transport error: {exc}")
                last_error.__cause__ = exc
            else:
                classification = classify_response(result.status, result.body)
                if classification.outcome is Outcome.SUCCESS:
                    logger.debug("Generated %s on attempt %d", label, attempt)
                    return classification.text or ""
                if classification.outcome is not Outcome.RETRY:
                    raise classification.error  # type: ignore[misc]
                last_error = classification.error

            if attempt < self.retry.max_attempts:
                delay = self.retry.delay_for(attempt)
                logger.warning(
                    "Generation for %s failed (attempt %d/%d): %s; retrying in %.1fs",
                    label,
                    attempt,
                    self.retry.max_attempts,
                    last_error,
                    delay,
                )
                self._sleep(delay)

        raise RetriesExhaustedError(self.retry.max_attempts, last_error) from last_error  # type: ignore[arg-type]


def _urllib_transport(url: str, data: bytes, headers: Mapping[str, str], timeout: float) -> HTTPResult:
    http_request = Request(url, data=data, headers=dict(headers), method="POST")
    try:
        with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
            raw = response.read()
            status = getattr(response, "status", 200)
    except HTTPError as exc:
        detail = exc.read().decode("utf-8", errors="replace") if exc.fp is not None else ""
        return HTTPResult(status=exc.code, body=detail or str(exc.reason))
    return HTTPResult(status=status, body=raw.decode("utf-8", errors="replace"))


def _truncate(text: str, limit: int = 300) -> str:
    cleaned = " ".join(text.split())
    return cleaned[:limit] + ("…" if len(cleaned) > limit else "")


__all__ = [
    "Classification",
    "ClientError",
    "GenerationClient",
    "GenerationError",
    "HTTPResult",
    "InvalidResponseError",
    "Outcome",
    "RetriesExhaustedError",
    "RetryPolicy",
    "TransientError",
    "build_payload",
    "classify_response",
    "extract_text",
]

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from .models import ErrorKind, GenerationResult, Provider

logger = structlog.get_logger(__name__)

REQUEST_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True)
class ProviderRequest:
    """The exact wire request an adapter sends: URL, headers and JSON body."""

    url: str
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)


def dig(data: Any, *path: str | int) -> Any:
    """
    Walks nested dicts/lists along `path`, returning None as soon as a step is missing.

    Integer steps index lists, string steps index dicts; a step of the wrong
    kind for the current node also yields None.
    """
    node = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, list) or not -len(node) <= step < len(node):
                return None
            node = node[step]
        else:
            if not isinstance(node, dict) or step not in node:
                return None
            node = node[step]
    return node


def compact_json(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


class ProviderAdapter(ABC):
    """
    One HTTP round trip to an LLM vendor, normalized to a GenerationResult.

    Failures are returned as error values; nothing raised by httpx or by
    response parsing escapes `call`. Every call opens its own client, so
    calls share no connection state.
    """

    provider: Provider
    display_name: str

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self._transport = transport

    @abstractmethod
    def build_request(self, model_name: str, api_key: str, prompt: str) -> ProviderRequest:
        """Returns the request for `prompt` against `model_name`."""

    @abstractmethod
    def extract_text(self, data: Any) -> str | None:
        """Returns the generated text from a decoded response body, if present."""

    def extract_error(self, data: Any) -> str | None:
        """Returns the vendor error message when the body carries an error object."""
        if not isinstance(data, dict) or data.get("error") is None:
            return None
        message = dig(data, "error", "message")
        if isinstance(message, str):
            return message
        return f"{self.display_name} API error."

    def empty_generation(self, data: Any, log: structlog.stdlib.BoundLogger) -> GenerationResult:
        log.warning("Provider response contained no text")
        return GenerationResult.failure(ErrorKind.EMPTY_GENERATION, "No text generated.")

    async def call(self, model_name: str, api_key: str, prompt: str) -> GenerationResult:
        log = logger.bind(provider=self.provider.value, model=model_name)

        if not api_key:
            log.warning("Provider API key is not configured")
            return GenerationResult.failure(
                ErrorKind.MISSING_CREDENTIAL,
                f"{self.display_name} API key is required.",
            )

        request = self.build_request(model_name, api_key, prompt)
        headers = {"Content-Type": "application/json", **request.headers}
        log.info("Requesting generation", prompt_chars=len(prompt))

        try:
            async with httpx.AsyncClient(
                timeout=REQUEST_TIMEOUT_SECONDS, transport=self._transport
            ) as client:
                response = await client.post(request.url, headers=headers, json=request.body)
        except UnicodeEncodeError as e:
            # Header values must be ASCII; the key is the only free-form header.
            log.error("Provider API key cannot be sent in a header", error=str(e))
            return GenerationResult.failure(
                ErrorKind.MISSING_CREDENTIAL,
                f"{self.display_name} API key contains invalid characters.",
            )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            log.error(
                "Network error during provider request",
                error=str(e),
                error_type=type(e).__name__,
            )
            return GenerationResult.failure(
                ErrorKind.TRANSPORT_ERROR, str(e) or type(e).__name__
            )

        try:
            data = response.json()
        except ValueError:
            log.warning(
                "Provider returned a non-JSON body",
                status_code=response.status_code,
                body=response.text[:500],
            )
            data = None

        error_message = self.extract_error(data)
        if error_message is not None:
            log.error(
                "Provider returned an error",
                status_code=response.status_code,
                error=error_message,
            )
            return GenerationResult.failure(ErrorKind.PROVIDER_ERROR, error_message)

        if not response.is_success:
            log.error(
                "Provider returned an error status",
                status_code=response.status_code,
                response_body=response.text[:500],
            )
            return GenerationResult.failure(
                ErrorKind.PROVIDER_ERROR,
                f"{self.display_name} API returned HTTP {response.status_code}.",
            )

        text = self.extract_text(data)
        text = text.strip() if isinstance(text, str) else ""
        if not text:
            return self.empty_generation(data, log)

        log.info("Successfully received generation", text_chars=len(text))
        return GenerationResult.success(text)

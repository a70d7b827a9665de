from typing import Any, Callable

import structlog

from .base import ProviderAdapter, ProviderRequest, compact_json, dig
from .models import ErrorKind, GenerationResult, Provider

INFERENCE_URL = "https://router.huggingface.co/models/{model}"
SNIPPET_CHARS = 200

ExtractionRule = Callable[[Any], str | None]


def _as_text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def first_item_generated_text(data: Any) -> str | None:
    """`[{"generated_text": ...}, ...]`, the text-generation pipeline shape."""
    return _as_text(dig(data, 0, "generated_text"))


def first_item_string(data: Any) -> str | None:
    """`["...", ...]`"""
    return _as_text(dig(data, 0))


def string_body(data: Any) -> str | None:
    """A bare JSON string."""
    return _as_text(data)


def top_level_generated_text(data: Any) -> str | None:
    """`{"generated_text": ...}`"""
    return _as_text(dig(data, "generated_text"))


def any_item_text(data: Any) -> str | None:
    """
    Scans every element (list items or object values) for the first non-empty
    string, or object carrying a non-empty `generated_text`.
    """
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        items = list(data.values())
    else:
        return None

    for item in items:
        if isinstance(item, str) and item:
            return item
        if isinstance(item, dict):
            text = _as_text(item.get("generated_text"))
            if text:
                return text
    return None


# Evaluated in order; the first rule yielding non-empty text wins.
EXTRACTION_RULES: tuple[ExtractionRule, ...] = (
    first_item_generated_text,
    first_item_string,
    string_body,
    top_level_generated_text,
    any_item_text,
)


class HuggingFaceAdapter(ProviderAdapter):
    """
    Hugging Face Inference router.

    Response shapes differ between model pipelines, so text is pulled out with
    EXTRACTION_RULES instead of a single path.
    """

    provider = Provider.HUGGINGFACE
    display_name = "Hugging Face"

    def build_request(self, model_name: str, api_key: str, prompt: str) -> ProviderRequest:
        return ProviderRequest(
            url=INFERENCE_URL.format(model=model_name),
            headers={"Authorization": f"Bearer {api_key}"},
            body={
                "inputs": prompt,
                "parameters": {"max_new_tokens": 250, "temperature": 0.7},
            },
        )

    def extract_error(self, data: Any) -> str | None:
        if not isinstance(data, dict) or data.get("error") is None:
            return None
        error = data["error"]
        return error if isinstance(error, str) else compact_json(error)

    def extract_text(self, data: Any) -> str | None:
        for rule in EXTRACTION_RULES:
            text = rule(data)
            if text:
                return text
        return None

    def empty_generation(self, data: Any, log: structlog.stdlib.BoundLogger) -> GenerationResult:
        raw = compact_json(data)
        log.warning("Hugging Face response contained no text", response=raw)
        return GenerationResult.failure(
            ErrorKind.EMPTY_GENERATION,
            "No text generated. Response format may be unexpected. "
            f"Response: {raw[:SNIPPET_CHARS]}",
        )

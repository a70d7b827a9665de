"""HTTP adapters for the LLM vendors, one per provider."""

from .anthropic import AnthropicAdapter
from .base import REQUEST_TIMEOUT_SECONDS, ProviderAdapter, ProviderRequest
from .google import GoogleAdapter
from .huggingface import HuggingFaceAdapter
from .models import (
    ErrorKind,
    GenerationError,
    GenerationResult,
    Provider,
    ProviderCredentials,
)
from .openai import OpenAIAdapter

ADAPTER_CLASSES: dict[Provider, type[ProviderAdapter]] = {
    Provider.HUGGINGFACE: HuggingFaceAdapter,
    Provider.OPENAI: OpenAIAdapter,
    Provider.ANTHROPIC: AnthropicAdapter,
    Provider.GOOGLE: GoogleAdapter,
}


def build_adapters(transport=None) -> dict[Provider, ProviderAdapter]:
    """Instantiates one adapter per provider, optionally over a custom httpx transport."""
    return {provider: cls(transport=transport) for provider, cls in ADAPTER_CLASSES.items()}


__all__ = [
    "ADAPTER_CLASSES",
    "REQUEST_TIMEOUT_SECONDS",
    "AnthropicAdapter",
    "ErrorKind",
    "GenerationError",
    "GenerationResult",
    "GoogleAdapter",
    "HuggingFaceAdapter",
    "OpenAIAdapter",
    "Provider",
    "ProviderAdapter",
    "ProviderCredentials",
    "ProviderRequest",
    "build_adapters",
]

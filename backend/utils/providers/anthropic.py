from typing import Any

from .base import ProviderAdapter, ProviderRequest, dig
from .models import Provider

MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicAdapter(ProviderAdapter):
    provider = Provider.ANTHROPIC
    display_name = "Anthropic"

    def build_request(self, model_name: str, api_key: str, prompt: str) -> ProviderRequest:
        return ProviderRequest(
            url=MESSAGES_URL,
            headers={"x-api-key": api_key, "anthropic-version": ANTHROPIC_VERSION},
            body={
                "model": model_name,
                "max_tokens": 1024,
                "messages": [{"role": "user", "content": prompt}],
            },
        )

    def extract_text(self, data: Any) -> str | None:
        return dig(data, "content", 0, "text")

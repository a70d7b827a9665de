from typing import Any

from .base import ProviderAdapter, ProviderRequest, dig
from .models import Provider

CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"


class OpenAIAdapter(ProviderAdapter):
    provider = Provider.OPENAI
    display_name = "OpenAI"

    def build_request(self, model_name: str, api_key: str, prompt: str) -> ProviderRequest:
        return ProviderRequest(
            url=CHAT_COMPLETIONS_URL,
            headers={"Authorization": f"Bearer {api_key}"},
            body={
                "model": model_name,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": 0.7,
            },
        )

    def extract_text(self, data: Any) -> str | None:
        return dig(data, "choices", 0, "message", "content")

from typing import Any
from urllib.parse import quote_plus

from .base import ProviderAdapter, ProviderRequest, dig
from .models import Provider

GENERATE_CONTENT_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
)


class GoogleAdapter(ProviderAdapter):
    """Gemini generateContent. The key travels in the query string, not a header."""

    provider = Provider.GOOGLE
    display_name = "Google"

    def build_request(self, model_name: str, api_key: str, prompt: str) -> ProviderRequest:
        url = GENERATE_CONTENT_URL.format(model=model_name)
        return ProviderRequest(
            url=f"{url}?key={quote_plus(api_key)}",
            body={"contents": [{"parts": [{"text": prompt}]}]},
        )

    def extract_text(self, data: Any) -> str | None:
        return dig(data, "candidates", 0, "content", "parts", 0, "text")

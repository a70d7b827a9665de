from typing import Annotated, Mapping

from fastapi import Depends
from structlog import get_logger

from config import settings
from plugins.ai.models.registry import get_model
from plugins.core.settings.service import SettingsService, get_settings_service
from summaries_core.tracing import get_tracer
from utils.providers import (
    ErrorKind,
    GenerationResult,
    Provider,
    ProviderAdapter,
    ProviderCredentials,
    build_adapters,
)

from .content import build_prompt, clean_content
from .models import GenerationRequest

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class GenerationService:
    """
    Orchestrates one text generation: resolve the model, clean the content,
    build the prompt and hand it to the provider adapter.

    Errors come back as GenerationResult values; nothing here raises for a
    failed generation.
    """

    def __init__(
        self,
        credentials: ProviderCredentials,
        adapters: Mapping[Provider, ProviderAdapter] | None = None,
        max_content_chars: int | None = None,
    ):
        self._credentials = credentials
        self._adapters = adapters if adapters is not None else build_adapters()
        self._max_content_chars = max_content_chars

    async def generate(
        self, model_id: str, raw_content: str, prompt_template: str
    ) -> GenerationResult:
        log = logger.bind(model_id=model_id)

        entry = get_model(model_id)
        if entry is None or entry.is_manual:
            log.warning("Generation requested for an unknown or manual model")
            return GenerationResult.failure(ErrorKind.UNKNOWN_MODEL, "Unknown AI model.")

        adapter = self._adapters.get(entry.provider)
        if adapter is None:
            log.error("No adapter registered for provider", provider=entry.provider.value)
            return GenerationResult.failure(ErrorKind.UNKNOWN_MODEL, "Unknown AI model.")

        content = clean_content(raw_content)
        if self._max_content_chars and len(content) > self._max_content_chars:
            log.info(
                "Truncating content before prompting",
                content_chars=len(content),
                limit=self._max_content_chars,
            )
            content = content[: self._max_content_chars]

        prompt = build_prompt(prompt_template, content)

        with tracer.start_as_current_span(
            "ai.generate",
            attributes={"ai.provider": entry.provider.value, "ai.model": entry.model_name},
        ) as span:
            result = await adapter.call(
                entry.model_name, self._credentials.get(entry.provider, ""), prompt
            )
            if result.error is not None:
                span.set_attribute("ai.error_kind", result.error.kind.value)

        return result

    async def generate_request(self, request: GenerationRequest) -> GenerationResult:
        return await self.generate(
            request.model_id, request.raw_content, request.prompt_template
        )


async def get_generation_service(
    settings_service: Annotated[SettingsService, Depends(get_settings_service)],
) -> GenerationService:
    """Dependency provider: a GenerationService bound to the current API keys."""
    current = await settings_service.get_settings()
    return GenerationService(
        credentials=current.credentials(),
        max_content_chars=settings.llm_max_content_chars,
    )

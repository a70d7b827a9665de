from typing import Annotated

from fastapi import Depends
from structlog import get_logger

from plugins.ai.generation.content import sanitize_textarea
from plugins.ai.generation.service import GenerationService, get_generation_service
from plugins.ai.models.registry import MANUAL_MODEL_ID, label_for
from plugins.core.settings.models import SummariesSettings
from plugins.core.settings.service import SettingsService, get_settings_service
from utils.exceptions import GenerationFailedError, NotFoundError
from utils.providers import GenerationResult

from .models import (
    GenerateSummariesResponse,
    PostDB,
    PostSummaries,
    SaveContext,
    SaveSummariesRequest,
)
from .render import prepend_summary, render_summary_html
from .repository import PostRepository, get_post_repository

log = get_logger(__name__)


class PostSummariesService:
    def __init__(
        self,
        repository: Annotated[PostRepository, Depends(get_post_repository)],
        settings_service: Annotated[SettingsService, Depends(get_settings_service)],
        generation: Annotated[GenerationService, Depends(get_generation_service)],
    ):
        self.repo = repository
        self.settings = settings_service
        self.generation = generation

    async def _require_post(self, post_id: int) -> PostDB:
        post = await self.repo.get_post(post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")
        return post

    async def _sync_excerpt(
        self, post_id: int, ai_excerpt: str, context: SaveContext
    ) -> bool:
        """Copies the AI excerpt into the native excerpt unless a copy is already in progress."""
        if context.updating_excerpt:
            log.debug("Excerpt sync already in progress, skipping", post_id=post_id)
            return False
        context.updating_excerpt = True
        try:
            await self.repo.set_post_excerpt(post_id, ai_excerpt)
        finally:
            context.updating_excerpt = False
        log.info("Synced AI excerpt to post excerpt", post_id=post_id)
        return True

    def _summaries(
        self, post_id: int, current: SummariesSettings, ai_excerpt: str | None, ai_summary: str | None
    ) -> PostSummaries:
        return PostSummaries(
            post_id=post_id,
            ai_excerpt=ai_excerpt,
            ai_summary=ai_summary,
            model_id=current.ai_model,
            model_label=label_for(current.ai_model),
            is_manual=current.ai_model == MANUAL_MODEL_ID,
        )

    async def get_summaries(self, post_id: int) -> PostSummaries:
        post = await self._require_post(post_id)
        current = await self.settings.get_settings()
        return self._summaries(post_id, current, post.ai_excerpt, post.ai_summary)

    async def save_summaries(
        self,
        post_id: int,
        request: SaveSummariesRequest,
        context: SaveContext | None = None,
    ) -> PostSummaries:
        """Stores manually edited texts; a missing field deletes the stored value."""
        context = context or SaveContext()
        await self._require_post(post_id)
        current = await self.settings.get_settings()

        ai_excerpt = sanitize_textarea(request.ai_excerpt) if request.ai_excerpt is not None else None
        ai_summary = sanitize_textarea(request.ai_summary) if request.ai_summary is not None else None

        await self.repo.update_summaries(post_id, ai_excerpt, ai_summary)
        if ai_excerpt is not None and current.sync_ai_excerpt_to_post_excerpt:
            await self._sync_excerpt(post_id, ai_excerpt, context)

        return self._summaries(post_id, current, ai_excerpt, ai_summary)

    async def generate_summaries(self, post_id: int) -> GenerateSummariesResponse:
        """
        Generates the excerpt, then the summary, with the selected model.

        The first failure aborts the whole operation: nothing is stored, even
        when the excerpt already succeeded.
        """
        post = await self._require_post(post_id)
        current = await self.settings.get_settings()
        bound_log = log.bind(post_id=post_id, model_id=current.ai_model)

        texts: dict[str, str] = {}
        for target, prompt in (
            ("excerpt", current.excerpt_prompt),
            ("summary", current.summary_prompt),
        ):
            result: GenerationResult = await self.generation.generate(
                current.ai_model, post.content, prompt
            )
            if result.error is not None:
                bound_log.warning(
                    "Generation failed, nothing stored",
                    target=target,
                    kind=result.error.kind.value,
                    error=result.error.message,
                )
                raise GenerationFailedError(
                    result.error.kind.value, result.error.message, target=target
                )
            texts[target] = result.text

        await self.repo.update_summaries(post_id, texts["excerpt"], texts["summary"])

        synced = False
        if current.sync_ai_excerpt_to_post_excerpt:
            synced = await self._sync_excerpt(post_id, texts["excerpt"], SaveContext())

        bound_log.info("Generated and stored post summaries", excerpt_synced=synced)
        return GenerateSummariesResponse(
            post_id=post_id,
            model_id=current.ai_model,
            ai_excerpt=texts["excerpt"],
            ai_summary=texts["summary"],
            excerpt_synced=synced,
        )

    async def render_content(self, post_id: int) -> str:
        post = await self._require_post(post_id)
        current = await self.settings.get_settings()
        return prepend_summary(
            current, post.post_type, post.content, post.ai_excerpt, post.ai_summary
        )

    async def render_summary(self, post_id: int) -> str:
        post = await self._require_post(post_id)
        current = await self.settings.get_settings()
        return render_summary_html(current, post.ai_excerpt, post.ai_summary)


def get_post_summaries_service(
    service: Annotated[PostSummariesService, Depends(PostSummariesService)],
) -> PostSummariesService:
    """Dependency provider for the PostSummariesService."""
    return service

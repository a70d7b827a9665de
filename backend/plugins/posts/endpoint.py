from typing import Annotated

from fastapi import APIRouter, Depends, Path

from .models import (
    GenerateSummariesResponse,
    PostSummaries,
    RenderedContentResponse,
    SaveSummariesRequest,
)
from .service import PostSummariesService, get_post_summaries_service

router = APIRouter()

PostId = Annotated[int, Path(ge=1, description="ID of the post")]


@router.get(
    "/{post_id}/summaries",
    response_model=PostSummaries,
    summary="Get a post's AI excerpt and summary",
)
async def get_summaries(
    post_id: PostId,
    service: Annotated[PostSummariesService, Depends(get_post_summaries_service)],
):
    return await service.get_summaries(post_id)


@router.put(
    "/{post_id}/summaries",
    response_model=PostSummaries,
    summary="Save a post's AI excerpt and summary",
    description=(
        "Stores manually edited texts. Markup is stripped; an omitted field "
        "removes the stored value. The excerpt is copied into the post excerpt "
        "when syncing is enabled."
    ),
)
async def save_summaries(
    post_id: PostId,
    request: SaveSummariesRequest,
    service: Annotated[PostSummariesService, Depends(get_post_summaries_service)],
):
    return await service.save_summaries(post_id, request)


@router.post(
    "/{post_id}/generate",
    response_model=GenerateSummariesResponse,
    summary="Generate a post's AI excerpt and summary",
    description=(
        "Calls the selected model twice, excerpt first. If either call fails "
        "nothing is stored and the error is returned."
    ),
)
async def generate_summaries(
    post_id: PostId,
    service: Annotated[PostSummariesService, Depends(get_post_summaries_service)],
):
    return await service.generate_summaries(post_id)


@router.get(
    "/{post_id}/render",
    response_model=RenderedContentResponse,
    summary="Post content with the summary box prepended",
)
async def render_content(
    post_id: PostId,
    service: Annotated[PostSummariesService, Depends(get_post_summaries_service)],
):
    return RenderedContentResponse(post_id=post_id, html=await service.render_content(post_id))


@router.get(
    "/{post_id}/summary-html",
    response_model=RenderedContentResponse,
    summary="The summary box alone",
)
async def render_summary(
    post_id: PostId,
    service: Annotated[PostSummariesService, Depends(get_post_summaries_service)],
):
    return RenderedContentResponse(post_id=post_id, html=await service.render_summary(post_id))

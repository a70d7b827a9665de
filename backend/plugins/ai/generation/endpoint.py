"""Text generation API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from utils.exceptions import GenerationFailedError

from .models import GenerationErrorResponse, GenerationRequest, GenerationResponse
from .service import GenerationService, get_generation_service

router = APIRouter()


@router.post(
    "",
    response_model=GenerationResponse,
    summary="Generate text from content",
    description=(
        "Strips markup from the content, prefixes the prompt template and sends "
        "it to the selected model. Provider failures are returned as errors "
        "carrying their kind."
    ),
    responses={
        400: {"model": GenerationErrorResponse},
        502: {"model": GenerationErrorResponse},
        504: {"model": GenerationErrorResponse},
    },
)
async def generate_endpoint(
    request: GenerationRequest,
    service: Annotated[GenerationService, Depends(get_generation_service)],
):
    result = await service.generate_request(request)
    if result.error is not None:
        raise GenerationFailedError(result.error.kind.value, result.error.message)
    return GenerationResponse(text=result.text, model_id=request.model_id)

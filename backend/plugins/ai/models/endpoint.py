"""Model catalog API endpoints."""

from typing import List

from fastapi import APIRouter, HTTPException

from .models import ModelEntry, ModelLabelsResponse
from .registry import get_model, labels_only, list_models

router = APIRouter()


@router.get(
    "",
    response_model=List[ModelEntry],
    summary="List available models",
    description="Returns every selectable model, in display order, with its provider.",
)
def list_models_endpoint():
    return list_models()


@router.get(
    "/labels",
    response_model=ModelLabelsResponse,
    summary="Model labels for selectors",
)
def model_labels_endpoint():
    return ModelLabelsResponse(labels=labels_only())


@router.get(
    "/{model_id}",
    response_model=ModelEntry,
    summary="Get a single model",
)
def get_model_endpoint(model_id: str):
    entry = get_model(model_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Model '{model_id}' not found")
    return entry

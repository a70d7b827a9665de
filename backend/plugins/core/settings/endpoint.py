from typing import Annotated

from fastapi import APIRouter, Depends

from .models import SettingsResponse, SettingsUpdate, SummariesSettings
from .service import SettingsService, get_settings_service

router = APIRouter()


@router.get(
    "",
    response_model=SettingsResponse,
    summary="Get the current settings",
    description="API keys are masked; use `configured_providers` to see which keys are set.",
)
async def get_settings(
    service: Annotated[SettingsService, Depends(get_settings_service)],
):
    return service.to_response(await service.get_settings())


@router.put(
    "",
    response_model=SettingsResponse,
    summary="Update settings",
    description=(
        "Partially updates the settings. Invalid values fall back to their "
        "defaults; a masked API key sent back unchanged keeps the stored key."
    ),
)
async def update_settings(
    update: SettingsUpdate,
    service: Annotated[SettingsService, Depends(get_settings_service)],
):
    return service.to_response(await service.update_settings(update))


@router.get(
    "/defaults",
    response_model=SummariesSettings,
    summary="Get the default settings",
)
def get_default_settings():
    return SummariesSettings()

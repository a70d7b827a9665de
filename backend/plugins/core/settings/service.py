from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pydantic import ValidationError
from structlog import get_logger

from plugins.ai.models.registry import label_for
from utils.dependencies import get_database, get_redis_client

from .models import (
    API_KEY_FIELDS,
    SettingsResponse,
    SettingsUpdate,
    SummariesSettings,
)
from .repository import SettingsRepository

logger = get_logger(__name__)


def mask_api_key(api_key: str, visible_chars: int = 4) -> str:
    """
    Mask an API key for safe display.

    Example: ``"sk-abcdefghijk"`` -> ``"sk-****hijk"``
    """
    if not api_key:
        return ""
    if len(api_key) <= visible_chars:
        return "*" * len(api_key)
    prefix = api_key[:3] if len(api_key) > 3 else ""
    suffix = api_key[-visible_chars:]
    hidden_len = len(api_key) - len(prefix) - visible_chars
    return f"{prefix}{'*' * max(hidden_len, 4)}{suffix}"


class SettingsService:
    """
    Settings snapshot reads and writes, with Redis in front of MongoDB.

    Cache failures are logged and fall through to the database; the database
    stays the source of truth.
    """

    CACHE_KEY = "settings:ai_summaries"
    CACHE_TTL_SECONDS = 300

    def __init__(self, repository: SettingsRepository, redis_client: redis.Redis):
        self.repository = repository
        self.redis = redis_client

    async def get_settings(self) -> SummariesSettings:
        try:
            cached = await self.redis.get(self.CACHE_KEY)
            if cached is not None:
                logger.debug("Settings cache hit")
                return SummariesSettings.model_validate_json(cached)
        except redis.RedisError as e:
            logger.error("Redis error on GET", key=self.CACHE_KEY, error=str(e))
        except ValidationError as e:
            logger.warning("Discarding unreadable cached settings", error=str(e))

        logger.debug("Settings cache miss")
        stored = await self.repository.load()
        current = SummariesSettings.model_validate(stored or {})

        try:
            await self.redis.set(
                self.CACHE_KEY, current.model_dump_json(), ex=self.CACHE_TTL_SECONDS
            )
        except redis.RedisError as e:
            logger.error("Redis error on SET", key=self.CACHE_KEY, error=str(e))

        return current

    async def update_settings(self, update: SettingsUpdate) -> SummariesSettings:
        """Merges `update` into the current settings, validates, persists and invalidates the cache."""
        current = await self.get_settings()
        changes = update.model_dump(exclude_none=True)
        for name in API_KEY_FIELDS:
            # A masked key echoed back from a GET means "unchanged".
            current_key = getattr(current, name)
            if current_key and changes.get(name) == mask_api_key(current_key):
                del changes[name]
        merged = SummariesSettings.model_validate(
            {**current.model_dump(mode="json"), **changes}
        )
        await self.repository.save(merged.model_dump(mode="json"))

        try:
            await self.redis.delete(self.CACHE_KEY)
            logger.info("Settings cache invalidated", changed=sorted(changes))
        except redis.RedisError as e:
            logger.error("Redis error on DELETE", key=self.CACHE_KEY, error=str(e))

        return merged

    @staticmethod
    def to_response(current: SummariesSettings) -> SettingsResponse:
        masked = current.model_copy(
            update={name: mask_api_key(getattr(current, name)) for name in API_KEY_FIELDS}
        )
        return SettingsResponse(
            settings=masked,
            configured_providers=[p for p, key in current.credentials().items() if key],
            model_label=label_for(current.ai_model),
            excerpt_prompt=current.excerpt_prompt,
            summary_prompt=current.summary_prompt,
        )


async def get_settings_collection(
    database: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
) -> AsyncIOMotorCollection:
    return database["settings"]


async def get_settings_repository(
    collection: Annotated[AsyncIOMotorCollection, Depends(get_settings_collection)],
) -> SettingsRepository:
    return SettingsRepository(collection)


async def get_settings_service(
    repository: Annotated[SettingsRepository, Depends(get_settings_repository)],
    redis_client: Annotated[redis.Redis, Depends(get_redis_client)],
) -> SettingsService:
    return SettingsService(repository, redis_client)

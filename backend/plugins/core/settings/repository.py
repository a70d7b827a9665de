from datetime import datetime, timezone
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError
from structlog import get_logger
from utils.exceptions import ServiceError

logger = get_logger(__name__)


class SettingsRepository:
    """Handles database operations for the single settings document."""

    DOCUMENT_ID = "ai_summaries"

    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    async def load(self) -> dict[str, Any] | None:
        """Returns the stored settings fields, or None if nothing was saved yet."""
        try:
            doc = await self._collection.find_one({"_id": self.DOCUMENT_ID})
        except PyMongoError as e:
            logger.error("DB error loading settings", error=str(e))
            raise ServiceError("Database error while loading settings.") from e
        if not doc:
            return None
        doc.pop("_id", None)
        doc.pop("updated_at", None)
        return doc

    async def save(self, values: dict[str, Any]) -> None:
        """Replaces the stored settings with `values`."""
        try:
            await self._collection.replace_one(
                {"_id": self.DOCUMENT_ID},
                {**values, "updated_at": datetime.now(timezone.utc)},
                upsert=True,
            )
        except PyMongoError as e:
            logger.error("DB error saving settings", error=str(e))
            raise ServiceError("Database error while saving settings.") from e

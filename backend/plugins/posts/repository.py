from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from structlog import get_logger

from utils.dependencies import get_database
from utils.exceptions import ServiceError

from .models import PostDB

log = get_logger(__name__)


class PostRepository:
    """Repository for posts and the AI metadata stored on them."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    async def get_post(self, post_id: int) -> PostDB | None:
        try:
            doc = await self._collection.find_one({"post_id": post_id})
        except PyMongoError as e:
            log.error("DB error fetching post", error=str(e), post_id=post_id)
            raise ServiceError("Database error while fetching the post.") from e
        return PostDB.model_validate(doc) if doc else None

    async def update_summaries(
        self, post_id: int, ai_excerpt: str | None, ai_summary: str | None
    ) -> bool:
        """Stores both values; a None value removes the field. Returns False if no post matched."""
        to_set = {}
        to_unset = {}
        for field, value in (("ai_excerpt", ai_excerpt), ("ai_summary", ai_summary)):
            if value is None:
                to_unset[field] = ""
            else:
                to_set[field] = value

        update = {}
        if to_set:
            update["$set"] = to_set
        if to_unset:
            update["$unset"] = to_unset

        try:
            result = await self._collection.update_one({"post_id": post_id}, update)
        except PyMongoError as e:
            log.error("DB error storing post summaries", error=str(e), post_id=post_id)
            raise ServiceError("Database error while storing summaries.") from e

        log.info(
            "Stored post summaries",
            post_id=post_id,
            excerpt_set=ai_excerpt is not None,
            summary_set=ai_summary is not None,
        )
        return result.matched_count > 0

    async def set_post_excerpt(self, post_id: int, excerpt: str) -> None:
        """Overwrites the post's native excerpt field."""
        try:
            await self._collection.update_one(
                {"post_id": post_id}, {"$set": {"excerpt": excerpt}}
            )
        except PyMongoError as e:
            log.error("DB error syncing post excerpt", error=str(e), post_id=post_id)
            raise ServiceError("Database error while syncing the post excerpt.") from e


async def get_posts_collection(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
) -> AsyncIOMotorCollection:
    """Dependency provider for the 'posts' collection."""
    return db["posts"]


def get_post_repository(
    collection: Annotated[AsyncIOMotorCollection, Depends(get_posts_collection)],
) -> PostRepository:
    """Dependency provider for the PostRepository."""
    return PostRepository(collection)

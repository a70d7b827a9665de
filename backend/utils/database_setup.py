import structlog
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

logger = structlog.get_logger(__name__)

INDEX_DEFINITIONS = {
    "posts": [
        {"keys": [("post_id", ASCENDING)], "options": {"unique": True}},
        {"keys": [("post_type", ASCENDING)], "options": {}},
    ],
}


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Creates the indexes in INDEX_DEFINITIONS if they don't exist.

    Idempotent; runs on every startup. A failure on one collection is logged
    and does not stop the others.
    """
    logger.info("Starting database index verification...")
    for collection_name, indexes in INDEX_DEFINITIONS.items():
        try:
            collection = db[collection_name]
            for index in indexes:
                keys = index["keys"]
                await collection.create_index(
                    keys,
                    name=f"{collection_name}_{'_'.join(k[0] for k in keys)}_idx",
                    **index.get("options", {}),
                )
            logger.info(
                "Indexes ensured for collection",
                collection=collection_name,
                count=len(indexes),
            )
        except PyMongoError as e:
            logger.error(
                "Failed to create indexes for collection",
                collection=collection_name,
                error=str(e),
            )
    logger.info("Database index verification complete.")

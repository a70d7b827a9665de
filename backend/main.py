from contextlib import asynccontextmanager

import structlog
import structlog.contextvars
from config import settings
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from plugins import init_plugins, list_plugin_metadata
from prometheus_fastapi_instrumentator import Instrumentator
from pymongo.errors import ConnectionFailure
from utils.database_setup import ensure_indexes
from utils.exceptions import GenerationFailedError, ServiceError
from utils.middleware import api_key_middleware, structured_logging_middleware
from utils.redis_client import close_redis_client, init_redis_client

from summaries_core.logging_config import setup_structlog
from summaries_core.tracing import setup_tracing

APP_VERSION = "0.1.0"
EXCLUDED_PLUGINS: list[str] = []

setup_structlog(
    json_logs=settings.json_logs,
    log_level=settings.log_level,
    service_name=settings.service_name,
    environment=settings.environment,
)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Connects to MongoDB and Redis on startup and disconnects on shutdown.
    Provider HTTP clients are created per call, so there is nothing to pool here.
    """
    setup_tracing(service_name=settings.service_name, service_version=APP_VERSION)
    HTTPXClientInstrumentor().instrument()
    logger.info("Application starting up...", service=settings.service_name)

    instrumentator.expose(app)
    logger.info("Prometheus metrics endpoint exposed at /metrics.")

    try:
        app.state.mongo_client = AsyncIOMotorClient(str(settings.mongodb_url))
        await app.state.mongo_client.admin.command("ping")
        logger.info("Successfully connected to MongoDB.")

        await ensure_indexes(app.state.mongo_client[settings.mongodb_database])
    except ConnectionFailure as e:
        logger.critical("Failed to connect to MongoDB on startup.", error=str(e))
        raise

    app.state.redis = await init_redis_client()
    logger.info("Successfully connected to Redis.")

    yield

    logger.info("Application shutting down...")
    app.state.mongo_client.close()
    logger.info("MongoDB connection closed.")

    await close_redis_client()
    logger.info("Redis connection closed.")


app = FastAPI(
    version=APP_VERSION,
    title="AI Summaries API",
    description="Generates, stores and renders AI excerpts and summaries for posts.",
    lifespan=lifespan,
)

FastAPIInstrumentor.instrument_app(app)

instrumentator = Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    excluded_handlers=["/metrics", "/health"],
)

instrumentator.instrument(app, metric_namespace="ai_summaries", metric_subsystem="backend")


@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError):
    logger.warning(
        "Service error occurred, returning HTTP response",
        detail=exc.detail,
        status_code=exc.status_code,
    )
    content = {"detail": exc.detail}
    if isinstance(exc, GenerationFailedError):
        content["kind"] = exc.kind
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("An unhandled exception occurred", error=str(exc))
    correlation_id = structlog.contextvars.get_contextvars().get(
        "correlation_id", "not-available"
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An internal server error occurred.",
            "error_id": correlation_id,
        },
    )


app.middleware("http")(api_key_middleware)
app.middleware("http")(structured_logging_middleware)

init_plugins(app, excluded_plugins=EXCLUDED_PLUGINS)


@app.get("/health", tags=["Health Check"], include_in_schema=False)
def health_check():
    return {"status": "ok"}


@app.get("/plugins", tags=["Health Check"], summary="List loaded plugins")
def plugins_info():
    return {"plugins": list_plugin_metadata()}

from pydantic import Field, MongoDsn, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """
    Process-level configuration loaded from environment variables.

    User-editable options (selected model, provider API keys, prompts,
    display style) are not here; they live in the settings store.
    """

    service_name: str = Field(default="ai-summaries", alias="SERVICE_NAME")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    json_logs: bool = Field(default=False, alias="JSON_LOGS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    api_key: str = Field(..., alias="API_KEY")

    llm_max_content_chars: int | None = Field(
        default=None, gt=0, alias="LLM_MAX_CONTENT_CHARS"
    )

    mongodb_url: MongoDsn = Field(..., alias="MONGODB_URL")
    mongodb_database: str = Field(default="ai_summaries", alias="MONGO_DATABASE")
    redis_url: RedisDsn = Field(..., alias="REDIS_URL")
    redis_password: str | None = Field(default=None, alias="REDIS_PASSWORD")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = AppConfig()

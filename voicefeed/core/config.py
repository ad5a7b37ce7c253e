from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="voicefeed-api", validation_alias="APP_NAME")
    app_env: str = Field(default="dev", validation_alias="APP_ENV")
    app_port: int = Field(default=8000, validation_alias="APP_PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    secret_key: str = Field(default="change-me", validation_alias="SECRET_KEY")

    database_url: str = Field(validation_alias="DATABASE_URL")
    redis_url: str = Field(validation_alias="REDIS_URL")

    feed_target_original_ratio: float = Field(default=0.6, validation_alias="FEED_TARGET_ORIGINAL_RATIO")
    feed_default_limit: int = Field(default=20, validation_alias="FEED_DEFAULT_LIMIT")
    feed_candidate_limit: int | None = Field(default=None, validation_alias="FEED_CANDIDATE_LIMIT")
    max_page_limit: int = Field(default=100, validation_alias="MAX_PAGE_LIMIT")

    discovery_default_limit: int = Field(default=20, validation_alias="DISCOVERY_DEFAULT_LIMIT")
    discovery_liked_sample: int = Field(default=50, validation_alias="DISCOVERY_LIKED_SAMPLE")
    discovery_creator_pool: int = Field(default=50, validation_alias="DISCOVERY_CREATOR_POOL")

    share_status_cache_ttl_seconds: int = Field(default=300, validation_alias="SHARE_STATUS_CACHE_TTL_SECONDS")

    @field_validator("feed_target_original_ratio")
    @classmethod
    def _check_ratio(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("FEED_TARGET_ORIGINAL_RATIO must be between 0 and 1")
        return value


settings = Settings()

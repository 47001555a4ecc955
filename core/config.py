from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Logo storage
    logos_dir: str = Field("logos", alias="LOGOS_DIR")

    # Conversion
    max_image_size: int = Field(2048, alias="MAX_IMAGE_SIZE")
    default_image_size: int = Field(256, alias="DEFAULT_IMAGE_SIZE")
    conversion_workers: int = Field(4, alias="CONVERSION_WORKERS")

    # HTTP caching (seconds)
    cache_max_age: int = Field(31536000, alias="CACHE_MAX_AGE")
    metadata_cache_max_age: int = Field(3600, alias="METADATA_CACHE_MAX_AGE")
    list_cache_max_age: int = Field(300, alias="LIST_CACHE_MAX_AGE")

    # Advisory per-identifier counters
    rate_limit_per_hour: int = Field(100, alias="RATE_LIMIT_PER_HOUR")
    redis_url: str | None = Field(None, alias="REDIS_URL")

    # CORS / Web
    allowed_origins: str = Field("*", alias="ALLOWED_ORIGINS")
    public_base_url: str | None = Field(None, alias="PUBLIC_BASE_URL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()

"""Application configuration using pydantic-settings."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost,http://127.0.0.1",
        validation_alias="CORS_ORIGINS",
    )
    # Browser extensions (bookmarklet / save-page extension) call the API from their own scheme
    cors_origin_regex: str = Field(
        default=r"^(chrome-extension|moz-extension)://.+$",
        validation_alias="CORS_ORIGIN_REGEX",
    )

    # Media files saved by the upload flow, named "<user_id>_<name>.<ext>"
    media_dir: Path = Field(default=Path("uploads/media"), validation_alias="MEDIA_DIR")
    media_url_prefix: str = Field(default="uploads/media/", validation_alias="MEDIA_URL_PREFIX")
    allowed_media_types_str: str = Field(
        default=(
            "audio/mpeg,audio/wav,audio/x-wav,audio/webm,"
            "video/mp4,video/webm,video/quicktime"
        ),
        validation_alias="ALLOWED_MEDIA_TYPES",
    )

    # Field length limits, bounded by the column widths in models/
    max_title_length: int = Field(default=500, ge=1, le=500, validation_alias="MAX_TITLE_LENGTH")
    max_tag_length: int = Field(default=100, ge=1, le=100, validation_alias="MAX_TAG_LENGTH")
    max_collection_name_length: int = Field(
        default=255, ge=1, le=255, validation_alias="MAX_COLLECTION_NAME_LENGTH",
    )
    min_password_length: int = Field(default=8, validation_alias="MIN_PASSWORD_LENGTH")

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def allowed_media_types(self) -> set[str]:
        """Parse comma-separated MIME allow-list into a set."""
        return {
            mime.strip().lower()
            for mime in self.allowed_media_types_str.split(",")
            if mime.strip()
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

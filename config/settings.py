"""
Centralized configuration for the knowledge reference service.

All settings are loaded from environment variables via .env file.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    # Knowledge base defaults
    default_chunk_size: int = Field(default=500, env="DEFAULT_CHUNK_SIZE")
    default_chunk_overlap: int = Field(default=50, env="DEFAULT_CHUNK_OVERLAP")
    default_rerank_model: str = Field(default="BAAI/bge-reranker-v2-m3", env="DEFAULT_RERANK_MODEL")
    placeholder_api_key: str = Field(default="secret", env="PLACEHOLDER_API_KEY")
    max_references: int = Field(default=6, ge=1, le=6, env="MAX_REFERENCES")

    # Local file storage
    storage_anchor: str = Field(default="CherryStudio", env="STORAGE_ANCHOR")
    file_link_host: str = Field(default="http://file", env="FILE_LINK_HOST")

    # Providers
    providers_file: Optional[str] = Field(default=None, env="PROVIDERS_FILE")

    # External services
    search_service_url: str = Field(default="http://localhost:3456", env="SEARCH_SERVICE_URL")
    rerank_timeout: Optional[float] = Field(default=None, env="RERANK_TIMEOUT")

    # Database
    database_url: Optional[str] = Field(default=None, env="DATABASE_URL")

    # API
    api_title: str = Field(default="Knowledge Reference API", env="API_TITLE")
    api_version: str = Field(default="1.0.0", env="API_VERSION")
    cors_origins: str = Field(default="*", env="CORS_ORIGINS")

    # Logging
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    debug: bool = Field(default=False, env="DEBUG")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def uses_database(self) -> bool:
        return bool(self.database_url)


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()

"""Configuration for the semantic store with pydantic-based settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChromaConfig(BaseSettings):
    """Configuration for ChromaDB connectivity."""

    model_config = SettingsConfigDict(
        env_prefix="CHROMADB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mode: str = Field(
        default="ephemeral",
        description="ChromaDB mode: 'client', 'persistent', or 'ephemeral'",
    )
    host: Optional[str] = Field(
        default=None, description="ChromaDB server host (for client mode)"
    )
    port: Optional[int] = Field(
        default=None, description="ChromaDB server port (for client mode)"
    )
    path: Optional[str] = Field(
        default=None, description="Persistent storage path (for persistent mode)"
    )

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: str) -> str:
        """Validate ChromaDB mode."""
        valid_modes = {"client", "persistent", "ephemeral"}
        if v not in valid_modes:
            raise ValueError(f"mode must be one of {valid_modes}, got {v}")
        return v

    @model_validator(mode="after")
    def validate_mode_requirements(self) -> "ChromaConfig":
        """Fill in connection defaults and check mode requirements."""
        if self.mode == "client":
            if not self.host:
                self.host = "localhost"
            if not self.port:
                self.port = 8000
        if self.mode == "persistent" and not self.path:
            raise ValueError("path is required when mode='persistent'")
        return self

    def is_client_mode(self) -> bool:
        return self.mode == "client"

    def is_persistent_mode(self) -> bool:
        return self.mode == "persistent"

    def is_ephemeral_mode(self) -> bool:
        return self.mode == "ephemeral"


class RedisConfig(BaseSettings):
    """Configuration for Redis connectivity."""

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: Optional[str] = Field(default=None, description="Redis connection URL")
    host: Optional[str] = Field(default=None, description="Redis server host")
    port: int = Field(default=6379, description="Redis server port")
    db: int = Field(default=0, ge=0, description="Redis database number")
    password: Optional[str] = Field(default=None, description="Redis password")

    def is_configured(self) -> bool:
        """Check if Redis is configured."""
        return self.url is not None or self.host is not None

    def is_url_based(self) -> bool:
        return self.url is not None


class StorageBackendConfig(BaseModel):
    """Configuration for record storage backend selection and settings.

    Attributes:
        backend_type: Type of storage backend ('memory' or 'redis')
        redis: Redis connection configuration (required if backend_type='redis')
        prefix: Key prefix for storage backend
    """

    backend_type: Literal["memory", "redis"] = Field(
        default="memory", description="Storage backend type: 'memory' or 'redis'"
    )
    redis: Optional[RedisConfig] = Field(
        default=None,
        description="Redis configuration (required if backend_type='redis')",
    )
    prefix: str = Field(
        default="semantic_store:", description="Key prefix for storage backend"
    )

    @model_validator(mode="after")
    def validate_redis_required(self) -> "StorageBackendConfig":
        """Ensure Redis config is provided when backend_type is redis."""
        if self.backend_type == "redis" and self.redis is None:
            # Auto-create from environment
            self.redis = RedisConfig()
            if not self.redis.is_configured():
                raise ValueError(
                    "Redis configuration required when backend_type='redis'. "
                    "Set REDIS_URL or REDIS_HOST environment variable."
                )
        return self


class VectorStoreConfig(BaseModel):
    """Configuration for vector store selection and settings.

    Attributes:
        store_type: Type of vector store ('chroma' or 'memory')
        chroma: ChromaDB configuration (used if store_type='chroma')
        collection_name: Name of the vector store collection
    """

    store_type: Literal["chroma", "memory"] = Field(
        default="chroma", description="Vector store type: 'chroma' or 'memory'"
    )
    chroma: Optional[ChromaConfig] = Field(
        default=None, description="ChromaDB configuration (used if store_type='chroma')"
    )
    collection_name: str = Field(
        default="semantic_search", description="Name of the vector store collection"
    )

    @model_validator(mode="after")
    def validate_chroma_required(self) -> "VectorStoreConfig":
        """Ensure Chroma config is provided when store_type is chroma."""
        if self.store_type == "chroma" and self.chroma is None:
            self.chroma = ChromaConfig()
        return self


class StoreConfig(BaseModel):
    """Configuration for the semantic store service.

    Attributes:
        collection_name: Name of the vector store collection
        recent_window_days: Window used by stats() to count recent entries
        type_listing_limit: Default page size when listing entries by content type
        storage: Record storage backend configuration
        vector_store: Vector store configuration
    """

    collection_name: str = Field(
        default="semantic_search",
        min_length=1,
        description="Name of the vector store collection",
    )
    recent_window_days: int = Field(
        default=7, gt=0, description="Window in days for counting recent entries"
    )
    type_listing_limit: int = Field(
        default=50,
        gt=0,
        le=1000,
        description="Default number of entries returned when listing by content type",
    )
    storage: Optional[StorageBackendConfig] = Field(
        default=None, description="Record storage backend configuration"
    )
    vector_store: Optional[VectorStoreConfig] = Field(
        default=None, description="Vector store configuration"
    )

    @model_validator(mode="after")
    def fill_backends(self) -> "StoreConfig":
        """Initialize backend configs that were not provided."""
        if self.storage is None:
            self.storage = StorageBackendConfig()
        if self.vector_store is None:
            self.vector_store = VectorStoreConfig(collection_name=self.collection_name)
        return self


class ApiSettings(BaseSettings):
    """Settings for the HTTP service, read from APP_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, gt=0, lt=65536, description="Bind port")
    log_level: str = Field(default="INFO", description="Root log level")
    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Deployment environment; production hides internal error details",
    )
    reload: bool = Field(default=False, description="Enable uvicorn auto-reload")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got {v}")
        return level

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


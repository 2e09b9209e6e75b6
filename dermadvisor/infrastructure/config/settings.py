"""
Configuration for the advisor service.

All settings can be overridden via environment variables with the DERMADVISOR_
prefix, or from a .env file. Provider credentials (OPENAI_API_KEY,
ANTHROPIC_API_KEY) are read by the provider SDKs directly.

Usage:
    from dermadvisor.infrastructure.config.settings import get_settings

    settings = get_settings()
    print(settings.mongodb_uri)
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service configuration"""

    model_config = SettingsConfigDict(
        env_prefix="DERMADVISOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_format: Literal["json", "console"] = Field(default="json", description="structlog renderer")
    service_name: str = Field(default="dermadvisor", description="Service name bound into every log entry")

    # API server
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=3000, description="API server port")

    # MongoDB
    mongodb_uri: str = Field(default="mongodb://localhost:27017", description="MongoDB connection string")
    database_name: str = Field(default="prod_data", description="Database holding catalog and checkpoints")
    products_collection: str = Field(default="products", description="Catalog collection")
    checkpoints_collection: str = Field(default="checkpoints", description="Thread checkpoint collection")
    vector_index_name: str = Field(default="vector_index", description="Atlas vector search index")
    text_key: str = Field(default="embedding_text", description="Catalog field holding the product summary")
    embedding_key: str = Field(default="embedding", description="Catalog field holding the vector")
    embedding_model: str = Field(default="text-embedding-ada-002", description="OpenAI embedding model")

    # Models
    chat_model: str = Field(default="gpt-4o-mini", description="OpenAI conversational model")
    chat_temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    vision_model: str = Field(default="claude-3-opus-20240229", description="Anthropic vision model")
    vision_enabled: bool = Field(default=True, description="Analyze uploaded images")

    # Turn executor
    recursion_limit: int = Field(default=15, ge=1, description="Maximum agent turns per request")
    recover_tool_errors: bool = Field(
        default=False,
        description="Return tool failures to the model as error results instead of aborting the request"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()

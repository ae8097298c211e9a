"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("cryptonews", description="Database name")
    user: str = Field("cryptonews", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = Field("gemini", description="LLM provider (gemini, openai, mock)")
    model: str = Field("gemini-2.0-flash", description="Model name")
    api_key_env: Optional[str] = Field("GEMINI_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    base_url: Optional[str] = Field(None, description="Base URL of an OpenAI-compatible API")
    temperature: float = Field(0.3, ge=0.0, le=2.0)
    timeout: Optional[float] = Field(None, description="Request timeout in seconds (client default if unset)")


class IngestionConfig(BaseModel):
    """Feed ingestion settings."""

    item_delay: float = Field(0.1, description="Pause between article writes (seconds)", ge=0.0)
    timeout: float = Field(30.0, description="Feed request timeout (seconds)", gt=0.0)
    max_content_chars: int = Field(4000, description="Stored content length cap", ge=100)
    user_agent: str = Field("cryptonews/0.1 (RSS aggregator)", description="HTTP User-Agent")


class AnnotationConfig(BaseModel):
    """AI annotation settings."""

    item_delay: float = Field(0.0, description="Pause between model calls (seconds)", ge=0.0)
    language: str = Field("Thai", description="Language the model must answer in")
    max_batch_content_chars: int = Field(10000, description="Stored batch content length cap", ge=100)


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    annotation: AnnotationConfig = Field(default_factory=AnnotationConfig)


class FeedFieldMap(BaseModel):
    """Where a feed keeps the fields that differ between outlets.

    ``content_field`` is a ``prefix:local`` XML name looked up in the raw
    document when ``rich_content`` is set. ``author_field`` and
    ``category_field`` are feedparser entry keys.
    """

    rich_content: bool = Field(False, description="Read content from the raw XML field")
    content_field: str = Field("content:encoded", description="Namespaced element holding HTML content")
    author_field: str = Field("author", description="Entry key holding the author")
    category_field: str = Field("tags", description="Entry key holding the category")

    @field_validator("content_field")
    @classmethod
    def validate_content_field(cls, v: str) -> str:
        """Require a prefix:local element name."""
        prefix, _, local = v.partition(":")
        if not prefix or not local:
            raise ValueError(f"content_field must look like 'prefix:local', got {v!r}")
        return v


class SourceConfig(BaseModel):
    """Source configuration from sources.yaml."""

    name: str = Field(..., description="Source name")
    url: str = Field(..., description="RSS feed URL")
    enabled: bool = Field(True, description="Whether source is enabled")
    fields: FeedFieldMap = Field(default_factory=FeedFieldMap)

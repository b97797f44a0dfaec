"""Environment-driven settings.

Values are read from OPENAPI_RAG_* environment variables or a local .env file.
CLI options override individual fields.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "ollama/mistral"
DEFAULT_EMBEDDING_MODEL = "ollama/mistral"


class Settings(BaseSettings):
    """Model backends, service limits and retrieval knobs."""

    model_config = SettingsConfigDict(env_prefix="OPENAPI_RAG_", env_file=".env", extra="ignore")

    model: str = DEFAULT_MODEL
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    # litellm falls back to the provider default, e.g. http://localhost:11434 for ollama/*
    api_base: str | None = None

    timeout: float = Field(default=120.0, gt=0, description="Seconds per embedding/generation call")
    max_tokens: int = Field(default=4000, ge=1)
    spec_timeout: float = Field(default=30.0, gt=0)

    # Heuristic defaults, tune per spec size
    retrieval_k: int = Field(default=8, ge=1)
    schema_cap: int = Field(default=10, ge=0)

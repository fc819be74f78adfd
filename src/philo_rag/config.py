"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    environment: str = Field(
        default="production",
        description="Deployment environment. 'development' enables the mock parser fallback.",
    )
    log_level: str = "INFO"

    # Embedding
    openai_api_key: str = Field(default="", description="OpenAI API key used for embeddings")
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = Field(
        default=1536,
        description="Vector width of the embedding columns in the database schema.",
    )

    # Storage
    storage_backend: str = Field(
        default="supabase",
        description="'supabase' for the hosted Postgres tables, 'memory' for local development.",
    )
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    documents_table: str = "documents_enhanced"
    feedback_table: str = "feedback"

    # Parsing / chunking defaults
    default_pdf_parser: str = "pdf-parse"
    default_splitter_type: str = "recursive"
    default_chunk_size: int = 5000
    default_chunk_overlap: int = 500

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def parser_fallback_enabled(self) -> bool:
        """Fall back to the mock parser on failure outside production."""
        return self.environment.lower() == "development"


# Singleton: import `settings` wherever needed.
settings = Settings()

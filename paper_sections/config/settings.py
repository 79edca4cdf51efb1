from __future__ import annotations

from typing import List, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
        env_prefix="PAPER_SECTIONS_"
    )

    # ------------------------------------------------------------------
    # External services
    # ------------------------------------------------------------------
    GROBID_URL: str = Field(
        default="http://localhost:8070",
        description="Base URL of the running Grobid service.",
    )

    GROBID_TIMEOUT: int = Field(
        default=120,
        description="Timeout in seconds for a single Grobid request.",
    )

    GOOGLE_API_KEY: Optional[SecretStr] = Field(
        default=None,
        description=(
            "API key for the Gemini generative-text service. "
            "Only required for the LLM step; extraction works without it."
        ),
    )

    LLM_MODEL_NAME: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model used to answer prompts over document sections.",
    )

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------
    MAX_TREE_DEPTH: int = Field(
        default=512,
        description=(
            "Deepest nesting level the text collector descends into. "
            "Anything below is skipped with a warning."
        ),
    )

    # ------------------------------------------------------------------
    # Web / runtime
    # ------------------------------------------------------------------
    MAX_UPLOAD_BYTES: int = Field(
        default=50 * 1024 * 1024,
        description="Largest PDF upload accepted by the HTTP API.",
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level for the web app and CLI.",
    )

    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware.",
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Singleton-style accessor so we only construct Settings once.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


settings = get_settings()

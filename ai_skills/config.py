"""Configuration management for the AI Skills extension."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Extension settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AI_SKILLS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Host storage (flat key-value JSON file when running outside the host)
    storage_path: Path = Field(default=Path.home() / ".ai-skills" / "storage.json")

    # Used when no skills folder has been configured yet
    default_skills_folder: Path = Field(default=Path.home() / ".claude" / "skills")

    # LLM provider: "openai" or "ollama"
    llm_provider: str = Field(default="openai")

    # OpenAI Configuration
    openai_api_key: Optional[str] = Field(default=None)
    openai_base_url: Optional[str] = Field(default=None)
    openai_chat_model: str = Field(default="gpt-4o-mini")
    openai_max_tokens: int = Field(default=64)

    # Ollama Configuration
    ollama_url: str = Field(default="http://localhost:11434")
    ollama_model: str = Field(default="llama3.1:8b")

    request_timeout: float = Field(default=30.0)

    # Logging
    log_level: str = Field(default="WARNING")


# Global settings instance
settings = Settings()

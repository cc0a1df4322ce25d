"""Referral assistant configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TERM_FILE = Path(__file__).parent / "data" / "disease_terms.json"


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    # Clinical term allow-list
    TERM_LIST_URL: str = "http://localhost:8000/api/disease-terms"
    TERM_LIST_TIMEOUT_SECONDS: float | None = None
    TERM_FILE_PATH: Path = DEFAULT_TERM_FILE

    MASKING_ENABLED: bool = True

    # LLM settings
    OPENAI_API_KEY: str = ""
    LLM_MODEL: str = "gpt-4.1-mini"
    CHAT_TEMPERATURE: float = 0.3
    CLEAN_TEXT_TEMPERATURE: float = 0.1
    GUIDELINES_DIR: Path = Path("markdown")

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    DEBUG: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()

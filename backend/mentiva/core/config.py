"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Mentiva Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://mentiva@localhost:5432/mentiva"
    openai_api_key: str | None = None
    completion_model: str = "gpt-4o"
    completion_max_tokens: int = 1024
    swap_max_tokens: int = 256
    completion_temperature: float = 0.7
    session_cookie_name: str = "mentiva_session"
    allowlist_enabled: bool = False
    default_lang: str = "en"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "mentiva"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()

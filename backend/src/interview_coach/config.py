from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Gemini (generateContent REST API)
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com"
    gemini_model: str = "gemini-2.0-flash"
    llm_temperature: float | None = None  # None = provider default
    llm_timeout: float = 60.0  # per HTTP request, seconds

    # Retry on rate limiting (429 / RESOURCE_EXHAUSTED / TOO_MANY_REQUESTS)
    retry_attempts: int = Field(default=4, ge=1)
    retry_min_delay: float = Field(default=0.5, ge=0.0)  # first backoff, seconds
    retry_max_delay: float = Field(default=6.0, ge=0.0)  # backoff ceiling, seconds
    retry_jitter: float = Field(default=0.2, ge=0.0)  # extra uniform(0, jitter)

    # Auth
    jwt_secret: str = "change-me-in-production-please-0000"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7

    # History storage
    data_dir: Path = Path("./data")
    history_limit: int = 50

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    @property
    def llm_configured(self) -> bool:
        return bool(self.gemini_api_key)


settings = Settings()

from pydantic_settings import BaseSettings
from pydantic import validator
from typing import Optional


# Leaving the remote URL at this value runs the roster from the local store.
PLACEHOLDER_API_URL = "YOUR_GOOGLE_APPS_SCRIPT_WEB_APP_URL_HERE"


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "Student Roster Sync"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Remote tabular endpoint (Google Apps Script web app)
    ROSTER_API_URL: str = PLACEHOLDER_API_URL
    ROSTER_REQUEST_TIMEOUT: int = 30
    ROSTER_MAX_RETRIES: int = 3
    ROSTER_RETRY_BASE_DELAY: float = 1.0

    # Polling
    ROSTER_POLL_INTERVAL_SECONDS: float = 20.0

    # Local store settings
    LOCAL_STORE_PATH: str = "./roster_store.json"
    LOCAL_STORE_KEY: str = "mockStudents"
    LOCAL_STORE_LATENCY_SECONDS: float = 0.5

    # Session bootstrap
    SESSION_IDENTITY: Optional[str] = None

    @validator("ROSTER_API_URL", pre=True)
    def strip_api_url(cls, v):
        if v is None:
            return PLACEHOLDER_API_URL
        return str(v).strip()

    @validator("ROSTER_MAX_RETRIES")
    def validate_max_retries(cls, v):
        if v < 0:
            raise ValueError("ROSTER_MAX_RETRIES must not be negative")
        return v

    @validator("ROSTER_POLL_INTERVAL_SECONDS")
    def validate_poll_interval(cls, v):
        if v <= 0:
            raise ValueError("ROSTER_POLL_INTERVAL_SECONDS must be positive")
        return v

    @validator("LOG_LEVEL")
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

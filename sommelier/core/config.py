from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_prefix="SOMMELIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    PROJECT_NAME: str = "Palate Sommelier"
    LOG_LEVEL: str = "INFO"

    # Tenant directory: "memory" or "file"
    DIRECTORY_BACKEND: str = "memory"
    DATA_DIR: str = "data"

    # Lookups and commits that exceed these surface as generic failures
    LOOKUP_TIMEOUT_SECONDS: float = 5.0
    COMMIT_TIMEOUT_SECONDS: float = 10.0

    # Session cache
    SESSION_DIR: str = "data/sessions"
    SESSION_KEY: str = "palate_sommelier_session"
    # None keeps sessions until logout
    SESSION_TTL_SECONDS: Optional[int] = None

settings = Settings()

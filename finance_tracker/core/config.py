# finance_tracker/core/config.py

from pathlib import Path
from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )

    # App Configuration
    APP_NAME: str = "Finance Tracker API"
    DEBUG: bool = False
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 5
    # Create tables on startup (development only; use Alembic elsewhere)
    AUTO_CREATE_TABLES: bool = True

    # JWT / Security Configuration
    SECRET_KEY: str
    # 14 days
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 20160

    # CORS Configuration
    FRONTEND_URL: str = "http://localhost:4200"
    CORS_ORIGINS: List[str] = []

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def is_sqlite(self) -> bool:
        """SQLite engines take no pool sizing options and need FK pragmas."""
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def allowed_origins(self) -> List[str]:
        origins = [self.FRONTEND_URL, *self.CORS_ORIGINS]
        return [o for o in dict.fromkeys(origins) if o]

# Create a global settings instance
settings = Settings()

from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./quizdesk.db"
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 10

    # Security
    CORS_ORIGINS: str = "*"

    # Submissions
    SUBMISSION_TIMEOUT_SECONDS: float = 10.0

    # Question authoring
    DEFAULT_QUESTION_TIME_LIMIT: int = 30
    DEFAULT_CORRECT_ORDER: List[int] = [1, 2, 3, 4]

    # Monitoring
    ENABLE_REQUEST_LOGGING: bool = True
    SLOW_REQUEST_THRESHOLD: float = 1.0
    VERY_SLOW_REQUEST_THRESHOLD: float = 5.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DIR: str = "logs"
    ENABLE_FILE_LOGGING: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def cors_origins(self) -> List[str]:
        return [i.strip() for i in self.CORS_ORIGINS.split(",") if i.strip()]


# Global settings instance
settings = Settings()

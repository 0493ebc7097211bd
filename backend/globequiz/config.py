from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Security
    JWT_SECRET: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    IS_LOCAL_DEVELOPMENT: bool = False

    # Neynar (Farcaster user lookup)
    NEYNAR_API_KEY: str = ""
    NEYNAR_API_URL: str = "https://api.neynar.com/v2"

    # Result store: "redis" or "database"
    STORE_BACKEND: str = "redis"
    REDIS_URL: str = ""
    REDIS_TIMEOUT_SECONDS: float = 5.0
    DATABASE_URL: str = "sqlite+aiosqlite:///./globequiz.sqlite3"

    # Quiz Configuration
    QUIZ_VERSION: str = "1"
    QUIZ_Q1_PROMPT: str = ""
    QUIZ_Q1_LAT: str = ""
    QUIZ_Q1_LNG: str = ""
    QUIZ_Q2_PROMPT: str = ""
    QUIZ_Q2_LAT: str = ""
    QUIZ_Q2_LNG: str = ""
    QUIZ_Q3_PROMPT: str = ""
    QUIZ_Q3_LAT: str = ""
    QUIZ_Q3_LNG: str = ""

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

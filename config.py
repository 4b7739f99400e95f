from functools import lru_cache
from typing import List

from fastapi import Request
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    # SQLite file next to the process, accessed through aiosqlite
    DATABASE_URL: str = "sqlite+aiosqlite:///./expense_tracker.db"

    # JWT Settings
    # No default: the service must not start with a committed key
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Security
    # Argon2 time cost
    PASSWORD_HASH_ROUNDS: int = 3

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with"""
    return request.app.state.settings

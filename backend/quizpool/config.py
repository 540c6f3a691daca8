from __future__ import annotations
import os
from pydantic import BaseModel

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "quizpool-api")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "QuizPool")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    # postgresql+asyncpg://... in deployment
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./quizpool.db")

    # Storage lifetime refreshed on every successful contest mutation
    storage_ttl_seconds: int = int(os.getenv("STORAGE_TTL_SECONDS", str(60 * 60 * 24 * 30)))

    # Identity tokens are issued by the wallet login service with this shared secret
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    jwt_alg: str = os.getenv("JWT_ALG", "HS256")

settings = Settings()

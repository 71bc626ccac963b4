import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List

env = os.getenv("APP_ENV", "development")
env_file = f".env.{env}"

class Settings(BaseSettings):
    app_env: str = env
    # postgresql+asyncpg://... in production, sqlite+aiosqlite:///... for dev/tests
    database_url: str = "sqlite+aiosqlite:///./healthcare.db"
    # CORS origins can be overridden via CORS_ORIGINS env var as a JSON list
    cors_origins: List[str] = Field(default=["http://localhost:5173"])

    # JWT configuration
    secret_key: str = "healthcare-app-secret-key"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 24 * 60

    # Server-side sessions
    session_cookie_name: str = "session"
    session_expire_minutes: int = 24 * 60

    # bcrypt work factor; tests lower it
    bcrypt_rounds: int = 12

    # Connection pool (ignored for SQLite)
    db_pool_size: int = 10
    db_max_overflow: int = 0
    db_pool_timeout: float = 30.0

    # create_all() at startup instead of relying on alembic
    auto_create_tables: bool = False

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=env_file,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def secure_cookie(self) -> bool:
        return self.app_env == "production"

settings = Settings()

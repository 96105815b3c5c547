"""Settings — every tunable comes from the environment (or a local .env).

Invariants:
    - get_settings() builds Settings once per process
    - database_url always names an async driver: the bare postgresql:// form
      handed out by hosting providers is rewritten to postgresql+asyncpg://

Design Decisions:
    - Defaults target the docker-compose database, so a fresh checkout runs
      without any configuration
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    database_url: str = "postgresql+asyncpg://huddle:huddle@db:5432/huddle"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    cors_origins: list[str] = ["http://localhost:5173"]
    # Identity is established upstream; this header names the acting user
    acting_user_header: str = "X-User-Id"

    log_level: str = "INFO"
    log_format: str = "json"  # or "text"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v):
        if isinstance(v, str) and v.startswith("postgresql://"):
            return "postgresql+asyncpg://" + v[len("postgresql://"):]
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()

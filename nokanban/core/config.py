from functools import lru_cache
from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Security
    pin_iterations: int = Field(
        default=100_000, ge=1, description="PBKDF2 iteration count for new PIN digests"
    )

    # Shared boards
    inactive_board_days: int = Field(
        default=30, ge=1, description="Shared boards idle for this many days are deleted"
    )

    # Rate limiting
    create_board_limit: int = Field(default=10, description="Board creations per window per IP")
    create_board_window_seconds: int = Field(default=15 * 60)
    board_mutation_limit: int = Field(default=100, description="Mutations per window per board/IP")
    board_mutation_window_seconds: int = Field(default=60)

    # Redis
    redis_host: str = Field(default="localhost")
    redis_port: int = Field(default=6379)
    redis_db: int = Field(default=0)
    redis_user: str = Field(default="default")
    redis_pass: str = Field(default="")

    # Database
    db_path: str = Field(default="./data/nokanban.db", description="Path to the shared board database")
    local_db_path: str = Field(default="./data/local.db", description="Path to the on-device board store")

    # Client
    api_base_url: str = Field(default="http://localhost:8787/api/v1")

    # App
    app_name: str = Field(default="nokanban")
    debug: bool = Field(default=False)

    @computed_field
    @property
    def redis_url(self) -> str:
        return f"redis://{self.redis_user}:{self.redis_pass}@{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @computed_field
    @property
    def db_url(self) -> str:
        return f"sqlite+aiosqlite:///{self.db_path}"

    @computed_field
    @property
    def local_db_url(self) -> str:
        return f"sqlite+aiosqlite:///{self.local_db_path}"

    @computed_field
    @property
    def db_directory(self) -> Path:
        return Path(self.db_path).parent


@lru_cache
def get_settings() -> Settings:
    return Settings()

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./dualcontrol.db"
    database_echo: bool = False
    sqlite_busy_timeout: int = 30  # seconds

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    # Logging
    log_level: str = "INFO"
    log_dir: str = "./logs"
    file_logging: bool = False

    # Listing
    default_page_size: int = 10
    max_page_size: int = 100

    # Seeding
    seed_default_users: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Allow extra env vars without raising validation errors
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()

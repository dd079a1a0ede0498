from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime.

    These settings are used for:
    - DB connection
    - Internal API key
    - Logging output
    - The local timezone that defines "today" and "this month"
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    APP_NAME: str = "Gym Attendance Analytics"
    APP_ENV: str = Field("local", description="Environment name: local/test/dev/stage/prod")

    LOG_LEVEL: str = Field("INFO", description="Root log level (DEBUG, INFO, WARNING, ...).")
    LOG_JSON: bool = Field(
        default=False,
        description="Render logs as JSON lines instead of the human console format.",
    )

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./gym_attendance.db",
        description="SQLAlchemy-compatible database URL",
    )

    INTERNAL_API_KEY: str | None = Field(
        default=None,
        description="API key required for hitting /internal endpoints",
    )

    LOCAL_TIMEZONE: str = Field(
        default="UTC",
        description=(
            "IANA timezone of the gym. Local midnight in this zone bounds the "
            "'today' and 'month' report windows."
        ),
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()

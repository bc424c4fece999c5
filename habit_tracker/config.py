from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = Field(
        "sqlite+aiosqlite:///./habit_tracker.db",
        description="SQLAlchemy async URL, e.g., postgresql+asyncpg://...",
    )

    # Empty key disables AI reminders and plans
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL_ID: str = "gemini-2.0-flash-exp"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_TIMEOUT_SECONDS: float = 30.0

    # Zone used for calendar-day keys and the reminder window
    USER_TIMEZONE: str = "UTC"

    # Gamification
    XP_PER_LEVEL: int = 200
    HABIT_COMPLETION_XP: int = 50
    SLEEP_LOG_XP: int = 10

    # Timers
    REMINDER_START_HOUR: int = 9
    REMINDER_END_HOUR: int = 21
    REMINDER_INTERVAL_MINUTES: int = 60
    CAROUSEL_INTERVAL_SECONDS: int = 5

    NOTIFICATION_TTL_SECONDS: float = 4.0

    @property
    def gemini_generate_url(self) -> str:
        return f"{self.GEMINI_BASE_URL.rstrip('/')}/models/{self.GEMINI_MODEL_ID}:generateContent"

settings = Settings()

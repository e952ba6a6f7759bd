# goal_tracker/core/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )

    # App Configuration
    APP_NAME: str = "Goal Tracker API"
    DEBUG: bool = False
    VERSION: str = "1.0.0"

    # Database Configuration
    DATABASE_URL: str = f"sqlite+aiosqlite:///{BASE_DIR / 'goal_tracker.db'}"

    # CORS Configuration
    FRONTEND_URL: str = "http://localhost:3000"

    # Goal engine tuning
    GOAL_SUGGESTION_LIMIT: int = 5
    MILESTONE_MAX_COUNT: int = 8
    INSIGHT_LOOKBACK_DAYS: int = 90
    ANALYSIS_MONTHS: int = 3

    # Optional: Environment
    ENVIRONMENT: str = "development"

    @property
    def is_sqlite(self) -> bool:
        """Check if we're running against a local SQLite database"""
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_supabase(self) -> bool:
        """Check if we're using Supabase database"""
        return any(d in self.DATABASE_URL for d in [
            "supabase.co",
            "supabase.com",
            "pooler.supabase",
        ])

# Create a global settings instance
settings = Settings()

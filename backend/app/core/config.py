"""
Application configuration and environment variables
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables"""

    # Database
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")
    HABITS_TABLE: str = os.getenv("HABITS_TABLE", "habits")
    COMPLETIONS_TABLE: str = os.getenv("COMPLETIONS_TABLE", "habit_completions")

    # Calendar days for client dates, completion events and habit
    # lifecycles are all computed in this timezone
    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "UTC")

    # Longest range a single summary request may span
    MAX_SUMMARY_DAYS: int = int(os.getenv("MAX_SUMMARY_DAYS", "366"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


# Create a global settings instance
settings = Settings()

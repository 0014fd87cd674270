"""
Configuration settings for the application
"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    DATABASE_URL: str = "sqlite:///./ticketing.db"

    # Scan window (event.scan.window.before.hours / event.scan.window.after.hours)
    EVENT_SCAN_WINDOW_BEFORE_HOURS: float = 2
    EVENT_SCAN_WINDOW_AFTER_HOURS: float = 2

    # Application
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:8000",
    ]

settings = Settings()

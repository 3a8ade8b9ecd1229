import os
from typing import TypedDict

from dotenv import load_dotenv

from .backend.client import DEFAULT_BASE_URL


class AppConfig(TypedDict):
    """Configuration for the application"""

    TIMESHEET_EMAIL: str
    TIMESHEET_PASSWORD: str
    TIMESHEET_API_BASE_URL: str
    TIMESHEET_API_TIMEOUT: float
    HOST: str
    PORT: int
    LOG_DIR: str


def load_config() -> AppConfig:
    """Load configuration from environment variables"""
    load_dotenv()

    required_vars = {
        "TIMESHEET_EMAIL": os.getenv("TIMESHEET_EMAIL"),
        "TIMESHEET_PASSWORD": os.getenv("TIMESHEET_PASSWORD"),
    }

    missing = [k for k, v in required_vars.items() if not v]
    if missing:
        raise OSError(f"Missing required environment variables: {', '.join(missing)}")

    return {
        **required_vars,
        "TIMESHEET_API_BASE_URL": os.getenv("TIMESHEET_API_BASE_URL", DEFAULT_BASE_URL),
        "TIMESHEET_API_TIMEOUT": float(os.getenv("TIMESHEET_API_TIMEOUT", "10")),
        "HOST": os.getenv("HOST", "127.0.0.1"),
        "PORT": int(os.getenv("PORT", "8080")),
        "LOG_DIR": os.getenv("LOG_DIR", "/data/logs"),
    }

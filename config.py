"""Application settings loaded from the environment."""

import os

from dotenv import load_dotenv

load_dotenv()

DEV_JWT_SECRET = "your-secret-key"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


class Settings:
    """Runtime configuration shared by the API modules."""

    APP_NAME = "Expense Insight API"
    VERSION = "1.0.0"
    ALGORITHM = "HS256"

    def __init__(self) -> None:
        self.APP_ENV = os.getenv("APP_ENV", "development").strip().lower()
        self.PORT = _env_int("PORT", 8000)
        self.DATABASE_URL = os.getenv(
            "DATABASE_URL", "sqlite:///./expense_insight.db"
        )
        self.JWT_SECRET = os.getenv("JWT_SECRET", DEV_JWT_SECRET)
        self.JWT_EXPIRES_MINUTES = _env_int("JWT_EXPIRES_MINUTES", 60 * 24 * 7)
        self.FRONTEND_URL = os.getenv("FRONTEND_URL", "*")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_DIR = os.getenv("LOG_DIR") or None
        if self.is_production and self.JWT_SECRET == DEV_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set when APP_ENV=production.")

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"


settings = Settings()

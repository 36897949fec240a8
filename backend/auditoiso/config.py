"""
Application configuration using environment variables.
"""
import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _split(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


@dataclass
class Settings:
    """Application settings."""
    APP_NAME: str = os.getenv("APP_NAME", "AuditoIso")
    PORT: int = int(os.getenv("PORT", "4000"))

    # Storage
    DATA_DIR: str = os.getenv("DATA_DIR", os.path.join(os.getcwd(), "data"))

    # Auth
    JWT_SECRET: str = os.getenv("JWT_SECRET", "jwt_dev_secret")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_HOURS: int = int(os.getenv("JWT_EXPIRES_HOURS", "8"))
    DEFAULT_ADMIN_EMAIL: str = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.com")
    DEFAULT_ADMIN_PASSWORD: str = os.getenv("DEFAULT_ADMIN_PASSWORD", "password")

    # Reports
    REPORT_TIMEZONE: str = os.getenv("REPORT_TIMEZONE", "")  # empty = server local time
    REPORT_OWNER_CHECK: bool = os.getenv("REPORT_OWNER_CHECK", "false").lower() == "true"

    # Audits
    SCORE_MISMATCH_POLICY: str = os.getenv("SCORE_MISMATCH_POLICY", "warn").lower()  # warn | reject

    # CORS
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "*")
    CORS_ORIGINS: List[str] = field(default_factory=lambda: _split(os.getenv("FRONTEND_URL", "*")))

settings = Settings()

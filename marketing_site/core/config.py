# marketing_site/core/config.py

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    PROJECT_NAME: str = "Activ Cleaning Website"
    VERSION: str = "1.0"
    PORT: int = 4000
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./data/contact_messages.db"

    # Static pages
    STATIC_DIR: Path = BASE_DIR / "static"

    # Recipients
    CONTACT_RECIPIENT: str = "office@activcleaning.ro"
    PRIVACY_CONTACT: str = "privacy@activcleaning.ro"
    CONTACT_CC: str | None = None
    CONTACT_BCC: str | None = None

    # Abuse protection
    RATE_LIMIT_MAX: int = 10
    MAX_BODY_BYTES: int = 1024 * 1024
    ALLOWED_ORIGINS: str = ""

    # Retention (days, 0 disables the purge for that table)
    RETENTION_DAYS: int = 730
    GDPR_REQUEST_RETENTION_DAYS: int = 365
    PURGE_INTERVAL_HOURS: int = 24

    # Mail Configuration
    SMTP_HOST: str | None = None
    SMTP_PORT: int | None = None
    SMTP_USER: str | None = None
    SMTP_PASS: str | None = None
    SMTP_VERIFY_ON_STARTUP: bool = True
    MAIL_FROM_NAME: str = "Activ Cleaning Website"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        env_ignore_empty=True,
    )

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def smtp_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_PORT and self.SMTP_USER and self.SMTP_PASS)


@lru_cache
def get_settings() -> Settings:
    return Settings()

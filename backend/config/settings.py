# backend/config/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List, Optional
from functools import lru_cache

class Settings(BaseSettings):
    # Application Settings
    APP_NAME: str = "Line Subscription Manager"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_V1_STR: str = "/api/v1"

    # Database Settings
    DATABASE_URL: str = "sqlite:///./lines.db"

    # JWT Settings
    JWT_SECRET_KEY: str = "jwt-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    ADMIN_TOKEN_EXPIRE_MINUTES: int = 720  # 12 hours
    SESSION_IDLE_MINUTES: int = 5  # non-admin sessions

    # Credential allow-list (JSON file of bcrypt hashes)
    CREDENTIALS_FILE: str = "credentials.json"

    # Renewal Settings
    RENEWAL_REFERENCE_YEAR: int = 2025  # year assumed for "5-Aug" style dates
    PROVIDER_CYCLE_DAYS: Dict[str, int] = {"etisalat": 28}
    DEFAULT_CYCLE_DAYS: int = 30
    DEFAULT_TIMEZONE: str = "Africa/Cairo"

    # Customer Settings
    BULK_INSERT_LIMIT: int = 20
    ALLOWED_LINE_TYPES: List[int] = [20, 40, 50, 60]
    DEFAULT_LINE_TYPE: int = 40
    ALLOWED_PROVIDERS: List[str] = ["orange", "etisalat", "we"]
    PAID_STATUSES: List[str] = ["دفع", "paid"]
    RENEWED_STATUSES: List[str] = ["تم", "done"]
    DEFAULT_PAYMENT_STATUS: str = "لم يدفع"
    DEFAULT_RENEWAL_STATUS: str = "لم يتم"
    NO_CHANGE_SENTINEL: str = "no-change"

    # Display Settings
    NOT_SPECIFIED_LABEL: str = "غير محدد"
    DISPLAY_ARABIC_DIGITS: bool = True

    # Pagination Settings
    DEFAULT_PAGE_SIZE: int = 100
    MAX_PAGE_SIZE: int = 1000

    # CORS Settings
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080"]

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = "logs/app.log"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=True
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()

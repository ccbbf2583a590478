"""Application configuration settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Boxoffice API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "boxoffice"
    DATABASE_URL: str | None = None

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str | None = None
    REDIS_DB: int = 0
    REDIS_SOCKET_TIMEOUT_SECONDS: float = 2.0

    # Payment gateway
    RAZORPAY_KEY_ID: str = ""
    RAZORPAY_KEY_SECRET: str = ""
    PAYMENT_CURRENCY: str = "INR"
    MIN_ORDER_AMOUNT_MINOR: int = 100  # paise
    MERCHANT_NAME: str = "Vybb Live"
    CHECKOUT_THEME_COLOR: str = "#7c3aed"
    RECEIPT_PREFIX: str = "vybb"
    ORDER_PLATFORM_TAG: str = "vybb-live"
    GATEWAY_SCRIPT_URL: str = "https://checkout.razorpay.com/v1/checkout.js"

    # Checkout settings
    MAX_SEATS_PER_BOOKING: int = 4
    SEATS_PER_TABLE: int = 4
    PAYMENT_LOCK_TIMEOUT_SECONDS: int = 60

    # Email
    RESEND_API_KEY: str = ""
    RESEND_API_URL: str = "https://api.resend.com/emails"
    TICKET_EMAIL_FROM: str = "VYBB LIVE <tickets@vybb.live>"
    CHECKIN_EMAIL_FROM: str = "VYBB LIVE <checkin@vybb.live>"
    EMAIL_TIMEOUT_SECONDS: float = 10.0
    PUBLIC_BASE_URL: str = "http://localhost:3000"

    @property
    def database_url(self) -> str:
        """Get async database URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+aiomysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def redis_url(self) -> str:
        """Get Redis URL."""
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

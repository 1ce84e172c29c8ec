"""
Core settings and environment variables for the Safe Bharat API.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Safe Bharat API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Set by the serverless host. When present the app is exported, not served.
    VERCEL: Optional[str] = None

    # CORS - single allowed origin ("*" allows any)
    FRONTEND_URL: str = "*"

    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON

    # Mock DB mode for local development and tests without Firebase credentials
    USE_MOCK_DB: bool = False
    MOCK_DB_PATH: str = "./mock_db.json"

    # Bearer tokens
    JWT_SECRET: str = "safebharat-development-secret-change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60

    # Stand-in login pair used by the fixed credential verifier
    LOGIN_USERNAME: str = "user"
    LOGIN_PASSWORD: str = "pass"

    # Rate limiting (fixed window, all routes)
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
    RATE_LIMIT_MAX_REQUESTS: int = 100
    RATE_LIMIT_STATUS_CODE: int = 429
    RATE_LIMIT_TRUST_FORWARDED: bool = False

    # Response cache for read routes
    CACHE_TTL_SECONDS: int = 5 * 60

    # Geocoding (city validation for the resource directory)
    # - GEOCODING_PROVIDER: "nominatim" (default, no API key) or "google"
    # - GOOGLE_MAPS_API_KEY: optional; only used when provider is "google"
    GEOCODING_PROVIDER: str = "nominatim"
    GOOGLE_MAPS_API_KEY: Optional[str] = None
    GEOCODING_COUNTRY: str = "India"
    GEOCODING_TIMEOUT_SECONDS: float = 3.0
    GEOCODING_USER_AGENT: str = "safe-bharat-api/1.0"

    # News feed relay
    NEWS_FEED_URL: str = "https://pib.gov.in/rss.aspx"
    NEWS_SOURCE_NAME: str = "PIB India"
    NEWS_TIMEOUT_SECONDS: float = 5.0
    NEWS_MAX_ITEMS: int = 10

    # SMS gateway (Twilio). Notification is skipped unless all three are set.
    TWILIO_SID: Optional[str] = None
    TWILIO_AUTH_TOKEN: Optional[str] = None
    TWILIO_PHONE: Optional[str] = None
    SMS_TIMEOUT_SECONDS: float = 5.0

    # Uploads
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    # Room for multipart boundaries and the text fields sent alongside a file
    MAX_FORM_OVERHEAD_BYTES: int = 64 * 1024

    @property
    def max_request_body_bytes(self) -> int:
        return self.MAX_UPLOAD_BYTES + self.MAX_FORM_OVERHEAD_BYTES

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"  # Allow extra env vars to prevent crashes


# Global settings instance
settings = Settings()

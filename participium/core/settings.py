"""
Core settings and environment variables for Participium.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Optional

DEFAULT_SESSION_SECRET = "participium-dev-secret-change-me"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Participium"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # CORS - Frontend URLs allowed to access this API (comma separated)
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173"

    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON

    # In-memory Firestore for local development and tests
    USE_MOCK_DB: bool = False

    # Sessions (signed JWT, sent as bearer token or http-only cookie)
    SESSION_SECRET: str = DEFAULT_SESSION_SECRET
    SESSION_ALGORITHM: str = "HS256"
    SESSION_EXPIRE_MINUTES: int = 60 * 24
    SESSION_COOKIE_NAME: str = "participium_session"

    # Citizen e-mail verification
    EMAIL_VERIFICATION_MINUTES: int = 30

    # Geocoding (Nominatim)
    GEOCODING_USER_AGENT: str = "Participium-Report-App/1.0"
    GEOCODING_TIMEOUT_SECONDS: float = 5.0
    # Reject report coordinates that fall outside the municipality polygon
    ENFORCE_CITY_BOUNDARIES: bool = True

    # Telegram account linking
    TELEGRAM_BOT_USERNAME: str = "participium_bot"
    TELEGRAM_TOKEN_MINUTES: int = 15

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

    @property
    def cors_origins_list(self):
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def uses_default_session_secret(self) -> bool:
        return self.SESSION_SECRET == DEFAULT_SESSION_SECRET


# Global settings instance
settings = Settings()

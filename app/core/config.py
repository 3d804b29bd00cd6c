"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str
    PROFILE_MEDIA_BUCKET: str = "profile-media"

    # Identity assertion (JWT)
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    # Single-use tokens
    VERIFICATION_TOKEN_TTL_HOURS: int = 24
    PASSWORD_RESET_TTL_HOURS: int = 1

    # Resend
    RESEND_API_KEY: str = ""
    EMAIL_FROM_ADDRESS: str = "Creator Connect <noreply@creatorconnect.com>"
    EMAIL_MAX_ATTEMPTS: int = 3
    EMAIL_RETRY_BACKOFF_SECONDS: float = 0.5

    # Links embedded in outgoing email
    APP_URL: str = "http://localhost:3000"

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"


settings = Settings()  # type: ignore[call-arg]

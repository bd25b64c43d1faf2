"""Application configuration with environment variables."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment ("dev" or "production"); NODE_ENV accepted for parity with the web client
    ENV: str = Field("dev", validation_alias=AliasChoices("ENV", "NODE_ENV"))

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Demo deployments behave like dev for auth (role override allowed)
    DEMO_MODE: bool = Field(
        False, validation_alias=AliasChoices("DEMO_MODE", "REACT_APP_DEMO_MODE")
    )

    # Database
    DATABASE_URL: str = "sqlite:///./namingops.db"

    # Session Token (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 8

    # Google Sign-In
    GOOGLE_CLIENT_ID: str = Field(
        "", validation_alias=AliasChoices("GOOGLE_CLIENT_ID", "REACT_APP_GOOGLE_CLIENT_ID")
    )

    # Domain restriction (comma-separated)
    ALLOWED_EMAIL_DOMAINS: str = ""

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Token Encryption (for the stored Gemini API key)
    FERNET_KEY: str = ""

    # Gemini
    GEMINI_API_KEY: str = ""  # Fallback when no key is stored in gemini config
    GEMINI_MODEL: str = "gemini-1.5-pro-latest"
    GEMINI_TIMEOUT_SECONDS: float = 60.0

    # Return a built-in form configuration when none is active (dev only)
    DEV_DEFAULT_FORM_CONFIG: bool = False

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_API: int = 120
    RATE_LIMIT_AI: int = 20
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def allowed_domains_list(self) -> list[str]:
        """Parse ALLOWED_EMAIL_DOMAINS into lowercase list."""
        if not self.ALLOWED_EMAIL_DOMAINS:
            return []
        return [d.strip().lower() for d in self.ALLOWED_EMAIL_DOMAINS.split(",") if d.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets

    @property
    def is_dev(self) -> bool:
        return self.ENV in ("dev", "development")

    @property
    def is_dev_mode(self) -> bool:
        """Dev or demo: role override header and dev login are allowed."""
        return self.is_dev or self.DEMO_MODE


settings = Settings()

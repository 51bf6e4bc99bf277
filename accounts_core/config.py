"""Configuration management using pydantic-settings."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_path: str = "./data/accounts.db"
    # Seconds to wait for a competing writer before giving up with "database is locked"
    database_timeout: float = 5.0
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Flask session signing (holds the OAuth2 state between redirect and callback)
    secret_key: str = "change-me-in-production-use-env-var"

    # JWT Configuration
    jwt_secret_key: str = "change-me-in-production-use-env-var"
    jwt_algorithm: str = "HS256"
    jwt_expiry_hours: int = 24

    # Bcrypt work factor (higher = more secure but slower)
    # Tests drop this to 4 for faster execution
    bcrypt_work_factor: int = 12

    # Google OAuth2 Configuration
    # The Google client is only registered when a client id is present
    google_client_id: str | None = None
    google_client_secret: str | None = None
    google_discovery_url: str = "https://accounts.google.com/.well-known/openid-configuration"

    # Where the browser lands after a successful Google sign-in (?token=<jwt> is appended)
    oauth2_success_redirect: str = "/oauth2/redirect"

    # What to do when a Google assertion matches an email owned by a local account:
    # "upgrade" converts the account to Google sign-in, "reject" refuses with a conflict
    oauth2_relink_policy: Literal["upgrade", "reject"] = "upgrade"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False
    )


settings = Settings()

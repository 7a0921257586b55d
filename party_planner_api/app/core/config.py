"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration; in a production deployment
you should at least override ``SECRET_KEY`` and the credentials of the
external providers (Google, SendGrid, Cloudinary).
"""

import os
from dataclasses import dataclass

from fastapi import Request


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Party Planner API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    # Session tokens are valid for one hour.
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Path or connection string for the SQLite database.  If a relative
    # path is provided, it will be resolved relative to the project root
    # by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "party_planner.db")
    db_timeout_seconds: float = float(os.getenv("DB_TIMEOUT_SECONDS", "5"))
    request_timeout_seconds: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

    # Status code used when an event or party is full.  Older clients
    # expect 408; new deployments should keep the default 409.
    capacity_exceeded_status: int = int(os.getenv("CAPACITY_EXCEEDED_STATUS", "409"))

    # Google sign-in.  When ``google_client_id`` is empty the audience of
    # incoming ID tokens is not checked.
    google_client_id: str = os.getenv("GOOGLE_CLIENT_ID", "")
    google_tokeninfo_url: str = os.getenv("GOOGLE_TOKENINFO_URL", "https://oauth2.googleapis.com/tokeninfo")

    # SendGrid e-mail delivery
    email_api_key: str = os.getenv("EMAIL_API_KEY", "")
    email_sender: str = os.getenv("EMAIL_SENDER", "")
    email_api_url: str = os.getenv("EMAIL_API_URL", "https://api.sendgrid.com/v3/mail/send")

    # Cloudinary signed uploads
    cloud_name: str = os.getenv("CLOUD_NAME", "")
    cloud_api_key: str = os.getenv("CLOUD_API_KEY", "")
    cloud_api_secret: str = os.getenv("CLOUD_API_SECRET", "")

    outbound_timeout_seconds: float = float(os.getenv("OUTBOUND_TIMEOUT_SECONDS", "10"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables should
# be set before importing this module.
settings = Settings()


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the app was built with."""
    return getattr(request.app.state, "settings", settings)

"""Module: config."""

from pydantic_settings import BaseSettings


# Centralized runtime configuration loaded from environment variables.
class Settings(BaseSettings):
    # Primary SQLAlchemy connection string for the backend database.
    database_url: str
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Shared secret for trusted backend-to-backend callers (voice agent).
    service_api_key: str | None = None

    # Firebase service account used by the identity gateway.
    firebase_project_id: str | None = None
    firebase_client_email: str | None = None
    firebase_private_key: str | None = None

    # WhatsApp messaging provider (WALI).
    wali_api_url: str | None = None
    wali_api_key: str | None = None
    wali_instance_id: str = "4ceedd94-5ce3-4a55-8faf-12f0037df7f4"

    # Agent data-processing API.
    agent_api_url: str | None = None
    agent_api_key: str | None = None

    http_timeout_seconds: float = 10.0

    # Configure pydantic-settings to also load values from local .env file.
    class Config:
        env_file = ".env"


# Global settings instance imported by app modules at runtime.
settings = Settings()

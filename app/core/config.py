"""
Application settings for the Attendance Tracker Service.

All values are read from environment variables (or a local .env file).
"""

from datetime import time

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service configuration."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore"
    )

    # Application
    APP_NAME: str = "attendance-tracker-service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./attendance.db"
    DATABASE_ECHO: bool = False

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    # Redis
    REDIS_ENABLED: bool = True
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_SOCKET_TIMEOUT: float = 2.0
    STATS_CACHE_TTL_SECONDS: int = 300

    # Kafka
    KAFKA_ENABLED: bool = True
    KAFKA_BOOTSTRAP_SERVERS: str = "localhost:9092"
    KAFKA_CLIENT_ID: str = "attendance-tracker-service"

    # Security
    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str | None = None
    JWT_ISSUER: str | None = None

    # Attendance policy
    LATE_CUTOFF_TIME: str = "09:00"  # HH:MM, late is strictly after
    GEOFENCE_ENFORCED: bool = False
    ATTENDANCE_HISTORY_LIMIT: int = 10

    # Invitations and password reset
    INVITATION_TTL_DAYS: int = 7
    PASSWORD_RESET_TOKEN_TTL_MINUTES: int = 60
    BOOTSTRAP_ADMIN_EMAIL: str | None = None

    @field_validator("LATE_CUTOFF_TIME")
    @classmethod
    def validate_cutoff(cls, value: str) -> str:
        try:
            time.fromisoformat(value)
        except ValueError as e:
            raise ValueError("LATE_CUTOFF_TIME must be in HH:MM format") from e
        return value

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def late_cutoff(self) -> time:
        return time.fromisoformat(self.LATE_CUTOFF_TIME)


settings = Settings()

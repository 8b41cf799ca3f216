# /checkin/config/settings.py

from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Deployment
    environment: str = Field(default="production", env="ENVIRONMENT")
    api_version: str = "v1"

    cors_allowed_origins: List[str] = Field(default_factory=list)

    # Typing simulation (milliseconds)
    typing_ms_per_char: int = 15
    typing_max_ms: int = 1500
    typing_settle_ms: int = 300
    image_typing_ms: int = 400

    # When False the HTTP surface returns bot messages immediately and the
    # client animates them using the typing hints in the response.
    server_side_pacing: bool = False

    # Sessions
    max_attachments: int = 4
    session_timeout_minutes: int = 120

    # Owner that gets an active copy of the default script at startup, if set
    default_owner_id: Optional[str] = None

    # Root log level; defaults to DEBUG in development and INFO elsewhere
    log_level: Optional[str] = None

    # ---------------- Validators ---------------- #

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def parse_cors_allowed_origins(cls, v):
        """
        Handle both string (comma-separated) and list formats for cors_allowed_origins.
        """
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("typing_ms_per_char", "typing_max_ms", "typing_settle_ms", "image_typing_ms")
    @classmethod
    def delays_must_not_be_negative(cls, v):
        if v < 0:
            raise ValueError("Typing delays cannot be negative")
        return v

    @field_validator("max_attachments")
    @classmethod
    def attachments_must_be_positive(cls, v):
        if v < 1:
            raise ValueError("MAX_ATTACHMENTS must be at least 1")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

"""
Configuration settings for the ChatSurfer test server
"""
from typing import Annotated, List
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import Field, field_validator
import json


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # API Configuration
    API_VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="development")

    # Listener
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=80, ge=0, le=65535)

    # Logging
    LOG_LEVEL: str = Field(default="DEBUG")
    LOG_JSON: bool = Field(default=False)

    # CORS Settings
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(default=["*"])

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from JSON string if needed"""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not JSON, treat as comma-separated list
                return [origin.strip() for origin in v.split(",")]
        return v

    # Canned data
    CLASSIFICATION: str = Field(default="UNCLASSIFIED")
    DOMAIN_ID: str = Field(default="chatsurferxmppunclass")
    ROOM_NAME: str = Field(default="Test room")
    SEARCH_KEYWORD: str = Field(default="Antediluvian", min_length=1)

    # WebSocket push loop
    WS_PUSH_INTERVAL: float = Field(default=1.0, gt=0)  # seconds between frames
    WS_SENDER: str = Field(default="Austin")
    MAX_SEED: int = Field(default=100000, gt=0)

    # Interactive API docs (/docs, /openapi.json)
    ENABLE_DOCS: bool = Field(default=False)

    # Observability
    ENABLE_METRICS: bool = Field(default=True)
    OTEL_ENABLED: bool = Field(default=False)
    OTEL_ENDPOINT: str = Field(default="http://localhost:4317")
    OTEL_SERVICE_NAME: str = Field(default="chatsurfer-test-server")

    @field_validator("SEARCH_KEYWORD")
    @classmethod
    def keyword_is_single_token(cls, v: str) -> str:
        """The marker must survive first-token search unchanged"""
        if len(v.split()) != 1:
            raise ValueError("SEARCH_KEYWORD must be a single whitespace-free token")
        return v


#!/usr/bin/env python3
import os
from functools import lru_cache
from typing import Any, Dict, List, Literal
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_PATH = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=f"{BASE_PATH}/.env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        env_nested_delimiter="__"
    )

    # Environment
    ENVIRONMENT: Literal["dev", "pro"] = "dev"
    PROJECT_NAME: str = "Local NotebookLM"
    LOG_LEVEL: str = "INFO"

    # Backend selection: True serves canned answers, False talks to the RAG backend
    DEMO_MODE: bool = True
    API_BASE_URL: str = "http://localhost:8000/api/v1"
    REQUEST_TIMEOUT_SECS: float = 120.0
    HEALTH_REFRESH_SECS: float = 30.0

    # Demo latency (seconds)
    DEMO_CHAT_LATENCY_MIN_S: float = 1.0
    DEMO_CHAT_LATENCY_MAX_S: float = 2.0
    DEMO_HEALTH_LATENCY_S: float = 0.3
    DEMO_LIST_LATENCY_S: float = 0.2
    DEMO_INDEX_LATENCY_S: float = 3.0
    DEFAULT_FOLDER_PATH: str = "~/Documents/Research"

    # CORS
    CORS_ALLOWED_ORIGINS: List[str] = [
        "http://127.0.0.1:8000",
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    CORS_EXPOSE_HEADERS: List[str] = ["X-Request-ID"]

    # FastAPI
    FASTAPI_API_V1_PATH: str = "/api/v1"
    FASTAPI_DOCS_ENABLED: bool = True

    @model_validator(mode="before")
    @classmethod
    def check_env(cls, values: Any) -> Dict[str, Any]:
        """Validate and modify settings based on environment."""
        if not isinstance(values, dict):
            return values

        if values.get("ENVIRONMENT") == "pro":
            values["FASTAPI_DOCS_ENABLED"] = False
        return values

    @model_validator(mode="after")
    def check_latency(self) -> "Settings":
        if self.DEMO_CHAT_LATENCY_MIN_S < 0 or self.DEMO_CHAT_LATENCY_MAX_S < self.DEMO_CHAT_LATENCY_MIN_S:
            raise ValueError(
                "DEMO_CHAT_LATENCY_MIN_S must be >= 0 and <= DEMO_CHAT_LATENCY_MAX_S"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()

# Global config instance
settings = get_settings()

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ModelStatus(BaseModel):
    llm: str
    embedding: str
    llm_available: bool
    embedding_available: bool


class ServiceStatus(BaseModel):
    ollama: Optional[str] = None
    chromadb: Optional[str] = None
    models: ModelStatus


class DatabaseStatus(BaseModel):
    document_count: int
    total_chunks: Optional[int] = None


class SystemStatus(BaseModel):
    # The backend reports these pre-formatted, e.g. "16.0"
    model_config = ConfigDict(coerce_numbers_to_str=True)

    ram_used_gb: str
    ram_total_gb: str
    ram_percent: str


class HealthReport(BaseModel):
    """
    Health check result. An unhealthy backend may report only its status, so
    services and database are required only when status is "healthy".
    """
    status: str
    services: Optional[ServiceStatus] = None
    database: Optional[DatabaseStatus] = None
    system: SystemStatus = Field(
        default_factory=lambda: SystemStatus(ram_used_gb="0", ram_total_gb="0", ram_percent="0")
    )

    @model_validator(mode="after")
    def check_healthy_details(self) -> "HealthReport":
        if self.healthy and (self.services is None or self.database is None):
            raise ValueError("a healthy report must include services and database")
        return self

    @property
    def healthy(self) -> bool:
        return self.status == "healthy"

    @property
    def models_available(self) -> bool:
        if self.services is None:
            return False
        models = self.services.models
        return models.llm_available and models.embedding_available

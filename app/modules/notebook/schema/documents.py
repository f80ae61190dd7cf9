from pydantic import BaseModel, Field
from typing import List, Optional


class DocumentInfo(BaseModel):
    filename: str
    file_type: str
    chunk_count: int
    file_size: Optional[int] = None
    indexed_at: Optional[str] = None


class DocumentListing(BaseModel):
    documents: List[DocumentInfo] = Field(default_factory=list)
    total: int
    page: int = 1
    limit: int = 100


class IndexRequest(BaseModel):
    folder_path: str
    recursive: bool = True
    file_types: Optional[List[str]] = None


class IndexReport(BaseModel):
    """Result of indexing a folder. status is "success" or "partial" in practice."""
    status: str
    folder_path: Optional[str] = None
    indexed_files: int
    failed_files: int
    total_chunks: Optional[int] = None
    processing_time: float
    errors: List[str] = Field(default_factory=list)

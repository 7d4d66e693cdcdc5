"""Pydantic request/response schemas for the FastAPI endpoints."""

from pydantic import BaseModel, Field

from src.classification.document_type import DocumentType
from src.extraction.metadata import FieldSource


class ClassificationResponse(BaseModel):
    """Winning document type and its confidence."""

    document_type: DocumentType
    label: str
    confidence: int = Field(ge=0, le=95)
    scores: dict[str, int]


class AnalysisResponse(BaseModel):
    """Classification and extracted metadata for a document."""

    success: bool
    document_id: str
    classification: ClassificationResponse
    metadata: dict[str, str | int | float]
    provenance: dict[str, FieldSource]
    text: str
    page_count: int = 1
    processing_time_ms: float


class TextRequest(BaseModel):
    """Already-recognised document text."""

    text: str


class DocumentTypeInfo(BaseModel):
    """Information about a supported document type."""

    name: DocumentType
    label: str
    fields: list[str]


class DocumentTypesResponse(BaseModel):
    """Response schema listing supported document types."""

    document_types: list[DocumentTypeInfo]


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool

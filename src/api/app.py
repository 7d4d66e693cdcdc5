"""FastAPI application for document classification and extraction.

Provides REST endpoints to analyse uploaded images and PDFs, classify
already-recognised text, export metadata, and report health.
"""

import shutil
import time
import uuid
from typing import Annotated, Literal

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from src.output.exporters import export
from src.pipeline import DocumentAnalysis, DocumentAnalyzer
from src.utils.config import load_config
from src.utils.exceptions import AcquisitionError
from src.utils.logger import get_logger

from .schemas import (
    AnalysisResponse,
    ClassificationResponse,
    DocumentTypeInfo,
    DocumentTypesResponse,
    HealthResponse,
    TextRequest,
)

logger = get_logger(__name__)

VERSION = "1.0.0"

app = FastAPI(
    title="Document Classification API",
    description="Classify OCR'd documents and extract type-specific metadata",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ALLOWED_CONTENT_TYPES = {
    "image/png",
    "image/jpeg",
    "image/tiff",
    "application/pdf",
    "application/octet-stream",
}

_DOCUMENT_TYPES = [
    DocumentTypeInfo(
        name="invoice",
        label="Invoice",
        fields=[
            "VendorName",
            "InvoiceNumber",
            "InvoiceDate",
            "DueDate",
            "Subtotal",
            "TaxableAmount",
            "TaxRate",
            "TaxAmount",
            "TotalAmount",
            "Currency",
            "PaymentTermsDays",
        ],
    ),
    DocumentTypeInfo(name="id_card", label="ID Card", fields=["DateOfBirth", "IdNumber"]),
    DocumentTypeInfo(name="certificate", label="Certificate", fields=["RecipientName"]),
    DocumentTypeInfo(name="form", label="Form", fields=["Email", "Phone"]),
]


def _get_analyzer() -> DocumentAnalyzer:
    """Build a document analyzer from the current configuration."""
    return DocumentAnalyzer(load_config())


def _to_response(analysis: DocumentAnalysis, start_time: float) -> AnalysisResponse:
    classification = analysis.classification
    return AnalysisResponse(
        success=True,
        document_id=str(uuid.uuid4()),
        classification=ClassificationResponse(
            document_type=classification.document_type,
            label=classification.label,
            confidence=classification.confidence,
            scores={str(k): v for k, v in classification.scores.items()},
        ),
        metadata=analysis.metadata.to_dict(),
        provenance=dict(analysis.metadata.provenance),
        text=analysis.text,
        page_count=analysis.page_count,
        processing_time_ms=(time.time() - start_time) * 1000,
    )


async def _analyze_upload(file: UploadFile) -> DocumentAnalysis:
    if file.content_type and file.content_type not in _ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {file.content_type}",
        )

    content = await file.read()
    try:
        return _get_analyzer().analyze(content, file.filename or "document")
    except AcquisitionError as exc:
        logger.error("Acquisition failed: %s", exc)
        raise HTTPException(
            status_code=422, detail="OCR or PDF processing failed"
        ) from exc


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health status."""
    return HealthResponse(
        status="healthy",
        version=VERSION,
        tesseract_available=shutil.which("tesseract") is not None,
    )


@app.get("/document-types", response_model=DocumentTypesResponse)
async def list_document_types() -> DocumentTypesResponse:
    """List the document types the classifier can recognise."""
    return DocumentTypesResponse(document_types=_DOCUMENT_TYPES)


@app.post("/classify", response_model=AnalysisResponse)
async def classify_text(request: TextRequest) -> AnalysisResponse:
    """Classify already-recognised text and extract its metadata."""
    start_time = time.time()
    analysis = _get_analyzer().analyze_text(request.text)
    return _to_response(analysis, start_time)


@app.post("/extract", response_model=AnalysisResponse)
async def extract_document(
    file: Annotated[UploadFile, File(...)],
) -> AnalysisResponse:
    """Recognise, classify and extract an uploaded image or PDF.

    Args:
        file: Uploaded document file (PNG, JPEG, TIFF, or PDF).

    Returns:
        Aggregated text, classification, metadata and provenance.
    """
    start_time = time.time()
    try:
        analysis = await _analyze_upload(file)
    except HTTPException:
        raise
    except Exception as exc:
        logger.error("Extraction failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return _to_response(analysis, start_time)


@app.post("/extract/export", response_class=PlainTextResponse)
async def export_document(
    file: Annotated[UploadFile, File(...)],
    fmt: Annotated[Literal["json", "csv"], Query(alias="format")] = "json",
) -> PlainTextResponse:
    """Recognise an uploaded document and return its metadata as JSON or CSV."""
    analysis = await _analyze_upload(file)
    media_type = "application/json" if fmt == "json" else "text/csv"
    return PlainTextResponse(export(analysis.metadata, fmt), media_type=media_type)

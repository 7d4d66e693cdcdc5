"""Exceptions raised by the document acquisition pipeline.

Classification and extraction are total over arbitrary text and define
no errors of their own; only acquiring page text from images and PDFs
can fail.

Exception hierarchy:
    DocumentProcessingError
    └── AcquisitionError
        └── AcquisitionCancelledError
"""

from typing import Any


class DocumentProcessingError(Exception):
    """Base exception for document processing failures.

    Args:
        message: Human-readable error message.
        details: Optional additional context for logging.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class AcquisitionError(DocumentProcessingError):
    """Raised when page text cannot be acquired for a whole document.

    Covers OCR failures, unreadable images, and PDF parse or render
    failures. Any single page failing aborts the document.
    """


class AcquisitionCancelledError(AcquisitionError):
    """Raised when an in-flight acquisition was superseded by a newer one."""

    def __init__(self, filename: str, generation: int) -> None:
        super().__init__(
            f"Acquisition of '{filename}' was cancelled",
            {"filename": filename, "generation": generation},
        )

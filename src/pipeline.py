"""End-to-end document analysis.

Page acquisition, classification and extraction chained together. A
document either yields text, classification and metadata together, or
the acquisition error; there is no partial result.
"""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from src.classification.classifier import ClassificationResult, classify
from src.extraction.dispatcher import ExtractionDispatcher
from src.extraction.metadata import MetadataRecord
from src.ocr.cancellation import CancellationToken
from src.ocr.document_processor import DocumentProcessor
from src.utils.config import AppConfig
from src.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DocumentAnalysis:
    """Aggregated text, classification and metadata for one document."""

    source_file: str
    page_count: int
    text: str
    classification: ClassificationResult
    metadata: MetadataRecord


class DocumentAnalyzer:
    """Runs acquisition, classification and extraction for documents.

    Args:
        config: Application configuration object.
        dispatcher: Extraction dispatcher; defaults to the built-in
            extractors.
    """

    def __init__(
        self,
        config: AppConfig,
        dispatcher: ExtractionDispatcher | None = None,
    ) -> None:
        self.config = config
        self.processor = DocumentProcessor(config)
        self.dispatcher = dispatcher or ExtractionDispatcher()

    def analyze(
        self,
        source: Path | bytes,
        filename: str = "document",
        on_progress: Callable[[int], None] | None = None,
        token: CancellationToken | None = None,
    ) -> DocumentAnalysis:
        """Acquire, classify and extract a document.

        Raises:
            AcquisitionError: If the document's text cannot be acquired.
        """
        document = self.processor.process(source, filename, on_progress, token)
        return self.analyze_text(
            document.combined_text,
            source_file=document.source_file,
            page_count=document.page_count,
        )

    def analyze_text(
        self,
        text: str,
        source_file: str = "text",
        page_count: int = 1,
    ) -> DocumentAnalysis:
        """Classify and extract already-recognised text. Never raises."""
        classification = classify(text)
        metadata = self.dispatcher.dispatch(classification.document_type, text)
        logger.info(
            "%s: %s (%d%%), %d field(s)",
            source_file,
            classification.label,
            classification.confidence,
            len(metadata) - 1,
        )
        return DocumentAnalysis(
            source_file=source_file,
            page_count=page_count,
            text=text,
            classification=classification,
            metadata=metadata,
        )

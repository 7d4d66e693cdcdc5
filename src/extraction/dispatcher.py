"""Routes classified text to the matching type extractor."""

from typing import Protocol

from src.classification.document_type import DocumentType
from src.utils.logger import get_logger

from .certificate import CertificateExtractor
from .form import FormExtractor
from .id_card import IdCardExtractor
from .invoice import InvoiceExtractor
from .metadata import MetadataBuilder, MetadataRecord

logger = get_logger(__name__)


class Extractor(Protocol):
    document_type: DocumentType

    def extract(self, text: str) -> MetadataRecord: ...


class ExtractionDispatcher:
    """Maps each document type to exactly one extractor.

    The type is normalised once, here, so callers may pass a member or
    any spelling of it (``"Invoice"``, ``"ID Card"``, ``"id_card"``).
    Unknown or unmapped types yield a record holding only
    ``DocumentType``; dispatch never raises.

    Args:
        extractors: Replacement extractors, e.g. with other heuristics.
    """

    def __init__(self, extractors: list[Extractor] | None = None) -> None:
        if extractors is None:
            extractors = [
                InvoiceExtractor(),
                IdCardExtractor(),
                CertificateExtractor(),
                FormExtractor(),
            ]
        self.extractors: dict[DocumentType, Extractor] = {
            e.document_type: e for e in extractors
        }

    def dispatch(self, document_type: DocumentType | str | None, text: str) -> MetadataRecord:
        doc_type = DocumentType.parse(document_type)
        extractor = self.extractors.get(doc_type)
        if extractor is None:
            logger.debug("No extractor for type %r", document_type)
            return MetadataBuilder(DocumentType.UNKNOWN).build()

        record = extractor.extract(text or "")
        logger.info("Extracted %d field(s) for %s", len(record) - 1, doc_type.label)
        return record


_DEFAULT_DISPATCHER = ExtractionDispatcher()


def extract_metadata(document_type: DocumentType | str | None, text: str) -> MetadataRecord:
    """Extract metadata with the default extractors."""
    return _DEFAULT_DISPATCHER.dispatch(document_type, text)

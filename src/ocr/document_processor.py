"""Page acquisition pipeline.

Turns an image or a multi-page PDF into a single ordered text stream,
recognising pages strictly one after another and reporting weighted
progress for the whole document.
"""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from src.utils.config import AppConfig
from src.utils.exceptions import AcquisitionError
from src.utils.logger import get_logger

from .cancellation import CancellationToken
from .pdf_handler import PDFHandler
from .progress import ProgressAggregator
from .tesseract_engine import TesseractEngine

logger = get_logger(__name__)

_PDF_MAGIC = b"%PDF"


@dataclass(frozen=True)
class PageText:
    """Text recognised from one page image."""

    page_number: int
    text: str


@dataclass(frozen=True)
class DocumentResult:
    """Acquired text for a complete document."""

    source_file: str
    page_count: int
    pages: list[PageText]
    combined_text: str
    is_pdf: bool = False


class DocumentProcessor:
    """Acquires the aggregated OCR text of a document.

    A single image is recognised once and its text returned unchanged.
    A PDF is rendered to page images, each page is recognised in order,
    and page texts are joined with a leading newline per page. Any
    failure aborts the whole document.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.pdf_handler = PDFHandler(
            scale=config.pdf.render_scale,
            base_dpi=config.pdf.base_dpi,
        )
        self.ocr_engine = TesseractEngine(
            tesseract_cmd=config.ocr.tesseract_cmd,
            default_lang=config.ocr.default_lang,
            psm=config.ocr.psm,
        )

    def process(
        self,
        source: Path | bytes,
        filename: str = "document",
        on_progress: Callable[[int], None] | None = None,
        token: CancellationToken | None = None,
    ) -> DocumentResult:
        """Acquire the text of a document from a file path or bytes.

        Args:
            source: Path to a document file, or raw file bytes.
            filename: Display name for the source document.
            on_progress: Receives overall progress in [0, 100].
            token: Checked between pages; a cancelled token stops the run.

        Returns:
            The document's page texts and aggregated text.

        Raises:
            AcquisitionError: If reading, rendering, or recognising any
                page fails, or the token was cancelled.
        """
        logger.info("Acquiring text for document: %s", filename)
        data, is_pdf = self._read_source(source)

        if is_pdf:
            images = self.pdf_handler.render(data)
        else:
            images = [data]

        progress = ProgressAggregator(len(images), on_progress)
        pages: list[PageText] = []
        for index, image in enumerate(images):
            if token is not None:
                token.raise_if_cancelled(filename)
            text = self.ocr_engine.recognize(
                image,
                lang=self.config.ocr.default_lang,
                on_progress=progress.for_page(index),
            )
            pages.append(PageText(page_number=index + 1, text=text))

        if token is not None:
            token.raise_if_cancelled(filename)

        if is_pdf:
            combined_text = "".join("\n" + page.text for page in pages)
        else:
            combined_text = pages[0].text

        logger.info("Acquired %d page(s) from %s", len(pages), filename)
        return DocumentResult(
            source_file=filename,
            page_count=len(pages),
            pages=pages,
            combined_text=combined_text,
            is_pdf=is_pdf,
        )

    def _read_source(self, source: Path | bytes) -> tuple[bytes, bool]:
        """Load raw bytes and decide whether the source is a PDF.

        Bytes are sniffed for the PDF magic number; paths are judged by
        their suffix.

        Raises:
            AcquisitionError: If the path cannot be read.
        """
        if isinstance(source, bytes):
            return source, source[:4] == _PDF_MAGIC

        path = Path(source)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise AcquisitionError(f"Cannot read document: {path}") from exc
        return data, path.suffix.lower() == ".pdf"

"""PDF rasterisation collaborator.

Renders every page of a PDF, in document order, to a PNG image that
the OCR collaborator can consume.
"""

import io

from pdf2image import convert_from_bytes
from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError
from pdf2image.pdf2image import pdfinfo_from_bytes

from src.utils.exceptions import AcquisitionError
from src.utils.logger import get_logger

logger = get_logger(__name__)

_PDF_ERRORS = (
    PDFInfoNotInstalledError,
    PDFPageCountError,
    PDFSyntaxError,
    OSError,
    ValueError,
)


class PDFHandler:
    """Renders PDF pages to PNG images for OCR.

    Args:
        scale: Render scale relative to the PDF's native 72 DPI.
        base_dpi: Native PDF resolution the scale applies to.
    """

    def __init__(self, scale: float = 2.0, base_dpi: int = 72) -> None:
        self.scale = scale
        self.dpi = round(base_dpi * scale)

    def render(self, pdf_bytes: bytes) -> list[bytes]:
        """Render all pages of a PDF.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PNG-encoded page images, one per page, in document order.

        Raises:
            AcquisitionError: If the bytes are not a valid PDF or a page
                cannot be rendered.
        """
        try:
            pil_images = convert_from_bytes(pdf_bytes, dpi=self.dpi)
        except _PDF_ERRORS as exc:
            raise AcquisitionError(f"PDF rendering failed: {exc}") from exc

        pages: list[bytes] = []
        for pil_image in pil_images:
            buf = io.BytesIO()
            pil_image.save(buf, format="PNG")
            pages.append(buf.getvalue())

        logger.info("Rendered PDF to %d page images at %d DPI", len(pages), self.dpi)
        return pages

    def page_count(self, pdf_bytes: bytes) -> int:
        """Get the number of pages in a PDF without rendering it.

        Raises:
            AcquisitionError: If the PDF cannot be inspected.
        """
        try:
            info = pdfinfo_from_bytes(pdf_bytes)
        except _PDF_ERRORS as exc:
            raise AcquisitionError(f"PDF inspection failed: {exc}") from exc
        count = info["Pages"]
        logger.debug("PDF has %d pages", count)
        return count

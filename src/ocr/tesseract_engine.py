"""Tesseract OCR collaborator.

Treats Tesseract as a black box: image bytes in, recognised text out,
with a progress callback for the caller.
"""

import io
from collections.abc import Callable

import pytesseract
from PIL import Image, UnidentifiedImageError

from src.utils.exceptions import AcquisitionError
from src.utils.logger import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[int], None]


class TesseractEngine:
    """Wrapper around Tesseract for plain-text recognition.

    pytesseract runs Tesseract as a subprocess and exposes no incremental
    progress, so ``recognize`` reports 0 when recognition starts and 100
    once it has completed.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        default_lang: Default OCR language code.
        psm: Tesseract page segmentation mode.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        default_lang: str = "eng",
        psm: int = 3,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.default_lang = default_lang
        self.psm = psm

    def recognize(
        self,
        image_bytes: bytes,
        lang: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        """Recognise the text in an encoded image.

        Args:
            image_bytes: Encoded image (PNG, JPEG, TIFF, ...).
            lang: OCR language code. Defaults to the engine default.
            on_progress: Called with non-decreasing values in [0, 100].

        Returns:
            Recognised text; an empty string when nothing was recognised.

        Raises:
            AcquisitionError: If the image cannot be decoded or Tesseract
                fails.
        """
        lang = lang or self.default_lang
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise AcquisitionError(f"Unreadable image: {exc}") from exc

        if on_progress is not None:
            on_progress(0)
        try:
            text = pytesseract.image_to_string(
                image, lang=lang, config=f"--psm {self.psm}"
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            raise AcquisitionError(f"OCR failed: {exc}") from exc
        if on_progress is not None:
            on_progress(100)

        text = text or ""
        logger.debug("OCR recognised %d characters (lang=%s)", len(text), lang)
        return text

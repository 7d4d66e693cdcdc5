"""Configuration management for the document classification system.

Loads and validates YAML configuration with defaults for the OCR
collaborator, PDF rendering, and export settings.
"""

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class OCRConfig(BaseModel):
    """Configuration for the Tesseract OCR collaborator."""

    tesseract_cmd: str | None = None
    default_lang: str = "eng"
    psm: int = 3


class PDFConfig(BaseModel):
    """Configuration for PDF page rasterisation.

    Pages are rendered at ``base_dpi * render_scale``; the 2x scale gives
    Tesseract noticeably better input than native resolution.
    """

    render_scale: float = Field(default=2.0, gt=0)
    base_dpi: int = Field(default=72, gt=0)


class ExportConfig(BaseModel):
    """Configuration for metadata export."""

    default_format: Literal["json", "csv"] = "json"


class ServerConfig(BaseModel):
    """Configuration for the HTTP API server."""

    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    """Top-level application configuration."""

    ocr: OCRConfig = Field(default_factory=OCRConfig)
    pdf: PDFConfig = Field(default_factory=PDFConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()

"""Shared test fixtures for the document classification test suite."""

import io
from pathlib import Path

import pytest
from PIL import Image

INVOICE_TEXT = (
    "Acme Co INVOICE\n"
    "INVOICE NO: INV-001\n"
    "DATE: 2024-01-10\n"
    "TOTAL $100.00"
)

CERTIFICATE_TEXT = "Jane Doe\nhas successfully completed the course"

PROSE_TEXT = "The quick brown fox jumps over the lazy dog near the river bank."


def make_png_bytes(width: int = 200, height: int = 100) -> bytes:
    """Create a blank PNG image as bytes."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png_bytes()


@pytest.fixture
def invoice_text() -> str:
    return INVOICE_TEXT


@pytest.fixture
def certificate_text() -> str:
    return CERTIFICATE_TEXT


@pytest.fixture
def prose_text() -> str:
    return PROSE_TEXT


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"

"""Form field extraction: contact email and phone number."""

import re

from src.classification.document_type import DocumentType

from .metadata import FieldSource, MetadataBuilder, MetadataRecord

_EMAIL = re.compile(r"[A-Z0-9._%+\-]+@[A-Z0-9.\-]+\.[A-Z]{2,}", re.IGNORECASE)
_PHONE_CANDIDATE = re.compile(r"\+?\d[\d \t\-]*\d")
MIN_PHONE_DIGITS = 8


def _first_phone(text: str) -> str | None:
    for match in _PHONE_CANDIDATE.finditer(text):
        candidate = match.group(0)
        if sum(ch.isdigit() for ch in candidate) >= MIN_PHONE_DIGITS:
            return candidate
    return None


class FormExtractor:
    """Extracts the first email address and phone number from form text."""

    document_type = DocumentType.FORM

    def extract(self, text: str) -> MetadataRecord:
        record = MetadataBuilder(self.document_type)

        email = _EMAIL.search(text)
        if email:
            record.add("Email", email.group(0), FieldSource.HEURISTIC)

        record.add("Phone", _first_phone(text), FieldSource.HEURISTIC)
        return record.build()

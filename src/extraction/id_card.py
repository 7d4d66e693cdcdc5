"""ID card field extraction.

Both fields are unlabelled heuristics: the first date in the text is
taken as the date of birth, and the first long uppercase/digit token as
the ID number, without checking either is actually labelled as such.
"""

import re
from collections.abc import Callable

from src.classification.document_type import DocumentType

from .metadata import FieldSource, MetadataBuilder, MetadataRecord
from .patterns import DATE_PATTERN

_ID_TOKEN = re.compile(r"\b([A-Z0-9]{6,})\b")

IdNumberFinder = Callable[[str], str | None]


def first_long_token(text: str) -> str | None:
    """Return the first token of six or more uppercase letters or digits."""
    match = _ID_TOKEN.search(text)
    return match.group(1) if match else None


class IdCardExtractor:
    """Extracts date of birth and ID number from ID card text.

    Args:
        id_number_finder: Strategy locating the ID number. Defaults to
            the first qualifying token in the text.
    """

    document_type = DocumentType.ID_CARD

    def __init__(self, id_number_finder: IdNumberFinder = first_long_token) -> None:
        self.id_number_finder = id_number_finder

    def extract(self, text: str) -> MetadataRecord:
        record = MetadataBuilder(self.document_type)

        dob = DATE_PATTERN.search(text)
        if dob:
            record.add("DateOfBirth", dob.group(1), FieldSource.HEURISTIC)

        record.add("IdNumber", self.id_number_finder(text), FieldSource.HEURISTIC)
        return record.build()

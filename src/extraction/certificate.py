"""Certificate field extraction."""

import re

from src.classification.document_type import DocumentType

from .metadata import FieldSource, MetadataBuilder, MetadataRecord
from .patterns import split_lines

_AWARD_PHRASE = re.compile(r"has successfully|is hereby|is awarded", re.IGNORECASE)


class CertificateExtractor:
    """Takes the line just above the first award phrase as the recipient.

    Certificates typically print the name on its own line followed by
    "has successfully completed ..." or "is hereby awarded ...".
    """

    document_type = DocumentType.CERTIFICATE

    def extract(self, text: str) -> MetadataRecord:
        record = MetadataBuilder(self.document_type)
        lines = split_lines(text)
        for previous, line in zip(lines, lines[1:]):
            if _AWARD_PHRASE.search(line):
                record.add("RecipientName", previous, FieldSource.LABEL)
                break
        return record.build()

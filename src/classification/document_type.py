"""Closed set of document types recognised by the classifier."""

import re
from enum import StrEnum


class DocumentType(StrEnum):
    """Supported document types.

    The value is the canonical key used in metadata records and exports;
    ``label`` is the human-readable name.
    """

    INVOICE = "invoice"
    ID_CARD = "id_card"
    CERTIFICATE = "certificate"
    FORM = "form"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, value: "DocumentType | str | None") -> "DocumentType":
        """Normalise any type spelling to a member.

        Accepts members, canonical values, display labels and member
        names in any case, with or without separators, e.g. ``"Invoice"``,
        ``"ID Card"``, ``"id_card"``, ``"IDCard"``. Anything else maps to
        ``UNKNOWN``.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        return _BY_COMPACT_NAME.get(_compact(value), cls.UNKNOWN)


_LABELS: dict[DocumentType, str] = {
    DocumentType.INVOICE: "Invoice",
    DocumentType.ID_CARD: "ID Card",
    DocumentType.CERTIFICATE: "Certificate",
    DocumentType.FORM: "Form",
    DocumentType.UNKNOWN: "Unknown",
}


def _compact(name: str) -> str:
    return re.sub(r"[\s_\-]+", "", name.lower())


_BY_COMPACT_NAME: dict[str, DocumentType] = {
    _compact(member.value): member for member in DocumentType
}

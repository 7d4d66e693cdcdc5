"""Metadata records produced by the type extractors.

A record is an ordered, read-only mapping from field name to value.
Alongside each value it keeps the field's provenance, so callers can
tell label-anchored matches from best-guess heuristics.
"""

from collections.abc import Iterator, Mapping
from enum import StrEnum
from types import MappingProxyType

from src.classification.document_type import DocumentType

DOCUMENT_TYPE_FIELD = "DocumentType"

FieldValue = str | int | float


class FieldSource(StrEnum):
    """How a field value was obtained."""

    SYSTEM = "system"
    LABEL = "label"
    HEURISTIC = "heuristic"


class MetadataRecord(Mapping[str, FieldValue]):
    """Immutable ordered mapping of extracted fields.

    Always contains ``DocumentType`` as its first entry. Insertion order
    reflects extraction order.
    """

    def __init__(
        self,
        fields: Mapping[str, FieldValue],
        provenance: Mapping[str, FieldSource] | None = None,
    ) -> None:
        self._fields = MappingProxyType(dict(fields))
        self._provenance = MappingProxyType(dict(provenance or {}))

    def __getitem__(self, key: str) -> FieldValue:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"MetadataRecord({dict(self._fields)!r})"

    @property
    def document_type(self) -> DocumentType:
        return DocumentType.parse(self._fields.get(DOCUMENT_TYPE_FIELD))

    @property
    def provenance(self) -> Mapping[str, FieldSource]:
        return self._provenance

    def source_of(self, field_name: str) -> FieldSource | None:
        return self._provenance.get(field_name)

    def to_dict(self) -> dict[str, FieldValue]:
        return dict(self._fields)


class MetadataBuilder:
    """Accumulates fields for one record in extraction order."""

    def __init__(self, document_type: DocumentType) -> None:
        self._fields: dict[str, FieldValue] = {DOCUMENT_TYPE_FIELD: document_type.value}
        self._provenance: dict[str, FieldSource] = {
            DOCUMENT_TYPE_FIELD: FieldSource.SYSTEM
        }

    def add(
        self,
        field_name: str,
        value: FieldValue | None,
        source: FieldSource = FieldSource.LABEL,
    ) -> None:
        """Set a field; ``None`` and empty strings are skipped."""
        if value is None or value == "":
            return
        self._fields[field_name] = value
        self._provenance[field_name] = source

    def __contains__(self, field_name: str) -> bool:
        return field_name in self._fields

    def build(self) -> MetadataRecord:
        return MetadataRecord(self._fields, self._provenance)

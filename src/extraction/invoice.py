"""Invoice field extraction.

Layered regex heuristics over noisy OCR text. Label-anchored rules run
first; when no ``TOTAL`` line can be read, the total falls back to the
largest money amount anywhere in the text, which assumes the grand total
is the biggest figure on the page. That fallback can misfire on
documents listing larger unrelated numbers, so it is recorded with
``FieldSource.HEURISTIC`` and can be swapped for a stronger strategy.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from src.classification.document_type import DocumentType
from src.utils.logger import get_logger

from .metadata import FieldSource, MetadataBuilder, MetadataRecord
from .patterns import (
    AMOUNT,
    CURRENCY_SYMBOLS,
    DATE_PATTERN,
    MONEY_PATTERN,
    parse_amount,
    parse_decimal,
    split_lines,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class MoneyMatch:
    """A money amount found in text, with its currency marker if any."""

    amount: float
    currency: str | None
    raw: str


@dataclass(frozen=True)
class ExtractionRule:
    """A label-anchored numeric field rule."""

    field_name: str
    pattern: re.Pattern[str]
    transform: Callable[[str], float]

    def apply(self, text: str) -> float | None:
        match = self.pattern.search(text)
        if not match:
            return None
        return self.transform(match.group(1))


TotalAmountFallback = Callable[[str], MoneyMatch | None]


def largest_money_amount(text: str) -> MoneyMatch | None:
    """Return the largest money-shaped amount in the text.

    The first occurrence wins when several amounts share the largest
    value. Returns ``None`` if the text holds no amounts.
    """
    best: MoneyMatch | None = None
    for match in MONEY_PATTERN.finditer(text):
        amount = parse_amount(match.group(2))
        if best is None or amount > best.amount:
            best = MoneyMatch(amount, match.group(1) or None, match.group(2))
    return best


_INVOICE_WORD = re.compile(r"INVOICE", re.IGNORECASE)
_INVOICE_NUMBER_MARKER = re.compile(r"INVOICE\s*(?:#|NO|NUMBER)", re.IGNORECASE)
_INVOICE_NUMBER = re.compile(
    r"INVOICE\s*(?:#|NUMBER|NO\.?)?\s*[:\-]?\s*([A-Z0-9\-]+)", re.IGNORECASE
)
_DATE_LINE = re.compile(r"DATE", re.IGNORECASE)
_DUE_DATE_LINE = re.compile(r"DUE\s*DATE", re.IGNORECASE)
_TOTAL_LINE = re.compile(r"TOTAL\b", re.IGNORECASE)
_TOTAL_AMOUNT = re.compile(
    rf"TOTAL(?:\s+(?:DUE|AMOUNT|AMT))?\s*[:\-]?\s*"
    rf"([A-Z{CURRENCY_SYMBOLS}]{{0,3}})\s*[:\-]?\s*({AMOUNT})(?!\d)",
    re.IGNORECASE,
)
_PAYMENT_TERMS = re.compile(r"due in\s+(\d+)\s+days", re.IGNORECASE)

# Evaluated in this order; each field is independent.
INVOICE_AMOUNT_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule(
        "Subtotal",
        re.compile(rf"Subtotal\s*:?\s*({AMOUNT})(?!\d)", re.IGNORECASE),
        parse_amount,
    ),
    ExtractionRule(
        "TaxableAmount",
        re.compile(rf"Taxable\s*:?\s*({AMOUNT})(?!\d)", re.IGNORECASE),
        parse_amount,
    ),
    ExtractionRule(
        "TaxRate",
        re.compile(r"Tax\s*rate\s*:?\s*(\d+(?:[.,]\d+)?)\s*%?", re.IGNORECASE),
        parse_decimal,
    ),
    ExtractionRule(
        "TaxAmount",
        re.compile(rf"Tax\s*due\s*:?\s*({AMOUNT})(?!\d)", re.IGNORECASE),
        parse_amount,
    ),
)


class InvoiceExtractor:
    """Extracts vendor, number, dates, amounts and terms from invoice text.

    Args:
        total_fallback: Strategy used when no ``TOTAL`` line yields an
            amount. Defaults to picking the largest amount in the text.
    """

    document_type = DocumentType.INVOICE

    def __init__(self, total_fallback: TotalAmountFallback = largest_money_amount) -> None:
        self.total_fallback = total_fallback

    def extract(self, raw: str) -> MetadataRecord:
        text = raw.replace("\r", "")
        lines = split_lines(text)
        record = MetadataBuilder(self.document_type)

        record.add("VendorName", self._vendor_name(lines))
        record.add("InvoiceNumber", self._invoice_number(lines))

        invoice_date, due_date = self._dates(lines)
        record.add("InvoiceDate", invoice_date)
        record.add("DueDate", due_date)

        for rule in INVOICE_AMOUNT_RULES:
            record.add(rule.field_name, rule.apply(text))

        total = self._labelled_total(lines)
        source = FieldSource.LABEL
        if total is None:
            total = self.total_fallback(text)
            source = FieldSource.HEURISTIC
        if total is not None:
            record.add("TotalAmount", total.amount, source)
            record.add("Currency", total.currency, source)
            logger.debug("Invoice total %.2f found by %s", total.amount, source)

        terms = _PAYMENT_TERMS.search(text)
        if terms:
            record.add("PaymentTermsDays", int(terms.group(1)))

        return record.build()

    def _vendor_name(self, lines: list[str]) -> str | None:
        """Text before ``INVOICE`` on the first line, e.g. ``Acme Co INVOICE``."""
        if not lines:
            return None
        first = lines[0]
        match = _INVOICE_WORD.search(first)
        if match is None or match.start() == 0:
            return None
        return first[: match.start()].strip() or None

    def _invoice_number(self, lines: list[str]) -> str | None:
        for line in lines:
            if not _INVOICE_NUMBER_MARKER.search(line):
                continue
            match = _INVOICE_NUMBER.search(line)
            if match and match.group(1):
                return match.group(1)
        return None

    def _dates(self, lines: list[str]) -> tuple[str | None, str | None]:
        """Return ``(invoice_date, due_date)``.

        The first dated non-due line sets the invoice date; every dated
        due-date line overwrites the due date.
        """
        invoice_date: str | None = None
        due_date: str | None = None
        for line in lines:
            if not _DATE_LINE.search(line):
                continue
            match = DATE_PATTERN.search(line)
            if not match:
                continue
            if _DUE_DATE_LINE.search(line):
                due_date = match.group(1)
            elif invoice_date is None:
                invoice_date = match.group(1)
        return invoice_date, due_date

    def _labelled_total(self, lines: list[str]) -> MoneyMatch | None:
        """Read the amount from the first line starting with ``TOTAL``."""
        line = next((line for line in lines if _TOTAL_LINE.match(line)), None)
        if line is None:
            return None
        match = _TOTAL_AMOUNT.search(line)
        if not match:
            return None
        return MoneyMatch(
            amount=parse_amount(match.group(2)),
            currency=match.group(1) or None,
            raw=match.group(2),
        )

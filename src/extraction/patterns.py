"""Regular expressions and value parsers shared by the extractors."""

import re

# YYYY-M-D / YYYY/M/D, or D-M-YY(YY) / D/M/YY(YY)
DATE_PATTERN = re.compile(
    r"(\d{4}[/\-]\d{1,2}[/\-]\d{1,2}|\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})"
)

# Two-decimal amount, with or without thousands grouping: 1,234.56 / 1.234,56 / 99.90
AMOUNT = r"\d{1,3}(?:[.,]\d{3})+[.,]\d{2}|\d+[.,]\d{2}"

CURRENCY_SYMBOLS = "$€£₹"

# Not inside a digit run or a grouped number; a leading "Rs." or "No." is fine.
MONEY_PATTERN = re.compile(
    rf"(?<!\d)(?<!\d[.,])([{CURRENCY_SYMBOLS}])?\s?({AMOUNT})(?![\d])"
)


def parse_amount(token: str) -> float:
    """Parse an OCR'd amount, treating a trailing ``,dd`` or ``.dd`` as decimals.

    Every other separator is thousands grouping. A lone comma decimal
    separator is normalised to a dot.

    >>> parse_amount("1,234.56"), parse_amount("1.234,56"), parse_amount("12,50")
    (1234.56, 1234.56, 12.5)
    """
    token = token.strip().replace(" ", "")
    match = re.fullmatch(r"(.*?)[.,](\d{1,2})", token)
    if match and re.search(r"\d", match.group(1)):
        whole = re.sub(r"[.,]", "", match.group(1))
        return float(f"{whole}.{match.group(2)}")
    return float(re.sub(r"[.,]", "", token))


def parse_decimal(token: str) -> float:
    """Parse a plain decimal number whose separator may be a comma."""
    return float(token.strip().replace(",", "."))


def split_lines(text: str) -> list[str]:
    """Split text into trimmed, non-empty lines."""
    return [line.strip() for line in text.replace("\r", "").split("\n") if line.strip()]

"""Keyword-scoring document classifier.

Each candidate type accumulates the weights of the rules its text
triggers. The highest total wins, ties going to the earlier type in
``PRIORITY_ORDER``, and the confidence is a capped linear function of
the winning score.
"""

import re
from dataclasses import dataclass, field

from src.utils.logger import get_logger

from .document_type import DocumentType

logger = get_logger(__name__)

MAX_CONFIDENCE = 95
CONFIDENCE_PER_POINT = 20


@dataclass(frozen=True)
class ClassificationRule:
    """A weighted signal for one document type.

    The rule fires at most once, when any keyword is contained in the
    lower-cased text or the pattern matches it.
    """

    document_type: DocumentType
    weight: int
    keywords: tuple[str, ...] = ()
    pattern: re.Pattern[str] | None = None

    def matches(self, content: str) -> bool:
        if any(keyword in content for keyword in self.keywords):
            return True
        return self.pattern is not None and self.pattern.search(content) is not None


@dataclass(frozen=True)
class ClassificationResult:
    """Winning document type with its confidence and the per-type scores."""

    document_type: DocumentType
    confidence: int
    scores: dict[DocumentType, int] = field(default_factory=dict, compare=False)

    @property
    def label(self) -> str:
        return self.document_type.label


PRIORITY_ORDER: tuple[DocumentType, ...] = (
    DocumentType.INVOICE,
    DocumentType.ID_CARD,
    DocumentType.CERTIFICATE,
    DocumentType.FORM,
)

_CURRENCY_OR_TOTAL = re.compile(r"[$€£₹]|total\s*[:\-]?\s*\d+")

CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(DocumentType.INVOICE, 2, keywords=("invoice",)),
    ClassificationRule(DocumentType.INVOICE, 1, keywords=("total",)),
    ClassificationRule(DocumentType.INVOICE, 1, keywords=("amount",)),
    ClassificationRule(DocumentType.INVOICE, 2, pattern=_CURRENCY_OR_TOTAL),
    ClassificationRule(DocumentType.ID_CARD, 2, keywords=("date of birth",)),
    ClassificationRule(DocumentType.ID_CARD, 2, keywords=("id no", "uid")),
    ClassificationRule(DocumentType.ID_CARD, 1, keywords=("address",)),
    ClassificationRule(DocumentType.CERTIFICATE, 3, keywords=("certificate",)),
    ClassificationRule(DocumentType.CERTIFICATE, 2, keywords=("certify",)),
    ClassificationRule(DocumentType.CERTIFICATE, 1, keywords=("course", "completion")),
    ClassificationRule(DocumentType.FORM, 2, keywords=("application",)),
    ClassificationRule(DocumentType.FORM, 2, keywords=("form",)),
    ClassificationRule(DocumentType.FORM, 1, keywords=("signature",)),
)


def score_text(
    text: str, rules: tuple[ClassificationRule, ...] = CLASSIFICATION_RULES
) -> dict[DocumentType, int]:
    """Sum the weights of the triggered rules per candidate type."""
    content = text.lower()
    scores = {doc_type: 0 for doc_type in PRIORITY_ORDER}
    for rule in rules:
        if rule.matches(content):
            scores[rule.document_type] += rule.weight
    return scores


def confidence_for(score: int) -> int:
    """Map a winning score to a confidence in [0, 95]."""
    return min(MAX_CONFIDENCE, max(score, 0) * CONFIDENCE_PER_POINT)


def classify(text: str) -> ClassificationResult:
    """Classify OCR text into one of the known document types.

    Args:
        text: Aggregated document text; may be empty.

    Returns:
        ``UNKNOWN`` with confidence 0 when no rule fires, otherwise the
        first type in priority order holding the highest score.
    """
    scores = score_text(text or "")
    max_score = max(scores.values())
    logger.debug("Classification scores: %s", {str(k): v for k, v in scores.items()})

    if max_score == 0:
        return ClassificationResult(DocumentType.UNKNOWN, 0, scores)

    winner = next(t for t in PRIORITY_ORDER if scores[t] == max_score)
    result = ClassificationResult(winner, confidence_for(max_score), scores)
    logger.info(
        "Classified document as %s (confidence=%d)", winner.label, result.confidence
    )
    return result

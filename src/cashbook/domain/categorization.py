"""Keyword-based auto-categorization of transaction descriptions."""

import logging
import re
from typing import Optional, Sequence

from cashbook.database.base import Database
from cashbook.domain.entities import CategorizationPattern, Transaction
from cashbook.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    category_not_found,
)

logger = logging.getLogger(__name__)

LEARNED_PATTERN_PRIORITY = 10

# Words that describe the payment rather than the merchant
NOISE_WORDS = frozenset(
    {
        "payment",
        "transaction",
        "ref",
        "reference",
        "id",
        "nr",
        "number",
        "store",
        "shop",
        "market",
        "supermarket",
        "retail",
        "online",
        "purchase",
        "sale",
        "buy",
        "order",
        "invoice",
        "bill",
        "debit",
        "credit",
        "card",
        "terminal",
        "pos",
        "the",
        "and",
        "or",
        "at",
        "in",
        "on",
        "to",
        "from",
        "for",
        "ab",
        "ltd",
        "inc",
        "llc",
        "corp",
        "co",
        "company",
        "kortköp",
    }
)

_DATE_RE = re.compile(r"\d+[-/]\d+[-/]\d+")
_TIME_RE = re.compile(r"\d+:\d+")
_DIGITS_RE = re.compile(r"\d+")
_PUNCTUATION_RE = re.compile(r"[^\w\s-]")
_FALLBACK_SPLIT_RE = re.compile(r"[\s\d]")


def categorize(description: str, patterns: Sequence[CategorizationPattern]) -> Optional[int]:
    """Find the category for a description.

    Patterns are tried in the order given, so callers pass them already
    sorted by priority.

    Args:
        description: Transaction description
        patterns: Ordered categorization patterns

    Returns:
        Category ID of the first matching pattern, or None
    """
    lowered = description.lower()
    for pattern in patterns:
        for keyword in pattern.keywords:
            if keyword in lowered:
                return pattern.category_id
    return None


def suggest_pattern(description: str) -> str:
    """Suggest a merchant keyword for a description.

    Dates, times and digits are removed, punctuation becomes whitespace,
    and the first word of at least three characters that is not a noise
    word is returned. When nothing survives, the first token of the
    original description (up to 20 characters) is used instead.

    Examples:
        "ICA SUPERMARKET 2024-01-05" -> "ica"
        "Card purchase SPOTIFY AB" -> "spotify"
    """
    cleaned = description.lower()
    cleaned = _DATE_RE.sub("", cleaned)
    cleaned = _TIME_RE.sub("", cleaned)
    cleaned = _DIGITS_RE.sub("", cleaned)
    cleaned = _PUNCTUATION_RE.sub(" ", cleaned)

    words = [word for word in cleaned.split() if len(word) >= 3 and word not in NOISE_WORDS]
    if words:
        return words[0]

    first_word = _FALLBACK_SPLIT_RE.split(description, maxsplit=1)[0]
    return first_word[:20].lower()


class CategorizationService:
    """Service for categorization patterns and bulk categorization."""

    def __init__(self, db: Database):
        """Initialize categorization service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_patterns(self, household_id: int) -> list[CategorizationPattern]:
        """List a household's patterns in evaluation order."""
        return self.db.list_patterns(household_id)

    def categorize_description(self, household_id: int, description: str) -> Optional[int]:
        """Categorize one description against the household's patterns."""
        return categorize(description, self.list_patterns(household_id))

    def _require_category(self, household_id: int, category_id: int) -> None:
        category = self.db.get_category(category_id)
        if category is None or category.household_id != household_id:
            raise NotFoundError(category_not_found(category_id))

    @staticmethod
    def _clean_pattern(pattern: str) -> str:
        cleaned = pattern.strip().lower()
        if not any(part.strip() for part in cleaned.split("|")):
            raise ValidationError("Pattern must contain at least one keyword")
        return cleaned

    def save_pattern(
        self,
        household_id: int,
        category_id: int,
        pattern: str,
        priority: int = LEARNED_PATTERN_PRIORITY,
    ) -> tuple[int, bool]:
        """Save a learned pattern, skipping exact duplicates.

        Args:
            household_id: Household ID
            category_id: Category the pattern assigns
            pattern: Pipe-delimited keywords
            priority: Pattern priority (learned patterns outrank defaults)

        Returns:
            Tuple of (pattern ID, True if a new pattern was inserted)

        Raises:
            NotFoundError: If category does not exist in the household
            ValidationError: If the pattern has no keywords
        """
        self._require_category(household_id, category_id)
        cleaned = self._clean_pattern(pattern)

        existing = self.db.find_pattern(household_id, category_id, cleaned)
        if existing is not None:
            return existing.id, False

        pattern_id = self.db.create_pattern(
            household_id=household_id,
            category_id=category_id,
            pattern=cleaned,
            priority=priority,
            is_default=False,
        )
        logger.info("Saved pattern %r for category %s", cleaned, category_id)
        return pattern_id, True

    def add_pattern(self, household_id: int, category_id: int, pattern: str, priority: int = 0) -> int:
        """Add a pattern with an explicit priority.

        Returns:
            Pattern ID

        Raises:
            NotFoundError: If category does not exist in the household
            ValidationError: If the pattern has no keywords
        """
        self._require_category(household_id, category_id)
        return self.db.create_pattern(
            household_id=household_id,
            category_id=category_id,
            pattern=self._clean_pattern(pattern),
            priority=priority,
            is_default=False,
        )

    def delete_pattern(self, household_id: int, pattern_id: int) -> None:
        """Delete a pattern.

        Raises:
            NotFoundError: If pattern does not exist in the household
        """
        pattern = self.db.get_pattern(pattern_id)
        if pattern is None or pattern.household_id != household_id:
            raise NotFoundError(f"Pattern {pattern_id} not found")
        self.db.delete_pattern(pattern_id)

    def find_matches(
        self,
        household_id: int,
        pattern: str,
        exclude_id: Optional[int] = None,
        limit: int = 50,
    ) -> list[Transaction]:
        """Find uncategorized transactions whose description contains pattern."""
        if not pattern.strip():
            return []
        return self.db.find_uncategorized_matching(
            household_id, pattern.strip(), exclude_id=exclude_id, limit=limit
        )

    def bulk_apply(self, household_id: int, transaction_ids: Sequence[int], category_id: int) -> int:
        """Assign a category to many transactions.

        Each transaction is updated on its own; a failed update is logged and
        skipped while earlier updates stay applied.

        Args:
            household_id: Household ID
            transaction_ids: Transactions to categorize
            category_id: Category to assign

        Returns:
            Number of transactions updated

        Raises:
            NotFoundError: If any transaction is outside the household, or
                the category does not exist
        """
        ids = list(dict.fromkeys(transaction_ids))
        owned = self.db.filter_household_transaction_ids(household_id, ids)
        if len(owned) != len(ids):
            missing = ", ".join(str(i) for i in ids if i not in owned)
            raise NotFoundError(f"Transactions not found in household {household_id}: {missing}")
        self._require_category(household_id, category_id)

        updated = 0
        for transaction_id in ids:
            try:
                self.db.update_transaction_category(transaction_id, category_id)
            except DomainError as e:
                logger.warning("Could not categorize transaction %s: %s", transaction_id, e)
                continue
            updated += 1
        return updated

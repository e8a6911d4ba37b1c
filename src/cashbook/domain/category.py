"""Category domain service."""

import logging
from typing import Optional, NamedTuple

from cashbook.database.base import Database
from cashbook.domain.entities import Category, TransactionKind
from cashbook.domain.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#3B82F6"


class DefaultPattern(NamedTuple):
    category: str
    pattern: str
    kind: TransactionKind


INCOME = TransactionKind.INCOME
EXPENSE = TransactionKind.EXPENSE

# Seeded for every new household, one default pattern per category
DEFAULT_PATTERNS = (
    DefaultPattern("Salary", "salary|payroll|wage", INCOME),
    DefaultPattern("Freelance", "freelance|contractor|consulting", INCOME),
    DefaultPattern("Investment", "dividend|interest|investment", INCOME),
    DefaultPattern("Groceries", "grocery|supermarket|whole foods|trader joe|safeway|walmart|costco", EXPENSE),
    DefaultPattern(
        "Dining",
        "restaurant|cafe|coffee|starbucks|mcdonald|burger|pizza|food delivery|doordash|ubereats",
        EXPENSE,
    ),
    DefaultPattern("Transportation", "uber|lyft|taxi|transit|subway|bus fare|train|metro", EXPENSE),
    DefaultPattern(
        "Fuel",
        "gas station|fuel|petrol|bensin|diesel|shell|bp|chevron|exxon|circle k|ingo",
        EXPENSE,
    ),
    DefaultPattern("Parking", "parking|parkering|park fee|valet|garage", EXPENSE),
    DefaultPattern("Utilities", "electric|water|gas bill|utility|internet|phone bill|cable", EXPENSE),
    DefaultPattern("Rent/Mortgage", "rent|mortgage|property management", EXPENSE),
    DefaultPattern(
        "Healthcare",
        "pharmacy|doctor|hospital|medical|health insurance|dental|vision|apoteket",
        EXPENSE,
    ),
    DefaultPattern(
        "Streaming",
        "netflix|spotify|hulu|disney|hbo|apple music|youtube premium|amazon prime video"
        "|paramount|peacock|max|apple tv|deezer|tidal",
        EXPENSE,
    ),
    DefaultPattern(
        "Entertainment",
        "movie|theater|cinema|concert|game|festival|amusement|bowling|minigolf",
        EXPENSE,
    ),
    DefaultPattern(
        "Furniture",
        "ikea|furniture|sofa|chair|table|bed|mattress|wayfair|ashley|crate and barrel|jysk|mio",
        EXPENSE,
    ),
    DefaultPattern(
        "Home Improvement",
        "home depot|lowe's|hardware|paint|tool|bauhaus|hornbach|rona|menards|ace hardware|byggmax|k-rauta",
        EXPENSE,
    ),
    DefaultPattern("Shopping", "amazon|ebay|target|mall|retail|clothing|fashion", EXPENSE),
    DefaultPattern("Insurance", "insurance|policy premium", EXPENSE),
    DefaultPattern("Education", "school|tuition|education|course|book|university", EXPENSE),
    DefaultPattern("Fitness", "gym|fitness|yoga|sports|athletic", EXPENSE),
)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        household_id: int,
        name: str,
        kind: TransactionKind,
        color: str = DEFAULT_COLOR,
    ) -> int:
        """Create a category.

        Args:
            household_id: Household ID
            name: Category name, unique within the household
            kind: Income or expense
            color: Display color

        Returns:
            Category ID

        Raises:
            ValidationError: If name is blank or kind is unknown
            ConflictError: If a category with this name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name must not be empty")
        try:
            kind = TransactionKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown category kind '{kind}'") from None

        if self.db.get_category_by_name(household_id, name) is not None:
            raise ConflictError(f"Category '{name}' already exists")

        return self.db.create_category(household_id=household_id, name=name, kind=kind, color=color)

    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        return self.db.get_category(category_id)

    def get_category_by_name(self, household_id: int, name: str) -> Optional[Category]:
        """Get category by name within a household."""
        return self.db.get_category_by_name(household_id, name.strip())

    def list_categories(self, household_id: int, kind: Optional[TransactionKind] = None) -> list[Category]:
        """List categories, optionally only of one kind.

        Returns:
            Categories ordered by name
        """
        return self.db.list_categories(household_id, kind=kind)

    def ensure_default_categories(self, household_id: int) -> int:
        """Seed the default categories and their patterns.

        Does nothing when the household already has categories.

        Returns:
            Number of categories created
        """
        if self.db.list_categories(household_id):
            return 0

        category_ids: dict[str, int] = {}
        for default in DEFAULT_PATTERNS:
            if default.category not in category_ids:
                category_ids[default.category] = self.db.create_category(
                    household_id=household_id, name=default.category, kind=default.kind
                )

        for default in DEFAULT_PATTERNS:
            self.db.create_pattern(
                household_id=household_id,
                category_id=category_ids[default.category],
                pattern=default.pattern,
                is_default=True,
            )

        logger.info("Seeded %d default categories for household %s", len(category_ids), household_id)
        return len(category_ids)

"""Household domain service."""

import logging
import re
from typing import Optional

from cashbook.database.base import Database
from cashbook.domain.budget_period import validate_start_day
from cashbook.domain.category import CategoryService
from cashbook.domain.entities import Household
from cashbook.domain.errors import (
    ConflictError,
    NotFoundError,
    UnauthorizedAccessError,
    ValidationError,
    household_not_found,
    not_a_member,
)

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
MEMBER_ROLE = "member"

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


def validate_currency(currency: str) -> str:
    """Normalize a three-letter currency code.

    Raises:
        ValidationError: If currency is not three letters
    """
    code = currency.strip().upper()
    if not _CURRENCY_RE.match(code):
        raise ValidationError(f"Currency must be a three-letter code, got '{currency}'")
    return code


class HouseholdService:
    """Service for households, their settings and members."""

    def __init__(self, db: Database):
        """Initialize household service.

        Args:
            db: Database instance
        """
        self.db = db
        self.category_service = CategoryService(db)

    def create_household(
        self,
        name: str,
        currency: str = "USD",
        budget_month_start_day: int = 1,
        owner: Optional[str] = None,
    ) -> int:
        """Create a household with the default categories and patterns.

        Args:
            name: Household name
            currency: Three-letter currency code
            budget_month_start_day: Day of month budget periods start (1-31)
            owner: Optional user ID added as the household admin

        Returns:
            Household ID

        Raises:
            ValidationError: If name, currency or start day is invalid
        """
        name = name.strip()
        if not name:
            raise ValidationError("Household name must not be empty")
        currency = validate_currency(currency)
        validate_start_day(budget_month_start_day)

        household_id = self.db.create_household(
            name=name, currency=currency, budget_month_start_day=budget_month_start_day
        )
        self.category_service.ensure_default_categories(household_id)
        if owner:
            self.db.add_household_member(household_id, owner, role=ADMIN_ROLE)
        logger.info("Created household %s (%s)", household_id, name)
        return household_id

    def get_household(self, household_id: int) -> Household:
        """Get household by ID.

        Raises:
            NotFoundError: If household does not exist
        """
        household = self.db.get_household(household_id)
        if household is None:
            raise NotFoundError(household_not_found(household_id))
        return household

    def list_households(self) -> list[Household]:
        """List all households."""
        return self.db.list_households()

    def get_budget_month_start_day(self, household_id: int) -> int:
        """Get the day of month the household's budget period starts."""
        return self.get_household(household_id).budget_month_start_day

    def update_settings(
        self,
        household_id: int,
        name: Optional[str] = None,
        currency: Optional[str] = None,
        budget_month_start_day: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> Household:
        """Update household settings.

        Args:
            household_id: Household ID
            name: Optional new name
            currency: Optional new currency code
            budget_month_start_day: Optional new period start day (1-31)
            user_id: If given, the user must be a household admin

        Returns:
            The updated household

        Raises:
            NotFoundError: If household does not exist
            UnauthorizedAccessError: If user_id is given and not an admin
            ValidationError: If nothing to update or a value is invalid
        """
        self.get_household(household_id)
        if user_id is not None and self.db.get_member_role(household_id, user_id) != ADMIN_ROLE:
            raise UnauthorizedAccessError("Only admins can update household settings")

        if name is None and currency is None and budget_month_start_day is None:
            raise ValidationError("No updates provided")
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Household name must not be empty")
        if currency is not None:
            currency = validate_currency(currency)
        if budget_month_start_day is not None:
            validate_start_day(budget_month_start_day)

        self.db.update_household(
            household_id,
            name=name,
            currency=currency,
            budget_month_start_day=budget_month_start_day,
        )
        return self.get_household(household_id)

    def add_member(self, household_id: int, user_id: str, role: str = MEMBER_ROLE) -> int:
        """Add a user to a household.

        Returns:
            Membership ID

        Raises:
            NotFoundError: If household does not exist
            ConflictError: If user is already a member
            ValidationError: If role is unknown
        """
        self.get_household(household_id)
        if role not in (ADMIN_ROLE, MEMBER_ROLE):
            raise ValidationError(f"Unknown role '{role}'")
        if self.db.is_household_member(household_id, user_id):
            raise ConflictError(f"User '{user_id}' is already a member of household {household_id}")
        return self.db.add_household_member(household_id, user_id, role=role)

    def is_member(self, user_id: str, household_id: int) -> bool:
        """Check whether a user belongs to a household."""
        return self.db.is_household_member(household_id, user_id)

    def require_member(self, user_id: str, household_id: int) -> None:
        """Gate access to household data.

        Raises:
            UnauthorizedAccessError: If the user is not a member
        """
        if not self.is_member(user_id, household_id):
            logger.warning("Denied household %s to user %s", household_id, user_id)
            raise UnauthorizedAccessError(not_a_member(user_id, household_id))

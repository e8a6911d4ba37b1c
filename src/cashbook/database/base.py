"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from cashbook.domain.entities import (
    Household,
    Account,
    AccountBalanceSnapshot,
    Category,
    CategorizationPattern,
    CSVMapping,
    Transaction,
    TransactionKind,
    Budget,
    BudgetPeriodType,
)


class Database(ABC):
    """Abstract database interface for cashbook.

    Every write is committed individually; callers that loop over rows get
    one round-trip per row and no cross-row transaction.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Household operations
    @abstractmethod
    def create_household(self, name: str, currency: str = "USD", budget_month_start_day: int = 1) -> int:
        """Create a household. Returns household ID."""
        pass

    @abstractmethod
    def get_household(self, household_id: int) -> Optional[Household]:
        """Get household by ID."""
        pass

    @abstractmethod
    def list_households(self) -> list[Household]:
        """List all households."""
        pass

    @abstractmethod
    def update_household(
        self,
        household_id: int,
        name: Optional[str] = None,
        currency: Optional[str] = None,
        budget_month_start_day: Optional[int] = None,
    ) -> None:
        """Update household settings; None leaves a field unchanged."""
        pass

    @abstractmethod
    def add_household_member(self, household_id: int, user_id: str, role: str = "member") -> int:
        """Add a user to a household. Returns membership ID."""
        pass

    @abstractmethod
    def is_household_member(self, household_id: int, user_id: str) -> bool:
        """Check whether user belongs to household."""
        pass

    @abstractmethod
    def get_member_role(self, household_id: int, user_id: str) -> Optional[str]:
        """Get the user's role in a household, or None if not a member."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        household_id: int,
        name: str,
        account_type: str = "checking",
        institution: Optional[str] = None,
        account_number_last4: Optional[str] = None,
        balance: Decimal = Decimal("0"),
        currency: str = "USD",
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, household_id: int) -> list[Account]:
        """List accounts of a household, active first, then by name."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[str] = None,
        institution: Optional[str] = None,
        account_number_last4: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update account descriptive fields; None leaves a field unchanged."""
        pass

    @abstractmethod
    def update_account_balance(self, account_id: int, balance: Decimal) -> None:
        """Overwrite the stored account balance."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_transaction_count(self, account_id: int) -> int:
        """Get count of transactions referencing an account."""
        pass

    @abstractmethod
    def add_balance_snapshot(self, account_id: int, balance: Decimal) -> int:
        """Append a balance history snapshot. Returns snapshot ID."""
        pass

    @abstractmethod
    def list_balance_snapshots(self, account_id: int) -> list[AccountBalanceSnapshot]:
        """List balance snapshots, oldest first."""
        pass

    @abstractmethod
    def get_latest_balance_checkpoint(self, account_id: int) -> Optional[Transaction]:
        """Get the chronologically latest transaction carrying balance_after.

        Ordered by date, then creation time, then ID.
        """
        pass

    @abstractmethod
    def get_account_net(self, account_id: int, after: Optional[Transaction] = None) -> Decimal:
        """Sum income minus expenses for an account.

        Args:
            account_id: Account ID
            after: If given, only transactions strictly after this one (by
                date, creation time, ID) that have no balance_after of their
                own are included
        """
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self, household_id: int, name: str, kind: TransactionKind, color: str = "#3B82F6"
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, household_id: int, name: str) -> Optional[Category]:
        """Get category by name within a household."""
        pass

    @abstractmethod
    def list_categories(
        self, household_id: int, kind: Optional[TransactionKind] = None
    ) -> list[Category]:
        """List categories of a household ordered by name."""
        pass

    # Categorization pattern operations
    @abstractmethod
    def create_pattern(
        self,
        household_id: int,
        category_id: int,
        pattern: str,
        priority: int = 0,
        is_default: bool = False,
    ) -> int:
        """Create a categorization pattern. Returns pattern ID."""
        pass

    @abstractmethod
    def get_pattern(self, pattern_id: int) -> Optional[CategorizationPattern]:
        """Get pattern by ID."""
        pass

    @abstractmethod
    def find_pattern(
        self, household_id: int, category_id: int, pattern: str
    ) -> Optional[CategorizationPattern]:
        """Find an exact pattern string already stored for a category."""
        pass

    @abstractmethod
    def list_patterns(self, household_id: int) -> list[CategorizationPattern]:
        """List patterns by priority desc, defaults first, newest first."""
        pass

    @abstractmethod
    def delete_pattern(self, pattern_id: int) -> None:
        """Delete a pattern."""
        pass

    # CSV mapping operations
    @abstractmethod
    def create_csv_mapping(
        self,
        household_id: int,
        name: str,
        date_column: str,
        description_column: str,
        amount_column: str,
        type_column: Optional[str] = None,
        balance_column: Optional[str] = None,
        date_format: str = "YYYY-MM-DD",
        delimiter: str = ",",
        has_header: bool = True,
    ) -> int:
        """Create a CSV mapping. Returns mapping ID."""
        pass

    @abstractmethod
    def get_csv_mapping(self, mapping_id: int) -> Optional[CSVMapping]:
        """Get CSV mapping by ID."""
        pass

    @abstractmethod
    def get_csv_mapping_by_name(self, household_id: int, name: str) -> Optional[CSVMapping]:
        """Get CSV mapping by name within a household."""
        pass

    @abstractmethod
    def list_csv_mappings(self, household_id: int) -> list[CSVMapping]:
        """List CSV mappings of a household, newest first."""
        pass

    @abstractmethod
    def delete_csv_mapping(self, mapping_id: int) -> None:
        """Delete a CSV mapping."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        household_id: int,
        date: date,
        description: str,
        amount: Decimal,
        kind: TransactionKind,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        balance_after: Optional[Decimal] = None,
        excluded_from_reports: bool = False,
        import_batch_id: Optional[int] = None,
        created_by: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        household_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        uncategorized: bool = False,
        import_batch_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first.

        Args:
            household_id: Household to list
            start_date: Optional start date filter
            end_date: Optional end date filter
            category_id: Optional category ID filter
            account_id: Optional account ID filter
            uncategorized: If True, only return transactions without a category
            import_batch_id: Optional import batch filter
        """
        pass

    @abstractmethod
    def find_uncategorized_matching(
        self,
        household_id: int,
        pattern: str,
        exclude_id: Optional[int] = None,
        limit: int = 50,
    ) -> list[Transaction]:
        """Find uncategorized transactions whose description contains pattern.

        Matching is case-insensitive; wildcard characters in the pattern are
        matched literally. Newest first.
        """
        pass

    @abstractmethod
    def filter_household_transaction_ids(
        self, household_id: int, transaction_ids: Sequence[int]
    ) -> set[int]:
        """Return the subset of IDs that belong to the household."""
        pass

    @abstractmethod
    def update_transaction_category(self, transaction_id: int, category_id: Optional[int]) -> None:
        """Update transaction category."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        date: Optional[date] = None,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        kind: Optional[TransactionKind] = None,
        account_id: Optional[int] = None,
        balance_after: Optional[Decimal] = None,
    ) -> None:
        """Update transaction fields. None leaves a field unchanged."""
        pass

    @abstractmethod
    def update_transaction_excluded(self, transaction_id: int, excluded: bool) -> None:
        """Set the excluded_from_reports flag."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def sum_transactions(
        self,
        household_id: int,
        kind: TransactionKind,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        include_excluded: bool = False,
    ) -> Decimal:
        """Sum transaction amounts of one kind within an inclusive date range."""
        pass

    # Budget operations
    @abstractmethod
    def create_budget(
        self,
        household_id: int,
        category_id: int,
        amount: Decimal,
        period: BudgetPeriodType,
        start_date: date,
        end_date: Optional[date] = None,
    ) -> int:
        """Create a budget. Returns budget ID."""
        pass

    @abstractmethod
    def get_budget(self, budget_id: int) -> Optional[Budget]:
        """Get budget by ID."""
        pass

    @abstractmethod
    def list_budgets(
        self, household_id: int, period: Optional[BudgetPeriodType] = None
    ) -> list[Budget]:
        """List budgets of a household, optionally of one period type."""
        pass

    @abstractmethod
    def update_budget(
        self,
        budget_id: int,
        amount: Optional[Decimal] = None,
        period: Optional[BudgetPeriodType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        clear_end_date: bool = False,
    ) -> None:
        """Update budget fields.

        Args:
            clear_end_date: If True, remove the end date (end_date must be None)
        """
        pass

    @abstractmethod
    def delete_budget(self, budget_id: int) -> None:
        """Delete a budget."""
        pass

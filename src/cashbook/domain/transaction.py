"""Transaction domain service."""

import logging
from typing import Optional
from datetime import date
from decimal import Decimal

from cashbook.database.base import Database
from cashbook.domain.categorization import categorize
from cashbook.domain.entities import Transaction, TransactionKind
from cashbook.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_category(self, household_id: int, category_id: int) -> None:
        category = self.db.get_category(category_id)
        if category is None or category.household_id != household_id:
            raise NotFoundError(category_not_found(category_id))

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
        created_by: Optional[str] = None,
    ) -> int:
        """Create a manual transaction.

        The amount is stored as an absolute value. Without a category, the
        household's patterns are applied to the description. With an
        account, the account's stored balance moves by the signed amount.

        Args:
            household_id: Household ID
            date: Transaction date
            description: Description text
            amount: Amount; the sign is ignored, kind decides direction
            kind: Income or expense
            category_id: Optional category ID
            account_id: Optional account ID
            balance_after: Optional account balance after this transaction
            created_by: Optional user ID

        Returns:
            Transaction ID

        Raises:
            ValidationError: If description is blank or kind is unknown
            NotFoundError: If account or category doesn't exist
        """
        description = description.strip()
        if not description:
            raise ValidationError("Description must not be empty")
        try:
            kind = TransactionKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown transaction kind '{kind}'") from None
        amount = abs(Decimal(amount))

        account = None
        if account_id is not None:
            account = self.db.get_account(account_id)
            if account is None or account.household_id != household_id:
                raise NotFoundError(account_not_found(account_id))

        if category_id is not None:
            self._check_category(household_id, category_id)
        else:
            category_id = categorize(description, self.db.list_patterns(household_id))

        transaction_id = self.db.create_transaction(
            household_id=household_id,
            date=date,
            description=description,
            amount=amount,
            kind=kind,
            category_id=category_id,
            account_id=account_id,
            balance_after=balance_after,
            created_by=created_by,
        )

        if account is not None:
            delta = amount if kind == TransactionKind.INCOME else -amount
            self.db.update_account_balance(account.id, account.balance + delta)
            logger.info("Moved balance of account %s by %s", account.id, delta)

        return transaction_id

    def get_transaction(self, household_id: int, transaction_id: int) -> Transaction:
        """Get a transaction of a household.

        Raises:
            NotFoundError: If transaction does not exist in the household
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None or transaction.household_id != household_id:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

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
        """List transactions with optional filters.

        Args:
            household_id: Household ID
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            category_id: Optional category ID filter
            account_id: Optional account ID filter
            uncategorized: If True, only return transactions without a category
            import_batch_id: Optional import batch filter

        Returns:
            Transactions, newest first

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError(f"Start date {start_date} is after end date {end_date}")
        return self.db.list_transactions(
            household_id,
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
            account_id=account_id,
            uncategorized=uncategorized,
            import_batch_id=import_batch_id,
        )

    def update_category(self, household_id: int, transaction_id: int, category_id: Optional[int]) -> None:
        """Set or clear (None) a transaction's category.

        Raises:
            NotFoundError: If transaction or category doesn't exist
        """
        self.get_transaction(household_id, transaction_id)
        if category_id is not None:
            self._check_category(household_id, category_id)
        self.db.update_transaction_category(transaction_id, category_id)

    def update_transaction(
        self,
        household_id: int,
        transaction_id: int,
        *,
        date: Optional[date] = None,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        kind: Optional[TransactionKind] = None,
        account_id: Optional[int] = None,
        balance_after: Optional[Decimal] = None,
    ) -> Transaction:
        """Update transaction fields.

        Fields left as None are unchanged. Like deletion, an edit does not
        move the account's stored balance.

        Args:
            household_id: Household ID
            transaction_id: Transaction ID to update
            date: Optional new date
            description: Optional new description
            amount: Optional new amount; the sign is ignored
            kind: Optional new kind
            account_id: Optional new account ID
            balance_after: Optional new balance after this transaction

        Returns:
            The updated transaction

        Raises:
            ValidationError: If nothing is given, description is blank or kind is unknown
            NotFoundError: If transaction or account doesn't exist in the household
        """
        if all(v is None for v in (date, description, amount, kind, account_id, balance_after)):
            raise ValidationError("No updates provided")

        self.get_transaction(household_id, transaction_id)

        if description is not None:
            description = description.strip()
            if not description:
                raise ValidationError("Description must not be empty")
        if kind is not None:
            try:
                kind = TransactionKind(kind)
            except ValueError:
                raise ValidationError(f"Unknown transaction kind '{kind}'") from None
        if amount is not None:
            amount = abs(Decimal(amount))
        if account_id is not None:
            account = self.db.get_account(account_id)
            if account is None or account.household_id != household_id:
                raise NotFoundError(account_not_found(account_id))

        self.db.update_transaction(
            transaction_id,
            date=date,
            description=description,
            amount=amount,
            kind=kind,
            account_id=account_id,
            balance_after=balance_after,
        )
        logger.info("Updated transaction %s", transaction_id)
        return self.db.get_transaction(transaction_id)

    def set_excluded(self, household_id: int, transaction_id: int, excluded: bool = True) -> None:
        """Include or exclude a transaction from reports and budgets."""
        self.get_transaction(household_id, transaction_id)
        self.db.update_transaction_excluded(transaction_id, excluded)

    def delete_transaction(self, household_id: int, transaction_id: int) -> None:
        """Delete a transaction. The account balance is left unchanged."""
        self.get_transaction(household_id, transaction_id)
        self.db.delete_transaction(transaction_id)

"""Account domain service."""

import logging
from decimal import Decimal
from typing import Optional

from cashbook.database.base import Database
from cashbook.domain.entities import ACCOUNT_TYPES, Account, AccountBalanceSnapshot
from cashbook.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
)

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing bank accounts and their balance history."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    @staticmethod
    def _validate_fields(account_type: Optional[str], last4: Optional[str]) -> None:
        if account_type is not None and account_type not in ACCOUNT_TYPES:
            raise ValidationError(
                f"Unknown account type '{account_type}'. Expected one of: {', '.join(ACCOUNT_TYPES)}"
            )
        if last4 is not None and not (len(last4) == 4 and last4.isdigit()):
            raise ValidationError("Account number must be the last 4 digits")

    def create_account(
        self,
        household_id: int,
        name: str,
        account_type: str = "checking",
        institution: Optional[str] = None,
        account_number_last4: Optional[str] = None,
        balance: Decimal = Decimal("0"),
        currency: Optional[str] = None,
    ) -> int:
        """Create a new account.

        The initial balance is always recorded as the first snapshot, even
        when it is zero, so later reconciliation has a baseline.

        Args:
            household_id: Household ID
            name: Account name
            account_type: One of ACCOUNT_TYPES
            institution: Optional bank name
            account_number_last4: Optional last 4 digits of the account number
            balance: Opening balance
            currency: Currency code; defaults to the household currency

        Returns:
            Account ID

        Raises:
            ValidationError: If a field is invalid
            ConflictError: If an account with this name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name must not be empty")
        self._validate_fields(account_type, account_number_last4)

        for acc in self.db.list_accounts(household_id):
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        if currency is None:
            household = self.db.get_household(household_id)
            currency = household.currency if household is not None else "USD"

        account_id = self.db.create_account(
            household_id=household_id,
            name=name,
            account_type=account_type,
            institution=institution,
            account_number_last4=account_number_last4,
            balance=balance,
            currency=currency.upper(),
        )
        self.db.add_balance_snapshot(account_id, balance)
        return account_id

    def get_account(self, household_id: int, account_id: int) -> Account:
        """Get an account of a household.

        Raises:
            NotFoundError: If account does not exist in the household
        """
        account = self.db.get_account(account_id)
        if account is None or account.household_id != household_id:
            raise NotFoundError(account_not_found(account_id))
        return account

    def find_account(self, household_id: int, name: str) -> Optional[Account]:
        """Find an account by exact name."""
        for acc in self.db.list_accounts(household_id):
            if acc.name == name:
                return acc
        return None

    def list_accounts(self, household_id: int, active_only: bool = False) -> list[Account]:
        """List accounts, active first, then by name."""
        accounts = self.db.list_accounts(household_id)
        if active_only:
            return [acc for acc in accounts if acc.is_active]
        return accounts

    def update_account(
        self,
        household_id: int,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[str] = None,
        institution: Optional[str] = None,
        account_number_last4: Optional[str] = None,
        balance: Optional[Decimal] = None,
        is_active: Optional[bool] = None,
    ) -> Account:
        """Update account fields.

        A balance change appends a snapshot to the balance history.

        Returns:
            The updated account

        Raises:
            NotFoundError: If account does not exist in the household
            ValidationError: If a field is invalid
            ConflictError: If the new name is taken
        """
        self.get_account(household_id, account_id)
        self._validate_fields(account_type, account_number_last4)
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Account name must not be empty")
            for acc in self.db.list_accounts(household_id):
                if acc.id != account_id and acc.name == name:
                    raise ConflictError(f"Account with name '{name}' already exists")

        self.db.update_account(
            account_id,
            name=name,
            account_type=account_type,
            institution=institution,
            account_number_last4=account_number_last4,
            is_active=is_active,
        )
        if balance is not None:
            self.set_balance(household_id, account_id, balance)
        return self.get_account(household_id, account_id)

    def set_balance(self, household_id: int, account_id: int, balance: Decimal) -> None:
        """Overwrite the stored balance and record a snapshot."""
        self.get_account(household_id, account_id)
        self.db.update_account_balance(account_id, balance)
        self.db.add_balance_snapshot(account_id, balance)
        logger.info("Set balance of account %s to %s", account_id, balance)

    def deactivate(self, household_id: int, account_id: int) -> None:
        """Mark an account inactive, keeping its transactions."""
        self.get_account(household_id, account_id)
        self.db.update_account(account_id, is_active=False)

    def delete_account(self, household_id: int, account_id: int) -> None:
        """Delete an account.

        Raises:
            NotFoundError: If account does not exist in the household
            DependencyError: If transactions still reference the account
        """
        self.get_account(household_id, account_id)

        transaction_count = self.db.get_account_transaction_count(account_id)
        if transaction_count > 0:
            raise DependencyError(account_delete_blocked(account_id, transaction_count))

        self.db.delete_account(account_id)

    def balance_history(self, household_id: int, account_id: int) -> list[AccountBalanceSnapshot]:
        """List balance snapshots, oldest first."""
        self.get_account(household_id, account_id)
        return self.db.list_balance_snapshots(account_id)

"""Account balance reconciliation.

The calculated balance is derived from the best baseline available:

1. ``checkpoint``: the latest transaction carrying a CSV-reported
   ``balance_after``, plus the net of later transactions without one;
2. ``snapshot``: the earliest balance snapshot plus the net of all of the
   account's transactions;
3. ``stored``: the stored balance itself, for accounts with no baseline.
"""

import logging
from typing import Optional

from cashbook.database.base import Database
from cashbook.domain.entities import Reconciliation
from cashbook.domain.errors import NotFoundError, account_not_found

logger = logging.getLogger(__name__)

METHOD_CHECKPOINT = "checkpoint"
METHOD_SNAPSHOT = "snapshot"
METHOD_STORED = "stored"


class ReconciliationService:
    """Service comparing stored account balances with transaction history."""

    def __init__(self, db: Database):
        """Initialize reconciliation service.

        Args:
            db: Database instance
        """
        self.db = db

    def reconcile(self, account_id: int, household_id: Optional[int] = None) -> Reconciliation:
        """Compare an account's stored balance with its calculated balance.

        Args:
            account_id: Account ID
            household_id: If given, the account must belong to it

        Returns:
            Reconciliation with difference = stored - calculated

        Raises:
            NotFoundError: If account doesn't exist
        """
        account = self.db.get_account(account_id)
        if account is None or (household_id is not None and account.household_id != household_id):
            raise NotFoundError(account_not_found(account_id))

        checkpoint = self.db.get_latest_balance_checkpoint(account_id)
        if checkpoint is not None:
            calculated = checkpoint.balance_after + self.db.get_account_net(account_id, after=checkpoint)
            method = METHOD_CHECKPOINT
        else:
            snapshots = self.db.list_balance_snapshots(account_id)
            if snapshots:
                calculated = snapshots[0].balance + self.db.get_account_net(account_id)
                method = METHOD_SNAPSHOT
            else:
                calculated = account.balance
                method = METHOD_STORED

        difference = account.balance - calculated
        if difference:
            logger.info(
                "Account %s differs by %s (stored %s, calculated %s via %s)",
                account_id,
                difference,
                account.balance,
                calculated,
                method,
            )
        return Reconciliation(
            account_id=account_id,
            stored_balance=account.balance,
            calculated_balance=calculated,
            difference=difference,
            method=method,
        )

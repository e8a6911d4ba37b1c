"""CSV import domain service.

Rows are processed strictly in file order, one store write per row. A row
that fails validation or persistence is counted and reported while the
remaining rows continue, so a partial import is a normal outcome.
"""

import logging
import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from cashbook.database.base import Database
from cashbook.domain.categorization import categorize
from cashbook.domain.csv_detect import detect_delimiter, read_csv
from cashbook.domain.entities import CSVMapping, ImportResult, TransactionKind
from cashbook.domain.errors import (
    DomainError,
    MalformedCSVError,
    NotFoundError,
    ValidationError,
    account_not_found,
    mapping_not_found,
)
from cashbook.utils.amount_parser import parse_amount
from cashbook.utils.date_parser import parse_csv_date

logger = logging.getLogger(__name__)

UNKNOWN_DESCRIPTION = "Unknown"
INCOME_TYPE_MARKERS = ("credit", "income")


class ColumnRole(Enum):
    """Role a CSV column plays in a transaction row."""

    DATE = "date"
    DESCRIPTION = "description"
    AMOUNT = "amount"
    TYPE = "type"
    BALANCE = "balance"


REQUIRED_ROLES = (ColumnRole.DATE, ColumnRole.AMOUNT)


@dataclass(frozen=True)
class ImportMapping:
    """Column layout used for one import."""

    date_column: str
    description_column: str
    amount_column: str
    type_column: Optional[str] = None
    balance_column: Optional[str] = None
    date_format: Optional[str] = None
    delimiter: Optional[str] = None
    has_header: bool = True

    @classmethod
    def from_csv_mapping(cls, mapping: CSVMapping) -> "ImportMapping":
        return cls(
            date_column=mapping.date_column,
            description_column=mapping.description_column,
            amount_column=mapping.amount_column,
            type_column=mapping.type_column,
            balance_column=mapping.balance_column,
            date_format=mapping.date_format,
            delimiter=mapping.delimiter,
            has_header=mapping.has_header,
        )

    def columns(self) -> dict[ColumnRole, str]:
        """Map each mapped role to its column name."""
        columns = {
            ColumnRole.DATE: self.date_column,
            ColumnRole.DESCRIPTION: self.description_column,
            ColumnRole.AMOUNT: self.amount_column,
        }
        if self.type_column:
            columns[ColumnRole.TYPE] = self.type_column
        if self.balance_column:
            columns[ColumnRole.BALANCE] = self.balance_column
        return columns


@dataclass(frozen=True)
class ParsedRow:
    """A validated CSV row ready to be stored."""

    date: date
    description: str
    amount: Decimal
    kind: TransactionKind
    balance: Optional[Decimal]


def _cell(raw: dict[str, str], columns: dict[ColumnRole, str], role: ColumnRole) -> str:
    column = columns.get(role)
    if column is None:
        return ""
    return (raw.get(column) or "").strip()


def parse_row(raw: dict[str, str], columns: dict[ColumnRole, str], date_format: Optional[str] = None) -> ParsedRow:
    """Validate one raw CSV row.

    The amount keeps its sign here only to decide the kind; the stored
    amount is always the absolute value.

    Args:
        raw: Row values keyed by column name
        columns: Column name for each role
        date_format: Optional date format with YYYY, YY, MM and DD tokens

    Returns:
        ParsedRow

    Raises:
        InvalidDateError: If the date is missing or unparseable
        InvalidAmountError: If the amount or balance is unparseable
    """
    txn_date = parse_csv_date(_cell(raw, columns, ColumnRole.DATE), date_format)
    description = _cell(raw, columns, ColumnRole.DESCRIPTION) or UNKNOWN_DESCRIPTION

    amount_text = _cell(raw, columns, ColumnRole.AMOUNT)
    if not amount_text:
        raise ValidationError("Missing amount")
    signed = parse_amount(amount_text)

    balance = None
    balance_text = _cell(raw, columns, ColumnRole.BALANCE)
    if balance_text:
        balance = parse_amount(balance_text)

    type_text = _cell(raw, columns, ColumnRole.TYPE).lower()
    if any(marker in type_text for marker in INCOME_TYPE_MARKERS) or signed > 0:
        kind = TransactionKind.INCOME
    else:
        kind = TransactionKind.EXPENSE

    return ParsedRow(date=txn_date, description=description, amount=abs(signed), kind=kind, balance=balance)


def new_batch_id() -> int:
    """Millisecond timestamp shared by every row of one import."""
    return int(time.time() * 1000)


class CSVImportService:
    """Service for importing bank statement CSV content."""

    def __init__(self, db: Database):
        """Initialize CSV import service.

        Args:
            db: Database instance
        """
        self.db = db

    def import_with_mapping(
        self,
        household_id: int,
        csv_text: str,
        mapping_name: str,
        account_id: Optional[int] = None,
        created_by: Optional[str] = None,
    ) -> ImportResult:
        """Import CSV content using a saved mapping.

        Raises:
            NotFoundError: If the mapping or account does not exist
            MalformedCSVError: If the content cannot be read as a whole
        """
        mapping = self.db.get_csv_mapping_by_name(household_id, mapping_name)
        if mapping is None:
            raise NotFoundError(mapping_not_found(mapping_name))
        return self.import_transactions(
            household_id, csv_text, mapping, account_id=account_id, created_by=created_by
        )

    def import_transactions(
        self,
        household_id: int,
        csv_text: str,
        mapping: Union[CSVMapping, ImportMapping],
        account_id: Optional[int] = None,
        created_by: Optional[str] = None,
    ) -> ImportResult:
        """Import transactions from CSV content.

        Args:
            household_id: Household receiving the transactions
            csv_text: Raw CSV content
            mapping: Column layout (saved CSVMapping or ad-hoc ImportMapping)
            account_id: Optional account the rows belong to
            created_by: Optional user ID recorded on each row

        Returns:
            ImportResult with imported/failed counts, the batch ID, the
            final balance applied to the account (if any) and one message
            per failed row

        Raises:
            NotFoundError: If account does not exist in the household
            MalformedCSVError: If the content is empty, unparseable, or
                lacks the mapped date or amount column
        """
        if isinstance(mapping, CSVMapping):
            mapping = ImportMapping.from_csv_mapping(mapping)

        if account_id is not None:
            account = self.db.get_account(account_id)
            if account is None or account.household_id != household_id:
                raise NotFoundError(account_not_found(account_id))

        delimiter = mapping.delimiter or detect_delimiter(csv_text)
        headers, rows = read_csv(csv_text, delimiter, has_header=mapping.has_header)

        columns = mapping.columns()
        missing = [columns[role] for role in REQUIRED_ROLES if columns[role] not in headers]
        if missing:
            raise MalformedCSVError(f"CSV file missing required columns: {', '.join(missing)}")

        patterns = self.db.list_patterns(household_id)
        batch_id = new_batch_id()
        logger.info("Importing %d rows into household %s (batch %s)", len(rows), household_id, batch_id)

        imported = 0
        errors: list[str] = []
        last_balance: Optional[Decimal] = None

        for row_num, raw in enumerate(rows, start=1):
            try:
                parsed = parse_row(raw, columns, mapping.date_format)
                self.db.create_transaction(
                    household_id=household_id,
                    date=parsed.date,
                    description=parsed.description,
                    amount=parsed.amount,
                    kind=parsed.kind,
                    category_id=categorize(parsed.description, patterns),
                    account_id=account_id,
                    balance_after=parsed.balance,
                    import_batch_id=batch_id,
                    created_by=created_by,
                )
            except DomainError as e:
                logger.warning("Row %d failed: %s", row_num, e)
                errors.append(f"Row {row_num}: {e}")
                continue

            imported += 1
            if parsed.balance is not None:
                last_balance = parsed.balance

        final_balance = None
        if account_id is not None and last_balance is not None:
            self.db.update_account_balance(account_id, last_balance)
            self.db.add_balance_snapshot(account_id, last_balance)
            final_balance = last_balance
            logger.info("Set balance of account %s to %s from import", account_id, last_balance)

        logger.info("Imported %d rows, %d failed (batch %s)", imported, len(errors), batch_id)
        return ImportResult(
            imported=imported,
            failed=len(errors),
            batch_id=batch_id,
            final_balance=final_balance,
            errors=errors,
        )

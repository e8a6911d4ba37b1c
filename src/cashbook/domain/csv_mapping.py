"""CSV mapping domain service."""

from typing import Optional

from cashbook.database.base import Database
from cashbook.domain.entities import CSVMapping
from cashbook.domain.errors import ConflictError, NotFoundError, ValidationError, mapping_not_found

ALLOWED_DELIMITERS = (",", ";", "\t", "|")
DEFAULT_DATE_FORMAT = "YYYY-MM-DD"


class CSVMappingService:
    """Service for saved CSV column mappings."""

    def __init__(self, db: Database):
        """Initialize CSV mapping service.

        Args:
            db: Database instance
        """
        self.db = db

    def save_mapping(
        self,
        household_id: int,
        name: str,
        date_column: str,
        description_column: str,
        amount_column: str,
        type_column: Optional[str] = None,
        balance_column: Optional[str] = None,
        date_format: Optional[str] = None,
        delimiter: Optional[str] = None,
        has_header: bool = True,
    ) -> int:
        """Save a named CSV mapping.

        Args:
            household_id: Household ID
            name: Mapping name, unique within the household
            date_column: Header of the date column
            description_column: Header of the description column
            amount_column: Header of the amount column
            type_column: Optional header of a credit/debit type column
            balance_column: Optional header of a running balance column
            date_format: Date format using YYYY, YY, MM and DD tokens
            delimiter: Field delimiter
            has_header: Whether the first row holds column names

        Returns:
            Mapping ID

        Raises:
            ValidationError: If a required field is blank or the delimiter
                is not supported
            ConflictError: If a mapping with this name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Mapping name must not be empty")
        for label, column in (
            ("date", date_column),
            ("description", description_column),
            ("amount", amount_column),
        ):
            if not column or not column.strip():
                raise ValidationError(f"Mapping must name a {label} column")

        delimiter = delimiter or ","
        if delimiter not in ALLOWED_DELIMITERS:
            raise ValidationError(f"Unsupported delimiter {delimiter!r}")

        if self.db.get_csv_mapping_by_name(household_id, name) is not None:
            raise ConflictError(f"CSV mapping '{name}' already exists")

        return self.db.create_csv_mapping(
            household_id=household_id,
            name=name,
            date_column=date_column.strip(),
            description_column=description_column.strip(),
            amount_column=amount_column.strip(),
            type_column=type_column.strip() if type_column else None,
            balance_column=balance_column.strip() if balance_column else None,
            date_format=date_format or DEFAULT_DATE_FORMAT,
            delimiter=delimiter,
            has_header=has_header,
        )

    def get_mapping(self, household_id: int, mapping_id: int) -> CSVMapping:
        """Get mapping by ID.

        Raises:
            NotFoundError: If mapping does not exist in the household
        """
        mapping = self.db.get_csv_mapping(mapping_id)
        if mapping is None or mapping.household_id != household_id:
            raise NotFoundError(f"CSV mapping {mapping_id} not found")
        return mapping

    def get_mapping_by_name(self, household_id: int, name: str) -> CSVMapping:
        """Get mapping by name.

        Raises:
            NotFoundError: If no mapping has this name
        """
        mapping = self.db.get_csv_mapping_by_name(household_id, name.strip())
        if mapping is None:
            raise NotFoundError(mapping_not_found(name))
        return mapping

    def list_mappings(self, household_id: int) -> list[CSVMapping]:
        """List mappings, newest first."""
        return self.db.list_csv_mappings(household_id)

    def delete_mapping(self, household_id: int, name: str) -> None:
        """Delete a mapping by name."""
        mapping = self.get_mapping_by_name(household_id, name)
        self.db.delete_csv_mapping(mapping.id)

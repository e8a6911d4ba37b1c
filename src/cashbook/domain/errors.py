"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidAmountError(ValidationError):
    """Amount string could not be turned into a number."""


class InvalidDateError(ValidationError):
    """Date string could not be turned into a calendar date."""


class MalformedCSVError(ValidationError):
    """CSV content cannot be parsed as a whole."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class UnauthorizedAccessError(DomainError):
    """User is not a member of the household being accessed."""


class StoreError(DomainError):
    """The persistent store rejected or failed a statement."""


def household_not_found(household_id: int) -> str:
    """Return message for missing household."""
    return f"Household {household_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def budget_not_found(budget_id: int) -> str:
    """Return message for missing budget."""
    return f"Budget {budget_id} not found"


def mapping_not_found(name: str) -> str:
    """Return message for missing CSV mapping by name."""
    return f"CSV mapping '{name}' not found"


def not_a_member(user_id: str, household_id: int) -> str:
    """Return message for failed membership checks."""
    return f"User '{user_id}' is not a member of household {household_id}"


def account_delete_blocked(account_id: int, transaction_count: int) -> str:
    """Return message when account still has transactions."""
    return (
        f"Cannot delete account {account_id}: it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Set it as inactive instead."
    )

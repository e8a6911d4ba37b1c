"""CLI helpers resolving households, accounts and categories from user input.

Every household-scoped command goes through :func:`resolve_household_or_exit`,
which applies the membership gate when an acting user is configured.
"""

import click

from cashbook.cli.error_handling import handle_domain_error
from cashbook.domain.account import AccountService
from cashbook.domain.category import CategoryService
from cashbook.domain.errors import DomainError, NotFoundError, ValidationError
from cashbook.domain.household import HouseholdService


def _find_household(service: HouseholdService, household: str | None) -> int:
    households = service.list_households()
    if household is None:
        if len(households) == 1:
            return households[0].id
        if not households:
            raise NotFoundError("No households found. Create one with 'household create'.")
        raise ValidationError("Several households exist; choose one with --household")

    if household.isdigit():
        return service.get_household(int(household)).id
    for item in households:
        if item.name == household:
            return item.id
    raise NotFoundError(f"Household '{household}' not found")


def resolve_household_or_exit(ctx: click.Context) -> int:
    """Resolve the selected household and check membership, or exit."""
    service = HouseholdService(ctx.obj["db"])
    try:
        household_id = _find_household(service, ctx.obj.get("household"))
        user = ctx.obj.get("user")
        if user:
            service.require_member(user, household_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    return household_id


def resolve_account_or_exit(ctx: click.Context, household_id: int, account: str | int) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    service = AccountService(ctx.obj["db"])
    try:
        if isinstance(account, int) or str(account).isdigit():
            return service.get_account(household_id, int(account)).id
        found = service.find_account(household_id, account)
        if found is None:
            raise NotFoundError(f"Account '{account}' not found")
        return found.id
    except DomainError as e:
        handle_domain_error(ctx, e)


def resolve_category_or_exit(ctx: click.Context, household_id: int, category: str) -> int:
    """Resolve category name or ID, or exit with a CLI error."""
    service = CategoryService(ctx.obj["db"])
    found = service.get_category_by_name(household_id, category)
    if found is None and category.isdigit():
        found = service.get_category(int(category))
        if found is not None and found.household_id != household_id:
            found = None
    if found is None:
        handle_domain_error(ctx, NotFoundError(f"Category '{category}' not found"))
    return found.id

"""Domain layer for cashbook application.

Services are resolved lazily: utils and the database layer import
``cashbook.domain.errors`` and ``cashbook.domain.entities`` directly, and an
eager import of the services here would cycle back into them.
"""

_SERVICES = {
    "HouseholdService": "cashbook.domain.household",
    "AccountService": "cashbook.domain.account",
    "CategoryService": "cashbook.domain.category",
    "CategorizationService": "cashbook.domain.categorization",
    "CSVMappingService": "cashbook.domain.csv_mapping",
    "CSVImportService": "cashbook.domain.csv_import",
    "TransactionService": "cashbook.domain.transaction",
    "ReconciliationService": "cashbook.domain.reconciliation",
    "BudgetService": "cashbook.domain.budget",
    "SummaryService": "cashbook.domain.summary",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

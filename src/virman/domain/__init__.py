"""Domain layer for virman application."""

_SERVICES = {
    "AccountService": "virman.domain.account",
    "TransactionService": "virman.domain.transaction",
    "TransferService": "virman.domain.transfer",
    "DashboardService": "virman.domain.dashboard",
    "IntegrityService": "virman.domain.integrity",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports the entities in this
# package, so they are loaded lazily.
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

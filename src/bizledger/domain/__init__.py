"""Domain layer for bizledger application."""

# Services are imported lazily: the database layer imports domain.entities,
# and the services import the database layer.
_SERVICES = {
    "TransactionService": "bizledger.domain.transaction",
    "ClientService": "bizledger.domain.client",
    "CostService": "bizledger.domain.cost",
}


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = list(_SERVICES)

"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested record does not exist."""


class PersistenceError(DomainError):
    """The storage backend was unavailable or rejected a write."""


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def client_not_found(client_id: int) -> str:
    """Return message for missing client."""
    return f"Client {client_id} not found"


def cost_not_found(cost_id: int) -> str:
    """Return message for missing cost."""
    return f"Cost {cost_id} not found"


def missing_required_fields(fields: list[str]) -> str:
    """Return message listing required fields that were not supplied."""
    return f"Missing required fields: {', '.join(fields)}"


def category_not_allowed(category: str, transaction_type: str) -> str:
    """Return message for a category used with the wrong direction."""
    return f"Category '{category}' is not valid for {transaction_type} transactions"


def persistence_failed(action: str, error: Exception) -> str:
    """Return normalized message for a failed storage operation."""
    return f"Failed to {action}: {error}"

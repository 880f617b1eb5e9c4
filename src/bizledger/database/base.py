"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from bizledger.domain.entities import (
    AustralianState,
    Client,
    Cost,
    CostType,
    PaymentMethod,
    Transaction,
    TransactionCategory,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for bizledger.

    Implementations raise ``PersistenceError`` when the backend fails and
    return ``None`` (or ``False`` for deletes) when an id has no record.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Client operations
    @abstractmethod
    def create_client(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone_number: str,
        suburb: str,
        post_code: str,
        state: AustralianState,
        services_purchased: tuple[str, ...],
        created_by: str,
        created_by_name: Optional[str] = None,
    ) -> int:
        """Create a client. Returns client ID."""
        pass

    @abstractmethod
    def get_client(self, client_id: int) -> Optional[Client]:
        """Get client by ID."""
        pass

    @abstractmethod
    def list_clients(
        self,
        state: Optional[AustralianState] = None,
        service: Optional[str] = None,
    ) -> list[Client]:
        """List clients newest first, optionally filtered by state or service."""
        pass

    @abstractmethod
    def update_client(self, client_id: int, fields: dict[str, Any]) -> bool:
        """Apply a partial update. Returns False if the client doesn't exist."""
        pass

    @abstractmethod
    def delete_client(self, client_id: int) -> bool:
        """Delete a client. Returns False if the client doesn't exist."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        type: TransactionType,
        category: TransactionCategory,
        amount_net: Decimal,
        gst_amount: Decimal,
        amount_gross: Decimal,
        payment_method: PaymentMethod,
        gst_applied: bool,
        date: date,
        created_by: str,
        custom_category: Optional[str] = None,
        description: Optional[str] = None,
        client_id: Optional[int] = None,
        client_name: Optional[str] = None,
        created_by_name: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType] = None,
        category: Optional[TransactionCategory] = None,
        payment_method: Optional[PaymentMethod] = None,
    ) -> list[Transaction]:
        """List transactions by date descending with optional filters."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, fields: dict[str, Any]) -> bool:
        """Apply a partial update. Returns False if the transaction doesn't exist."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> bool:
        """Delete a transaction. Returns False if the transaction doesn't exist."""
        pass

    # Cost operations
    @abstractmethod
    def create_cost(
        self,
        name: str,
        cost_type: CostType,
        amount: Decimal,
        actual_volume: Optional[Decimal] = None,
    ) -> int:
        """Create a cost. Returns cost ID."""
        pass

    @abstractmethod
    def get_cost(self, cost_id: int) -> Optional[Cost]:
        """Get cost by ID."""
        pass

    @abstractmethod
    def list_costs(self, cost_type: Optional[CostType] = None) -> list[Cost]:
        """List costs, optionally filtered by type."""
        pass

    @abstractmethod
    def delete_cost(self, cost_id: int) -> bool:
        """Delete a cost. Returns False if the cost doesn't exist."""
        pass

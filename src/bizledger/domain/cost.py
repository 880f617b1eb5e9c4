"""Cost domain service."""

import logging
from decimal import Decimal
from typing import Callable, Optional, Sequence

from bizledger.database.base import Database
from bizledger.domain.entities import Cost, CostType
from bizledger.domain.errors import NotFoundError, ValidationError, cost_not_found
from bizledger.domain.gst import round_currency
from bizledger.domain.subscriptions import Channel, Subscription

logger = logging.getLogger(__name__)


class CostService:
    """Service for managing fixed and variable cost records."""

    def __init__(self, db: Database, channel: Optional[Channel[Cost]] = None):
        self.db = db
        self.channel = channel if channel is not None else Channel("costs")

    def create_cost(
        self,
        name: str,
        cost_type: CostType | str,
        amount: Decimal,
        actual_volume: Optional[Decimal] = None,
    ) -> int:
        """Create a cost.

        Args:
            name: Cost name
            cost_type: fixed or variable
            amount: Amount per period (fixed) or per unit (variable)
            actual_volume: Units consumed; only used for variable costs

        Returns:
            Cost ID

        Raises:
            ValidationError: If a field is missing or invalid
        """
        if not name or not name.strip():
            raise ValidationError("Cost name is required")
        try:
            cost_type = CostType(str(getattr(cost_type, "value", cost_type)).strip().lower())
        except ValueError:
            raise ValidationError(f"Invalid cost type '{cost_type}'. Expected fixed or variable")
        # Both columns hold two decimal places
        if amount is not None:
            amount = round_currency(amount)
        if amount is None or amount <= 0:
            raise ValidationError("Cost amount must be greater than zero")
        if actual_volume is not None:
            actual_volume = round_currency(actual_volume)
            if actual_volume < 0:
                raise ValidationError("Actual volume cannot be negative")
        if cost_type == CostType.FIXED:
            actual_volume = None

        cost_id = self.db.create_cost(
            name=name.strip(), cost_type=cost_type, amount=amount, actual_volume=actual_volume
        )
        logger.info("Created %s cost %s", cost_type.value, cost_id)
        self._publish()
        return cost_id

    def get_cost(self, cost_id: int) -> Optional[Cost]:
        return self.db.get_cost(cost_id)

    def list_costs(self, cost_type: Optional[CostType] = None) -> list[Cost]:
        return self.db.list_costs(cost_type=cost_type)

    def delete_cost(self, cost_id: int) -> None:
        """Delete a cost.

        Raises:
            NotFoundError: If the cost doesn't exist
        """
        if not self.db.delete_cost(cost_id):
            raise NotFoundError(cost_not_found(cost_id))
        logger.info("Deleted cost %s", cost_id)
        self._publish()

    def subscribe(self, callback: Callable[[Sequence[Cost]], None]) -> Subscription:
        """Receive the current cost set now and after every change."""
        subscription = self.channel.subscribe(callback)
        subscription.deliver(self.db.list_costs())
        return subscription

    def _publish(self) -> None:
        if self.channel.subscriber_count:
            self.channel.publish(self.db.list_costs())

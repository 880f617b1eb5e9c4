"""Unit-economics derivation.

Break-even, contribution margin, CAC and LTV estimates derived from
transactions, cost records and the number of clients. Inflow transactions
stand in for units sold, and every division is guarded by a floor of one so
that degenerate inputs produce zeros rather than errors.
"""

import logging
import math
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence

from bizledger.domain.entities import (
    BreakdownSlice,
    Cost,
    CostType,
    CVPPoint,
    ProductProfitability,
    Transaction,
    TransactionCategory,
    TransactionType,
    UnitEconomicsData,
    UnitEconomicsSummary,
)
from bizledger.domain.labels import category_label
from bizledger.domain.subscriptions import Subscribable, Subscription

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

CVP_STEPS = 10
CVP_MIN_UNITS = Decimal("10")
CVP_BEP_HEADROOM = Decimal("1.5")
CVP_VOLUME_HEADROOM = Decimal("1.2")
TOP_PRODUCTS = 5

VARIABLE_COSTS_COLOR = "#ef4444"
CONTRIBUTION_MARGIN_COLOR = "#22c55e"


def _inflows(transactions: Sequence[Transaction]) -> list[Transaction]:
    return [txn for txn in transactions if txn.type == TransactionType.INFLOW]


def build_cvp_series(
    break_even_point_units: int,
    total_units_sold: int,
    total_fixed_costs: Decimal,
    avg_variable_cost_per_unit: Decimal,
    avg_revenue_per_unit: Decimal,
) -> tuple[CVPPoint, ...]:
    """Build cost-volume-profit points from zero past break-even.

    The range runs to the largest of 1.5x break-even, 1.2x current volume
    and 10 units, in roughly ten equal integer steps.
    """
    max_units = max(
        Decimal(break_even_point_units) * CVP_BEP_HEADROOM,
        Decimal(total_units_sold) * CVP_VOLUME_HEADROOM,
        CVP_MIN_UNITS,
    )
    step = math.ceil(max_units / CVP_STEPS)

    points = []
    units = 0
    while units <= max_units:
        points.append(
            CVPPoint(
                units=units,
                fixed_cost=total_fixed_costs,
                total_cost=total_fixed_costs + avg_variable_cost_per_unit * units,
                revenue=avg_revenue_per_unit * units,
            )
        )
        units += step
    return tuple(points)


def build_product_profitability(
    inflows: Sequence[Transaction], contribution_margin_ratio: Decimal
) -> tuple[ProductProfitability, ...]:
    """Group inflow revenue by effective category and estimate margins.

    Custom names are used for OTHER when present. Margin applies the overall
    contribution margin ratio to each group. Returns the top groups by
    revenue.
    """
    revenue_by_category: dict[str, Decimal] = {}
    names: dict[str, str] = {}
    for txn in inflows:
        key = txn.effective_category
        revenue_by_category[key] = revenue_by_category.get(key, ZERO) + txn.amount_net
        names.setdefault(key, category_label(txn.category, txn.custom_category))

    products = [
        ProductProfitability(
            name=names[key],
            revenue=revenue,
            margin=revenue * (contribution_margin_ratio / HUNDRED),
        )
        for key, revenue in revenue_by_category.items()
    ]
    products.sort(key=lambda product: product.revenue, reverse=True)
    return tuple(products[:TOP_PRODUCTS])


def calculate_unit_economics(
    transactions: Iterable[Transaction],
    costs: Iterable[Cost],
    client_count: int,
) -> UnitEconomicsData:
    """Derive unit economics from transactions, costs and client count.

    Args:
        transactions: All transactions in scope
        costs: Fixed and variable cost records
        client_count: Number of clients, treated as customers acquired

    Returns:
        UnitEconomicsData with summary metrics and chart series. Growth
        fields are always zero since no historical baseline is kept.
    """
    transactions = list(transactions)
    costs = list(costs)
    inflows = _inflows(transactions)

    total_revenue = sum((txn.amount_net for txn in inflows), ZERO)
    total_units_sold = len(inflows) or 1
    avg_revenue_per_unit = total_revenue / total_units_sold

    total_fixed_costs = sum(
        (cost.amount for cost in costs if cost.cost_type == CostType.FIXED), ZERO
    )
    total_variable_costs = sum(
        (
            cost.amount * (cost.actual_volume or ZERO)
            for cost in costs
            if cost.cost_type == CostType.VARIABLE
        ),
        ZERO,
    )
    avg_variable_cost_per_unit = total_variable_costs / total_units_sold

    contribution_margin = total_revenue - total_variable_costs
    if total_revenue > 0:
        contribution_margin_ratio = contribution_margin / total_revenue * HUNDRED
    else:
        contribution_margin_ratio = ZERO

    unit_contribution = avg_revenue_per_unit - avg_variable_cost_per_unit
    if unit_contribution > 0:
        break_even_point_units = math.ceil(total_fixed_costs / unit_contribution)
    else:
        break_even_point_units = 0
    break_even_point_revenue = break_even_point_units * avg_revenue_per_unit

    marketing_spend = sum(
        (
            txn.amount_net
            for txn in transactions
            if txn.category == TransactionCategory.MARKETING
        ),
        ZERO,
    )
    total_customers = client_count or 1
    cac = marketing_spend / total_customers
    customer_ltv = total_revenue / total_customers

    summary = UnitEconomicsSummary(
        contribution_margin_ratio=contribution_margin_ratio,
        break_even_point_units=break_even_point_units,
        break_even_point_revenue=break_even_point_revenue,
        customer_ltv=customer_ltv,
        cac=cac,
    )

    return UnitEconomicsData(
        summary=summary,
        cvp_analysis=build_cvp_series(
            break_even_point_units,
            total_units_sold,
            total_fixed_costs,
            avg_variable_cost_per_unit,
            avg_revenue_per_unit,
        ),
        contribution_margin_breakdown=(
            BreakdownSlice("Variable Costs", total_variable_costs, VARIABLE_COSTS_COLOR),
            BreakdownSlice("Contribution Margin", contribution_margin, CONTRIBUTION_MARGIN_COLOR),
        ),
        product_profitability=build_product_profitability(inflows, contribution_margin_ratio),
    )


class UnitEconomicsMonitor:
    """Recompute unit economics whenever transactions, costs or clients change.

    Sources are channels or services: anything whose ``subscribe(callback)``
    returns a Subscription. Nothing is emitted until every source has
    delivered its first record set. After that each push triggers a full
    recompute.
    """

    def __init__(
        self,
        transactions: Subscribable,
        costs: Subscribable,
        clients: Subscribable,
        on_update: Callable[[UnitEconomicsData], None],
    ):
        self._sources = {"transactions": transactions, "costs": costs, "clients": clients}
        self._on_update = on_update
        self._latest: dict[str, Optional[tuple]] = {name: None for name in self._sources}
        self._subscriptions: list[Subscription] = []
        self.data: Optional[UnitEconomicsData] = None

    @property
    def loading(self) -> bool:
        return any(records is None for records in self._latest.values())

    def start(self) -> None:
        """Subscribe to all sources."""
        for name, source in self._sources.items():
            self._subscriptions.append(source.subscribe(self._receiver(name)))

    def stop(self) -> None:
        """Dispose every subscription."""
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions.clear()

    def _receiver(self, name: str) -> Callable[[Sequence], None]:
        def receive(records: Sequence) -> None:
            self._receive(name, records)

        return receive

    def _receive(self, name: str, records: Sequence) -> None:
        self._latest[name] = tuple(records)
        if self.loading:
            return
        self.data = calculate_unit_economics(
            self._latest["transactions"],
            self._latest["costs"],
            len(self._latest["clients"]),
        )
        logger.debug("Unit economics recomputed after %s changed", name)
        self._on_update(self.data)

    def __enter__(self) -> "UnitEconomicsMonitor":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

"""Tests for unit-economics derivation."""

from datetime import datetime, UTC
from decimal import Decimal

import pytest

from bizledger.domain.entities import (
    Cost,
    CostType,
    TransactionCategory,
    TransactionType,
)
from bizledger.domain.subscriptions import Channel
from bizledger.domain.unit_economics import (
    TOP_PRODUCTS,
    UnitEconomicsMonitor,
    build_cvp_series,
    calculate_unit_economics,
)


def _cost(cost_id, cost_type, amount, volume=None, name="Cost"):
    return Cost(
        id=cost_id,
        name=name,
        cost_type=cost_type,
        amount=Decimal(amount),
        actual_volume=None if volume is None else Decimal(volume),
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )


@pytest.fixture
def worked_example(make_transaction):
    """Ten inflows of $100, $400 fixed costs and $200 of variable costs."""
    transactions = [
        make_transaction(id=i, amount_net=Decimal("100.00")) for i in range(1, 11)
    ]
    costs = [
        _cost(1, CostType.FIXED, "400.00", name="Rent"),
        _cost(2, CostType.VARIABLE, "2.00", "100", name="Supplies"),
    ]
    return transactions, costs


def test_no_data_gives_zeros():
    data = calculate_unit_economics([], [], 0)

    assert data.summary.break_even_point_units == 0
    assert data.summary.break_even_point_revenue == 0
    assert data.summary.contribution_margin_ratio == 0
    assert data.summary.cac == 0
    assert data.summary.customer_ltv == 0
    assert data.product_profitability == ()
    # max_units falls back to 10 in steps of 1
    assert [point.units for point in data.cvp_analysis] == list(range(11))


def test_worked_example(worked_example):
    transactions, costs = worked_example

    data = calculate_unit_economics(transactions, costs, client_count=4)

    assert data.summary.contribution_margin_ratio == Decimal("80")
    assert data.summary.break_even_point_units == 5
    assert data.summary.break_even_point_revenue == Decimal("500")
    assert data.summary.customer_ltv == Decimal("250")
    assert data.summary.cac == 0


def test_growth_fields_are_zero(worked_example):
    transactions, costs = worked_example

    summary = calculate_unit_economics(transactions, costs, 1).summary

    assert summary.contribution_margin_growth == 0
    assert summary.ltv_growth == 0
    assert summary.cac_growth == 0


def test_cac_uses_marketing_spend(make_transaction):
    transactions = [
        make_transaction(id=1, amount_net=Decimal("1000.00")),
        make_transaction(
            id=2,
            type=TransactionType.OUTFLOW,
            category=TransactionCategory.MARKETING,
            amount_net=Decimal("300.00"),
        ),
    ]

    data = calculate_unit_economics(transactions, [], client_count=3)

    assert data.summary.cac == Decimal("100")
    assert data.summary.customer_ltv == Decimal("1000") / 3


def test_no_positive_unit_contribution_means_no_break_even(make_transaction):
    transactions = [make_transaction(amount_net=Decimal("10.00"))]
    costs = [
        _cost(1, CostType.FIXED, "100"),
        _cost(2, CostType.VARIABLE, "20", "1"),
    ]

    data = calculate_unit_economics(transactions, costs, 1)

    assert data.summary.break_even_point_units == 0
    assert data.summary.contribution_margin_ratio == Decimal("-100")


def test_variable_cost_without_volume_counts_as_zero(make_transaction):
    costs = [_cost(1, CostType.VARIABLE, "5.00")]

    data = calculate_unit_economics([make_transaction()], costs, 1)

    assert data.contribution_margin_breakdown[0].value == 0


def test_breakdown(worked_example):
    transactions, costs = worked_example

    breakdown = calculate_unit_economics(transactions, costs, 1).contribution_margin_breakdown

    assert [(part.name, part.value) for part in breakdown] == [
        ("Variable Costs", Decimal("200.00")),
        ("Contribution Margin", Decimal("800.00")),
    ]
    assert all(part.color.startswith("#") for part in breakdown)


def test_cvp_series_range_and_step():
    points = build_cvp_series(
        break_even_point_units=40,
        total_units_sold=10,
        total_fixed_costs=Decimal("400"),
        avg_variable_cost_per_unit=Decimal("20"),
        avg_revenue_per_unit=Decimal("100"),
    )

    # max_units = 60, step = 6
    assert [point.units for point in points] == list(range(0, 61, 6))
    last = points[-1]
    assert last.fixed_cost == Decimal("400")
    assert last.total_cost == Decimal("400") + Decimal("20") * 60
    assert last.revenue == Decimal("6000")


def test_cvp_series_uses_volume_headroom():
    points = build_cvp_series(0, 100, Decimal("0"), Decimal("0"), Decimal("1"))

    # max_units = 120, step = 12
    assert points[1].units == 12
    assert points[-1].units == 120


def test_product_profitability_groups_and_ranks(make_transaction):
    transactions = [
        make_transaction(id=1, amount_net=Decimal("50.00")),
        make_transaction(id=2, amount_net=Decimal("70.00")),
        make_transaction(id=3, category=TransactionCategory.INVESTMENT, amount_net=Decimal("500.00")),
        make_transaction(
            id=4,
            category=TransactionCategory.OTHER,
            custom_category="Workshops",
            amount_net=Decimal("30.00"),
        ),
        make_transaction(
            id=5,
            type=TransactionType.OUTFLOW,
            category=TransactionCategory.TAX,
            amount_net=Decimal("999.00"),
        ),
    ]

    products = calculate_unit_economics(transactions, [], 1).product_profitability

    assert [(p.name, p.revenue) for p in products] == [
        ("Investment", Decimal("500.00")),
        ("Client Payment", Decimal("120.00")),
        ("Workshops", Decimal("30.00")),
    ]
    # No variable costs, so the whole revenue is margin
    assert products[0].margin == Decimal("500.00")


def test_product_profitability_keeps_top_five(make_transaction):
    transactions = [
        make_transaction(
            id=i,
            category=TransactionCategory.OTHER,
            custom_category=f"Service {i}",
            amount_net=Decimal(i * 10),
        )
        for i in range(1, 9)
    ]

    products = calculate_unit_economics(transactions, [], 1).product_profitability

    assert len(products) == TOP_PRODUCTS
    assert products[0].name == "Service 8"
    assert products[-1].name == "Service 4"


class TestUnitEconomicsMonitor:
    """Tests for recomputation driven by change channels."""

    def test_waits_for_every_source(self, make_transaction):
        transactions, costs, clients = Channel("t"), Channel("c"), Channel("cl")
        updates = []

        with UnitEconomicsMonitor(transactions, costs, clients, updates.append) as monitor:
            transactions.publish([make_transaction()])
            costs.publish([])
            assert monitor.loading
            assert updates == []

            clients.publish([])
            assert not monitor.loading
            assert len(updates) == 1
            assert monitor.data is updates[0]

    def test_recomputes_on_every_push(self, make_transaction):
        transactions, costs, clients = Channel("t"), Channel("c"), Channel("cl")
        updates = []

        with UnitEconomicsMonitor(transactions, costs, clients, updates.append):
            transactions.publish([])
            costs.publish([])
            clients.publish([])
            transactions.publish([make_transaction(amount_net=Decimal("250.00"))])

        assert len(updates) == 2
        assert updates[-1].summary.customer_ltv == Decimal("250.00")

    def test_stop_disposes_subscriptions(self):
        transactions, costs, clients = Channel("t"), Channel("c"), Channel("cl")
        updates = []

        monitor = UnitEconomicsMonitor(transactions, costs, clients, updates.append)
        monitor.start()
        assert transactions.subscriber_count == 1
        monitor.stop()

        assert transactions.subscriber_count == 0
        assert costs.subscriber_count == 0
        assert clients.subscriber_count == 0

    def test_services_deliver_snapshot_on_subscribe(
        self, transaction_service, cost_service, client_service, sample_client
    ):
        cost_service.create_cost(name="Rent", cost_type="fixed", amount=Decimal("400"))
        updates = []

        with UnitEconomicsMonitor(
            transaction_service, cost_service, client_service, updates.append
        ) as monitor:
            assert not monitor.loading
            assert len(updates) == 1

            cost_service.create_cost(name="Insurance", cost_type="fixed", amount=Decimal("100"))

        assert len(updates) == 2
        assert updates[-1].cvp_analysis[0].fixed_cost == Decimal("500.00")

"""Tests for financial summary aggregation."""

from decimal import Decimal

from bizledger.domain.entities import FinancialSummary, PaymentMethod, TransactionType
from bizledger.domain.summary import calculate_financial_summary


def test_empty_summary_is_all_zero():
    summary = calculate_financial_summary([])

    assert summary == FinancialSummary()
    assert summary.total_income == 0
    assert summary.total_gst_payable == 0


def test_worked_example(make_transaction):
    transactions = [
        make_transaction(
            id=1,
            amount_net=Decimal("100.00"),
            gst_amount=Decimal("10.00"),
            amount_gross=Decimal("110.00"),
        ),
        make_transaction(
            id=2,
            type=TransactionType.OUTFLOW,
            amount_net=Decimal("50.00"),
            gst_amount=Decimal("5.00"),
            amount_gross=Decimal("55.00"),
        ),
    ]

    summary = calculate_financial_summary(transactions)

    assert summary.total_income == Decimal("110.00")
    assert summary.total_expenses == Decimal("55.00")
    assert summary.total_profit == Decimal("55.00")
    assert summary.total_gst_collected == Decimal("10.00")
    assert summary.total_gst_payable == Decimal("5.00")


def test_summary_is_order_invariant(make_transaction):
    transactions = [
        make_transaction(id=1, amount_gross=Decimal("110.00")),
        make_transaction(id=2, type=TransactionType.OUTFLOW, amount_gross=Decimal("22.00"), gst_amount=Decimal("2.00")),
        make_transaction(id=3, amount_gross=Decimal("33.00"), gst_amount=Decimal("3.00")),
    ]

    assert calculate_financial_summary(transactions) == calculate_financial_summary(
        list(reversed(transactions))
    )


def test_gst_only_counted_when_applied(make_transaction):
    transactions = [
        make_transaction(
            id=1,
            payment_method=PaymentMethod.CASH_IN_HAND,
            gst_applied=False,
            gst_amount=Decimal("0.00"),
            amount_gross=Decimal("100.00"),
        ),
        make_transaction(
            id=2,
            type=TransactionType.OUTFLOW,
            gst_applied=False,
            gst_amount=Decimal("7.00"),
            amount_gross=Decimal("70.00"),
        ),
    ]

    summary = calculate_financial_summary(transactions)

    assert summary.total_income == Decimal("100.00")
    assert summary.total_expenses == Decimal("70.00")
    assert summary.total_profit == Decimal("30.00")
    assert summary.total_gst_collected == 0
    assert summary.total_gst_payable == 0


def test_profit_can_be_negative(make_transaction):
    summary = calculate_financial_summary(
        [make_transaction(type=TransactionType.OUTFLOW, amount_gross=Decimal("110.00"))]
    )

    assert summary.total_profit == Decimal("-110.00")

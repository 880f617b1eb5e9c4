"""Financial summary aggregation."""

from decimal import Decimal
from typing import Iterable

from bizledger.domain.entities import FinancialSummary, Transaction, TransactionType


def calculate_financial_summary(transactions: Iterable[Transaction]) -> FinancialSummary:
    """Fold transactions into income, expense, profit and GST totals.

    Inflows add their gross amount to income and, when GST was applied,
    their GST to GST collected. Outflows do the same for expenses and GST
    payable. Callers filter by date beforehand.

    Args:
        transactions: Transactions to aggregate, in any order

    Returns:
        FinancialSummary; all zero for an empty input
    """
    total_income = Decimal("0")
    total_expenses = Decimal("0")
    total_gst_collected = Decimal("0")
    total_gst_payable = Decimal("0")

    for txn in transactions:
        if txn.type == TransactionType.INFLOW:
            total_income += txn.amount_gross
            if txn.gst_applied:
                total_gst_collected += txn.gst_amount
        else:
            total_expenses += txn.amount_gross
            if txn.gst_applied:
                total_gst_payable += txn.gst_amount

    return FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        total_profit=total_income - total_expenses,
        total_gst_collected=total_gst_collected,
        total_gst_payable=total_gst_payable,
    )

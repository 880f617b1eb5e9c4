"""Output formatting helpers shared by CLI commands."""

from decimal import Decimal

from bizledger.domain.entities import Transaction
from bizledger.domain.labels import category_label, payment_method_label


def format_money(amount) -> str:
    """Format an amount as dollars and cents."""
    amount = Decimal(amount)
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"


def format_percent(value) -> str:
    return f"{Decimal(value):.1f}%"


def transaction_detail_lines(txn: Transaction) -> list[str]:
    """Render every field of a transaction for the show command."""
    lines = [
        f"Transaction ID: {txn.id}",
        f"  Date: {txn.date}",
        f"  Type: {txn.type.value}",
        f"  Category: {category_label(txn.category, txn.custom_category)}",
        f"  Payment method: {payment_method_label(txn.payment_method)}",
        f"  Net: {format_money(txn.amount_net)}",
        f"  GST: {format_money(txn.gst_amount)} ({'applied' if txn.gst_applied else 'not applied'})",
        f"  Gross: {format_money(txn.amount_gross)}",
    ]
    if txn.description:
        lines.append(f"  Description: {txn.description}")
    if txn.client_id is not None or txn.client_name:
        lines.append(f"  Client: {txn.client_name or ''} (ID: {txn.client_id})")
    lines.append(f"  Created: {txn.created_at} by {txn.created_by_name or txn.created_by}")
    if txn.updated_by:
        lines.append(f"  Updated: {txn.updated_at} by {txn.updated_by_name or txn.updated_by}")
    return lines

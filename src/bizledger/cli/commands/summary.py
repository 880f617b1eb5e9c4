"""Financial summary command."""

from collections import defaultdict
from decimal import Decimal

import click
from bizledger.cli.date_filters import period_options, resolve_cli_date_range
from bizledger.cli.formatting import format_money
from bizledger.domain.entities import TransactionFilters, TransactionType
from bizledger.domain.labels import category_label, summary_card_icon, transaction_type_label
from bizledger.domain.summary import calculate_financial_summary
from bizledger.domain.transaction import TransactionService

SUMMARY_CARDS = [
    ("total_income", "Total Income"),
    ("total_expenses", "Total Expenses"),
    ("total_profit", "Net Profit"),
    ("total_gst_collected", "GST Collected"),
    ("total_gst_payable", "GST Payable"),
]


def _category_totals(transactions, txn_type: TransactionType) -> list[tuple[str, Decimal]]:
    """Net totals per display category, largest first."""
    totals: dict[str, Decimal] = defaultdict(Decimal)
    for txn in transactions:
        if txn.type == txn_type:
            totals[category_label(txn.category, txn.custom_category)] += txn.amount_net
    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))


@click.command("summary")
@period_options
@click.option("--by-category", is_flag=True, help="Break income and expenses down by category")
@click.pass_context
def summary(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    by_category: bool,
):
    """Show income, expenses, profit and GST totals.

    Examples:
        bizledger summary --period this-fy
        bizledger summary --start-date 01/07/2024 --end-date 30/09/2024 --by-category
    """
    service = TransactionService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    transactions = service.list_transactions(TransactionFilters(start_date=start, end_date=end))
    if not transactions:
        click.echo("No transactions found.")
        return

    totals = calculate_financial_summary(transactions)

    if start or end:
        click.echo(f"Period: {start or 'beginning'} to {end or 'today'}")
    click.echo(f"Transactions: {len(transactions)}")
    click.echo("-" * 50)
    for field, title in SUMMARY_CARDS:
        icon = summary_card_icon(field)
        click.echo(f"[{icon}] {title:<24} {format_money(getattr(totals, field)):>15}")

    if by_category:
        for txn_type in TransactionType:
            rows = _category_totals(transactions, txn_type)
            if not rows:
                continue
            click.echo()
            click.echo(transaction_type_label(txn_type))
            for name, amount in rows:
                click.echo(f"    {name:<30} {format_money(amount):>15}")


def register_commands(cli: click.Group) -> None:
    """Register summary command with main CLI."""
    cli.add_command(summary)

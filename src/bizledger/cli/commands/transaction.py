"""Transaction management commands."""

import click
from datetime import date
from decimal import Decimal
from bizledger.cli.date_filters import period_options, resolve_cli_date_range
from bizledger.cli.error_handling import handle_domain_error
from bizledger.cli.formatting import format_money, transaction_detail_lines
from bizledger.domain.client import ClientService
from bizledger.domain.entities import (
    PaymentMethod,
    TransactionCategory,
    TransactionFilters,
    TransactionType,
)
from bizledger.domain.errors import DomainError
from bizledger.domain.labels import category_label, payment_method_label
from bizledger.domain.summary import calculate_financial_summary
from bizledger.domain.transaction import TransactionService
from bizledger.utils.amount_parser import parse_amount
from bizledger.utils.client_resolver import resolve_client
from bizledger.utils.date_parser import parse_date

TYPE_CHOICES = click.Choice([t.value for t in TransactionType], case_sensitive=False)
CATEGORY_CHOICES = click.Choice([c.value for c in TransactionCategory], case_sensitive=False)
METHOD_CHOICES = click.Choice([m.value for m in PaymentMethod], case_sensitive=False)


def _parse_amount_option(ctx, amount: str) -> Decimal:
    try:
        return parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def _parse_date_option(ctx, value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--type", "txn_type", type=TYPE_CHOICES, required=True, help="INFLOW or OUTFLOW")
@click.option("--category", type=CATEGORY_CHOICES, required=True, help="Category valid for the type")
@click.option("--custom-category", help="Category name when --category is OTHER")
@click.option("--amount", required=True, help="Net amount excluding GST (e.g., 100.00)")
@click.option("--payment-method", type=METHOD_CHOICES, required=True, help="How the money moved")
@click.option("--date", "txn_date", default="today", help="Transaction date (default: today)")
@click.option("--description", help="Transaction description")
@click.option("--client", help="Client name or ID")
@click.option(
    "--gst/--no-gst",
    default=None,
    help="Apply GST. For personal bank transfers this is the GST choice; "
    "for other methods it overrides the payment method default",
)
@click.option("--created-by-name", help="Display name of the person recording the transaction")
@click.pass_context
def add_transaction(
    ctx,
    txn_type: str,
    category: str,
    custom_category: str | None,
    amount: str,
    payment_method: str,
    txn_date: str,
    description: str | None,
    client: str | None,
    gst: bool | None,
    created_by_name: str | None,
) -> None:
    """Record a transaction.

    GST is worked out from the payment method: card and business bank
    transfers carry 10% GST, cash does not, and personal bank transfers
    carry GST only with --gst.

    Examples:
        bizledger transaction add --type INFLOW --category CLIENT_PAYMENT \\
            --amount 100 --payment-method CREDIT_DEBIT_CARD --client "Jane Citizen"
        bizledger transaction add --type OUTFLOW --category OTHER --custom-category Rent \\
            --amount 1500 --payment-method BANK_TRANSFER_BUSINESS --date 01/07/2024
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    amount_net = _parse_amount_option(ctx, amount)
    parsed_date = _parse_date_option(ctx, txn_date)

    client_id = None
    client_name = None
    if client:
        try:
            resolved = resolve_client(ClientService(db), client)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        client_id = resolved.id
        client_name = resolved.full_name

    personal = payment_method.upper() == PaymentMethod.BANK_TRANSFER_PERSONAL.value
    try:
        transaction_id = service.create_transaction(
            type=txn_type,
            category=category,
            amount_net=amount_net,
            payment_method=payment_method,
            date=parsed_date,
            created_by=ctx.obj["user"],
            custom_category=custom_category,
            gst_applied=None if personal else gst,
            user_selected_gst=gst if personal else None,
            description=description,
            client_id=client_id,
            client_name=client_name,
            created_by_name=created_by_name,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    txn = service.require_transaction(transaction_id)
    click.echo(
        f"Created transaction {transaction_id}: net {format_money(txn.amount_net)}, "
        f"GST {format_money(txn.gst_amount)}, gross {format_money(txn.amount_gross)}"
    )


@transaction_group.command("list")
@period_options
@click.option("--type", "txn_type", type=TYPE_CHOICES, help="Filter by type")
@click.option("--category", type=CATEGORY_CHOICES, help="Filter by category")
@click.option("--payment-method", type=METHOD_CHOICES, help="Filter by payment method")
@click.option("--search", help="Search description, client name and category")
@click.option("--limit", type=int, help="Maximum number of transactions to show")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    txn_type: str | None,
    category: str | None,
    payment_method: str | None,
    search: str | None,
    limit: int | None,
) -> None:
    """List transactions, newest first.

    Examples:
        bizledger transaction list --period this-month
        bizledger transaction list --type OUTFLOW --search rent
    """
    service = TransactionService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    filters = TransactionFilters(
        start_date=start,
        end_date=end,
        type=TransactionType(txn_type.upper()) if txn_type else None,
        category=TransactionCategory(category.upper()) if category else None,
        payment_method=PaymentMethod(payment_method.upper()) if payment_method else None,
        search=search,
    )
    transactions = service.list_transactions(filters)

    if not transactions:
        click.echo("No transactions found.")
        return

    summary = calculate_financial_summary(transactions)
    shown = transactions[:limit] if limit else transactions

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Type':<8} {'Category':<20} {'Method':<24} "
        f"{'Net':>12} {'GST':>10} {'Gross':>12}"
    )
    click.echo("-" * 110)
    for txn in shown:
        label = category_label(txn.category, txn.custom_category)
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {txn.type.value:<8} {label[:20]:<20} "
            f"{payment_method_label(txn.payment_method)[:24]:<24} "
            f"{format_money(txn.amount_net):>12} {format_money(txn.gst_amount):>10} "
            f"{format_money(txn.amount_gross):>12}"
        )
    click.echo("-" * 110)
    click.echo(
        f"Income: {format_money(summary.total_income)}  "
        f"Expenses: {format_money(summary.total_expenses)}  "
        f"Profit: {format_money(summary.total_profit)}"
    )


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int) -> None:
    """Show a transaction."""
    service = TransactionService(ctx.obj["db"])
    try:
        txn = service.require_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    for line in transaction_detail_lines(txn):
        click.echo(line)


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--type", "txn_type", type=TYPE_CHOICES, help="INFLOW or OUTFLOW")
@click.option("--category", type=CATEGORY_CHOICES, help="Category valid for the type")
@click.option("--custom-category", help="Category name when the category is OTHER")
@click.option("--amount", help="Net amount excluding GST")
@click.option("--payment-method", type=METHOD_CHOICES, help="How the money moved")
@click.option("--gst/--no-gst", default=None, help="Set whether GST applies")
@click.option("--date", "txn_date", help="Transaction date")
@click.option("--description", help="Transaction description")
@click.option("--client", help="Client name or ID, or empty string to clear")
@click.option("--updated-by-name", help="Display name of the person updating the transaction")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    txn_type: str | None,
    category: str | None,
    custom_category: str | None,
    amount: str | None,
    payment_method: str | None,
    gst: bool | None,
    txn_date: str | None,
    description: str | None,
    client: str | None,
    updated_by_name: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. GST is recalculated only when
    --amount or --payment-method is given: --gst/--no-gst then decides
    whether GST applies, a new payment method reruns its default, and a new
    amount on its own keeps the GST already recorded. --gst/--no-gst without
    --amount or --payment-method is rejected.

    Examples:
        bizledger transaction update 1 --payment-method CASH_IN_HAND
        bizledger transaction update 1 --amount 200 --gst
        bizledger transaction update 1 --client ""  # Clear client
    """
    if gst is not None and amount is None and payment_method is None:
        raise click.UsageError("--gst/--no-gst requires --amount or --payment-method")

    db = ctx.obj["db"]
    service = TransactionService(db)

    amount_net = _parse_amount_option(ctx, amount) if amount is not None else None
    parsed_date = _parse_date_option(ctx, txn_date) if txn_date is not None else None

    client_id = None
    client_name = None
    if client is not None:
        if client.strip():
            try:
                resolved = resolve_client(ClientService(db), client)
            except DomainError as e:
                handle_domain_error(ctx, e)
                return
            client_id = resolved.id
            client_name = resolved.full_name
        else:
            client_id = ""
            client_name = ""

    try:
        txn = service.update_transaction(
            transaction_id,
            updated_by=ctx.obj["user"],
            type=txn_type,
            category=category,
            custom_category=custom_category,
            amount_net=amount_net,
            payment_method=payment_method,
            gst_applied=gst,
            description=description,
            client_id=client_id,
            client_name=client_name,
            date=parsed_date,
            updated_by_name=updated_by_name,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated transaction {transaction_id}")
    for line in transaction_detail_lines(txn):
        click.echo(line)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction."""
    service = TransactionService(ctx.obj["db"])

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes:
        click.echo("Transaction details:")
        for line in transaction_detail_lines(txn):
            click.echo(line)
        if not click.confirm("Are you sure you want to delete this transaction?"):
            click.echo("Deletion cancelled.")
            return

    try:
        service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")

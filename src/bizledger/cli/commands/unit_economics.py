"""Unit economics report command."""

import click
from bizledger.cli.formatting import format_money, format_percent
from bizledger.domain.client import ClientService
from bizledger.domain.cost import CostService
from bizledger.domain.transaction import TransactionService
from bizledger.domain.unit_economics import UnitEconomicsMonitor


@click.command("unit-economics")
@click.option("--no-cvp", is_flag=True, help="Skip the cost-volume-profit table")
@click.pass_context
def unit_economics(ctx, no_cvp: bool):
    """Show contribution margin, break-even, CAC and LTV.

    Inflow transactions count as units sold, fixed and variable costs come
    from 'bizledger cost', and every client counts as an acquired customer.
    """
    db = ctx.obj["db"]
    results = []

    monitor = UnitEconomicsMonitor(
        transactions=TransactionService(db),
        costs=CostService(db),
        clients=ClientService(db),
        on_update=results.append,
    )
    # Each source delivers its current records on subscribe
    monitor.start()
    monitor.stop()
    data = results[-1]

    summary = data.summary
    click.echo("Unit Economics")
    click.echo("-" * 50)
    click.echo(f"{'Contribution margin ratio':<30} {format_percent(summary.contribution_margin_ratio):>18}")
    click.echo(f"{'Break-even units':<30} {summary.break_even_point_units:>18,}")
    click.echo(f"{'Break-even revenue':<30} {format_money(summary.break_even_point_revenue):>18}")
    click.echo(f"{'Customer lifetime value':<30} {format_money(summary.customer_ltv):>18}")
    click.echo(f"{'Customer acquisition cost':<30} {format_money(summary.cac):>18}")

    click.echo()
    click.echo("Contribution Margin Breakdown")
    for part in data.contribution_margin_breakdown:
        click.echo(f"    {part.name:<26} {format_money(part.value):>18}")

    if data.product_profitability:
        click.echo()
        click.echo("Top Products")
        click.echo(f"    {'Name':<26} {'Revenue':>14} {'Margin':>14}")
        for product in data.product_profitability:
            click.echo(
                f"    {product.name[:26]:<26} {format_money(product.revenue):>14} "
                f"{format_money(product.margin):>14}"
            )

    if not no_cvp:
        click.echo()
        click.echo("Cost-Volume-Profit")
        click.echo(f"    {'Units':>8} {'Fixed':>14} {'Total cost':>14} {'Revenue':>14}")
        for point in data.cvp_analysis:
            click.echo(
                f"    {point.units:>8,} {format_money(point.fixed_cost):>14} "
                f"{format_money(point.total_cost):>14} {format_money(point.revenue):>14}"
            )


def register_commands(cli: click.Group) -> None:
    """Register unit economics command with main CLI."""
    cli.add_command(unit_economics)

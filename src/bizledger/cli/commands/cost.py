"""Cost management commands."""

import click
from bizledger.cli.error_handling import handle_domain_error
from bizledger.cli.formatting import format_money
from bizledger.domain.cost import CostService
from bizledger.domain.entities import CostType
from bizledger.domain.errors import DomainError
from bizledger.domain.labels import cost_type_label
from bizledger.utils.amount_parser import parse_amount

COST_TYPE_CHOICES = click.Choice([t.value for t in CostType], case_sensitive=False)


@click.group()
def cost_group():
    """Manage fixed and variable costs."""
    pass


@cost_group.command("add")
@click.option("--name", required=True, help="Cost name")
@click.option("--type", "cost_type", type=COST_TYPE_CHOICES, required=True, help="fixed or variable")
@click.option("--amount", required=True, help="Amount per period (fixed) or per unit (variable)")
@click.option("--volume", help="Units consumed (variable costs only)")
@click.pass_context
def add_cost(ctx, name: str, cost_type: str, amount: str, volume: str | None):
    """Add a cost.

    Examples:
        bizledger cost add --name Rent --type fixed --amount 2000
        bizledger cost add --name Supplies --type variable --amount 2.50 --volume 400
    """
    service = CostService(ctx.obj["db"])

    try:
        parsed_amount = parse_amount(amount)
        parsed_volume = parse_amount(volume) if volume is not None else None
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        cost_id = service.create_cost(
            name=name, cost_type=cost_type, amount=parsed_amount, actual_volume=parsed_volume
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created {cost_type.lower()} cost '{name}' (ID: {cost_id})")


@cost_group.command("list")
@click.option("--type", "cost_type", type=COST_TYPE_CHOICES, help="Only list this cost type")
@click.pass_context
def list_costs(ctx, cost_type: str | None):
    """List costs."""
    service = CostService(ctx.obj["db"])
    costs = service.list_costs(CostType(cost_type.lower()) if cost_type else None)

    if not costs:
        click.echo("No costs found.")
        return

    click.echo(f"{'ID':<6} {'Name':<30} {'Type':<10} {'Amount':>12} {'Volume':>10}")
    click.echo("-" * 72)
    for cost in costs:
        volume = "" if cost.actual_volume is None else f"{cost.actual_volume:,}"
        click.echo(
            f"{cost.id:<6} {cost.name[:30]:<30} {cost_type_label(cost.cost_type):<10} "
            f"{format_money(cost.amount):>12} {volume:>10}"
        )


@cost_group.command("delete")
@click.argument("cost_id", type=int)
@click.pass_context
def delete_cost(ctx, cost_id: int):
    """Delete a cost."""
    service = CostService(ctx.obj["db"])
    try:
        service.delete_cost(cost_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted cost {cost_id}")


def register_commands(cli: click.Group) -> None:
    """Register cost commands with main CLI."""
    cli.add_command(cost_group, name="cost")

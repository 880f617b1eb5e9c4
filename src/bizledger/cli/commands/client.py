"""Client management commands."""

import click
from bizledger.cli.error_handling import handle_domain_error
from bizledger.domain.client import ClientService
from bizledger.domain.entities import AustralianState, ClientFilters
from bizledger.domain.errors import DomainError
from bizledger.domain.labels import state_label

STATE_CHOICES = [state.value for state in AustralianState]


@click.group()
def client_group():
    """Manage clients."""
    pass


@client_group.command("add")
@click.option("--first-name", required=True, help="First name")
@click.option("--last-name", required=True, help="Last name")
@click.option("--email", required=True, help="Email address")
@click.option("--phone", "phone_number", required=True, help="Phone number")
@click.option("--suburb", required=True, help="Suburb")
@click.option("--post-code", required=True, help="Post code")
@click.option("--state", type=click.Choice(STATE_CHOICES, case_sensitive=False), required=True)
@click.option("--services", help="Services purchased, comma-separated (e.g., 'Cleaning, Gardening')")
@click.option("--created-by-name", help="Display name of the person adding the client")
@click.pass_context
def add_client(
    ctx,
    first_name: str,
    last_name: str,
    email: str,
    phone_number: str,
    suburb: str,
    post_code: str,
    state: str,
    services: str | None,
    created_by_name: str | None,
):
    """Add a client.

    Examples:
        bizledger client add --first-name Jane --last-name Citizen --email jane@example.com \\
            --phone 0400000000 --suburb Fitzroy --post-code 3065 --state VIC --services "Audit, BAS"
    """
    service = ClientService(ctx.obj["db"])

    try:
        client_id = service.create_client(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone_number=phone_number,
            suburb=suburb,
            post_code=post_code,
            state=state,
            services_purchased=services,
            created_by=ctx.obj["user"],
            created_by_name=created_by_name,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created client '{first_name} {last_name}' (ID: {client_id})")


@client_group.command("list")
@click.option("--state", type=click.Choice(STATE_CHOICES, case_sensitive=False), help="Filter by state")
@click.option("--service", help="Only clients who purchased this service")
@click.option("--search", help="Search names, email, phone, suburb and post code")
@click.pass_context
def list_clients(ctx, state: str | None, service: str | None, search: str | None):
    """List clients, newest first."""
    client_service = ClientService(ctx.obj["db"])

    filters = ClientFilters(
        state=AustralianState(state.upper()) if state else None,
        service=service,
        search=search,
    )
    try:
        clients = client_service.list_clients(filters)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not clients:
        click.echo("No clients found.")
        return

    click.echo(f"\nFound {len(clients)} client(s):")
    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Name':<25} {'Email':<30} {'Suburb':<15} {'State':<6} Services")
    click.echo("-" * 100)
    for c in clients:
        click.echo(
            f"{c.id:<6} {c.full_name[:25]:<25} {c.email[:30]:<30} {c.suburb[:15]:<15} "
            f"{c.state.value:<6} {', '.join(c.services_purchased)}"
        )


@client_group.command("show")
@click.argument("client_id", type=int)
@click.pass_context
def show_client(ctx, client_id: int):
    """Show a client."""
    service = ClientService(ctx.obj["db"])
    try:
        c = service.require_client(client_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Client ID: {c.id}")
    click.echo(f"  Name: {c.full_name}")
    click.echo(f"  Email: {c.email}")
    click.echo(f"  Phone: {c.phone_number}")
    click.echo(f"  Address: {c.suburb} {c.post_code}, {state_label(c.state)}")
    click.echo(f"  Services: {', '.join(c.services_purchased) or '-'}")
    click.echo(f"  Created: {c.created_at} by {c.created_by_name or c.created_by}")
    if c.updated_by:
        click.echo(f"  Updated: {c.updated_at} by {c.updated_by_name or c.updated_by}")


@client_group.command("update")
@click.argument("client_id", type=int)
@click.option("--first-name", help="First name")
@click.option("--last-name", help="Last name")
@click.option("--email", help="Email address")
@click.option("--phone", "phone_number", help="Phone number")
@click.option("--suburb", help="Suburb")
@click.option("--post-code", help="Post code")
@click.option("--state", type=click.Choice(STATE_CHOICES, case_sensitive=False))
@click.option("--services", help="Replace services purchased (comma-separated, empty string clears)")
@click.option("--updated-by-name", help="Display name of the person updating the client")
@click.pass_context
def update_client(ctx, client_id: int, updated_by_name: str | None, **changes):
    """Update a client.

    Updates only the fields that are provided.

    Examples:
        bizledger client update 1 --email new@example.com
        bizledger client update 1 --services "Audit, Payroll"
    """
    service = ClientService(ctx.obj["db"])
    services = changes.pop("services")
    if services is not None:
        changes["services_purchased"] = services.split(",") if services else []

    try:
        service.update_client(
            client_id,
            updated_by=ctx.obj["user"],
            updated_by_name=updated_by_name,
            **changes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated client {client_id}")


@client_group.command("delete")
@click.argument("client_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_client(ctx, client_id: int, yes: bool) -> None:
    """Delete a client.

    Transactions that reference the client are kept.
    """
    service = ClientService(ctx.obj["db"])

    client = service.get_client(client_id)
    if client is None:
        click.echo(f"Error: Client {client_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete client {client.full_name}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_client(client_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted client {client_id}")


def register_commands(cli: click.Group) -> None:
    """Register client commands with main CLI."""
    cli.add_command(client_group, name="client")

"""Main CLI entry point."""

import logging
import os

import click
from bizledger.database.factories import create_sqlite_database
from bizledger.domain.errors import PersistenceError

# Import and register all commands at module level
from bizledger.cli.commands import (
    client,
    cost,
    summary,
    transaction,
    unit_economics,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _default_user() -> str:
    return os.environ.get("USER") or os.environ.get("USERNAME") or "bizledger"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BIZLEDGER_DB_PATH environment variable)",
    envvar="BIZLEDGER_DB_PATH",
)
@click.option(
    "--user",
    default=_default_user,
    envvar="BIZLEDGER_USER",
    help="User recorded as creator/updater of records (default: login name)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="BIZLEDGER_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, user: str, log_level: str):
    """bizledger - Back-office ledger for small Australian businesses.

    Keep client records, record inflows and outflows with GST, and report
    financial summaries and unit economics.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj["user"] = user

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            db = create_sqlite_database(database_path=db_path)
            db.connect()
            db.initialize_schema()
        except PersistenceError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
client.register_commands(cli)
transaction.register_commands(cli)
cost.register_commands(cli)
summary.register_commands(cli)
unit_economics.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

"""CLI helpers for date range resolution."""

from datetime import date
import click

from bizledger.utils.date_parser import PERIODS, get_date_range, parse_date


def period_options(command):
    """Add --start-date, --end-date and --period options to a command."""
    command = click.option(
        "--period",
        type=click.Choice(PERIODS, case_sensitive=False),
        help="Named period; 'fy' is the Australian financial year (July-June)",
    )(command)
    command = click.option("--end-date", help="End date (YYYY-MM-DD, DD/MM/YYYY or 'today')")(command)
    command = click.option(
        "--start-date", help="Start date (YYYY-MM-DD, DD/MM/YYYY or 'last month')"
    )(command)
    return command


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from a named period or explicit dates."""
    if period and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period:
        return get_date_range(period)

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must be on or before end date.", err=True)
        ctx.exit(1)

    if start is None and end is None and default_range is not None:
        start, end = default_range

    return start, end

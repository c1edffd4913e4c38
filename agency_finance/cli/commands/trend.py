"""Monthly trend command."""

import datetime as dt
from typing import Optional

import click

from agency_finance.aggregators.trend_analyzer import TrendAnalyzer
from agency_finance.cli.error_handlers import with_error_handling
from agency_finance.cli.utils.formatters import (
    format_amount,
    format_success,
    format_table,
)
from agency_finance.cli.utils.session import FinanceSession


def parse_month_input(month_str: str) -> dt.date:
    """Parse a YYYY-MM string into the first day of that month.

    Raises:
        click.BadParameter: If the format is invalid
    """
    try:
        parsed = dt.datetime.strptime(month_str, "%Y-%m")
    except ValueError:
        raise click.BadParameter(f"Invalid month: {month_str}. Expected YYYY-MM")
    return dt.date(parsed.year, parsed.month, 1)


@click.command(name="trend")
@click.option(
    "--months",
    type=click.IntRange(min=1),
    default=None,
    help="Number of months including the last one (default: TREND_MONTHS)",
)
@click.option(
    "--until",
    type=str,
    default=None,
    help="Last month of the series (YYYY-MM, default: current month)",
)
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Also write the series to a CSV file",
)
@click.pass_obj
def trend(
    session: FinanceSession,
    months: Optional[int],
    until: Optional[str],
    csv_path: Optional[str],
):
    """Show monthly revenue, labour cost and profit.

    Example:
        agency-finance trend --months 12 --csv trend.csv
    """
    today = parse_month_input(until) if until else None
    with with_error_handling(session.debug):
        service = session.accounts_service()
        analyzer = TrendAnalyzer(
            service.store, service.normalizer, service.trend_max_workers
        )
        points = analyzer.trailing_months(months or service.trend_months, today)

        click.echo(
            format_table(
                ["Month", "Revenue", "Costs", "Profit", "Hours"],
                [
                    [
                        p.month,
                        format_amount(p.revenue),
                        format_amount(p.costs),
                        format_amount(p.profit),
                        p.hours_worked,
                    ]
                    for p in points
                ],
            )
        )

        if csv_path:
            TrendAnalyzer.to_dataframe(points).to_csv(csv_path, index=False)
            click.echo(format_success(f"Wrote {len(points)} month(s) to {csv_path}"))

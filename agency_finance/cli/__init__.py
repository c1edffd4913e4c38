"""Agency Finance CLI.

Command-line access to the financial reports computed from a JSON snapshot
of workers, projects, time entries and milestones.
"""

from typing import Optional

import click

from agency_finance import __version__
from agency_finance.cli.commands.reports import (
    developer,
    milestones,
    overview,
    project,
    project_summary,
    time_breakdown,
)
from agency_finance.cli.commands.trend import trend
from agency_finance.cli.utils.session import FinanceSession
from agency_finance.config.logging_config import LoggingConfig, configure_logging


@click.group(help="Agency Finance CLI - Cost, revenue and profitability reports")
@click.version_option(version=__version__)
@click.option(
    "--snapshot",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSON snapshot file (optional, uses SNAPSHOT_FILE from config)",
)
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
@click.pass_context
def cli(ctx: click.Context, snapshot: Optional[str], debug: bool):
    """Agency Finance CLI main entry point."""
    configure_logging(LoggingConfig.from_env())
    ctx.obj = FinanceSession(snapshot=snapshot, debug=debug)


# Register commands
cli.add_command(overview)
cli.add_command(project)
cli.add_command(project_summary)
cli.add_command(developer)
cli.add_command(milestones)
cli.add_command(time_breakdown)
cli.add_command(trend)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()

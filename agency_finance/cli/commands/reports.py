"""Report commands: overview, project financials and summaries, listings."""

from typing import Optional

import click

from agency_finance.cli.error_handlers import with_error_handling
from agency_finance.cli.utils.formatters import (
    format_amount,
    format_info,
    format_json,
    format_success,
    format_table,
    format_warning,
)
from agency_finance.cli.utils.session import FinanceSession
from agency_finance.services.report_models import report_to_dict
from agency_finance.utils.logging_utils import LogContext, generate_correlation_id

json_option = click.option(
    "--json", "as_json", is_flag=True, help="Print the report as JSON"
)


def _echo_pairs(pairs) -> None:
    width = max(len(label) for label, _ in pairs)
    for label, value in pairs:
        click.echo(f"  {label:<{width}}  {value}")


@click.command(name="overview")
@json_option
@click.pass_obj
def overview(session: FinanceSession, as_json: bool):
    """Show agency-wide revenue, labour cost and profit.

    Example:
        agency-finance --snapshot data.json overview
    """
    with with_error_handling(session.debug), LogContext(
        correlation_id=generate_correlation_id()
    ):
        service = session.accounts_service()
        report = service.accounts_overview()
        if as_json:
            click.echo(format_json(report_to_dict(report)))
            return

        base = service.normalizer.base_currency
        summary = report.summary
        click.echo(format_info("Summary"))
        _echo_pairs(
            [
                ("Revenue", format_amount(summary.total_revenue, base)),
                ("Labour cost", format_amount(summary.total_labor_cost, base)),
                ("Profit", format_amount(summary.total_profit, base)),
                ("Profit margin", f"{summary.profit_margin}%"),
                ("Hours tracked", summary.total_hours_tracked),
                ("Average cost/hour", format_amount(summary.average_hourly_rate, base)),
                (
                    "Milestones",
                    f"{summary.total_milestones_released} released, "
                    f"{summary.total_milestones_pending} pending",
                ),
            ]
        )

        click.echo()
        click.echo(format_info("Projects"))
        click.echo(
            format_table(
                ["Project", "Client", "Budget", "Spent", "Hours", "Milestones", "Net"],
                [
                    [
                        row.name,
                        row.client,
                        format_amount(row.budget),
                        format_amount(row.spent),
                        row.hours_worked,
                        f"{row.milestones_released}/{row.total_milestones}",
                        format_amount(row.net_amount, row.currency),
                    ]
                    for row in report.project_breakdown
                ],
            )
        )

        click.echo()
        click.echo(format_info("Developers"))
        click.echo(
            format_table(
                ["Name", "Rate/h", "Hours", "Cost", "Projects"],
                [
                    [
                        row.name,
                        format_amount(row.hourly_rate),
                        row.hours_worked,
                        format_amount(row.cost),
                        row.projects_count,
                    ]
                    for row in report.developer_costs
                ],
            )
        )


@click.command(name="project")
@click.argument("project_id")
@json_option
@click.pass_obj
def project(session: FinanceSession, project_id: str, as_json: bool):
    """Show budget consumption, task costs and role costs of a project.

    Example:
        agency-finance project p-1
    """
    with with_error_handling(session.debug):
        service = session.accounts_service()
        report = service.project_financials(project_id)
        if as_json:
            click.echo(format_json(report_to_dict(report)))
            return

        info = report.project
        costs = report.cost_breakdown
        base = service.normalizer.base_currency
        click.echo(format_info(f"{info.name} ({report.client.name})"))
        _echo_pairs(
            [
                ("Budget", format_amount(info.budget, info.currency)),
                ("Platform fee", format_amount(info.platform_fee_amount, info.currency)),
                ("Payable", format_amount(info.payable_amount, info.currency)),
                ("Exchange rate", info.exchange_rate),
                ("Reference budget", format_amount(costs.reference_budget, base)),
                ("Total cost", format_amount(costs.total_cost, base)),
                ("Consumed", f"{costs.budget_consumed_percent}%"),
                ("Remaining", format_amount(costs.remaining_budget, base)),
            ]
        )
        if costs.is_over_budget:
            click.echo(format_warning("Project is over budget"))

        click.echo()
        click.echo(
            format_table(
                ["Task", "Status", "Assignee", "Est. h", "Actual h", "Cost"],
                [
                    [
                        task.title,
                        task.status,
                        task.assignee.name if task.assignee else "-",
                        task.estimated_hours if task.estimated_hours is not None else "-",
                        task.actual_hours,
                        format_amount(task.actual_cost),
                    ]
                    for task in report.task_costs
                ],
            )
        )

        click.echo()
        click.echo(
            format_table(
                ["Role", "Members", "Hours", "Cost"],
                [
                    [role.role, len(role.members), role.total_hours, format_amount(role.total_cost)]
                    for role in report.role_breakdown
                ],
            )
        )


@click.command(name="project-summary")
@click.argument("project_id")
@json_option
@click.pass_obj
def project_summary(session: FinanceSession, project_id: str, as_json: bool):
    """Show members, time tracking and labour cost of a project."""
    with with_error_handling(session.debug):
        service = session.accounts_service()
        report = service.project_account_summary(project_id)
        if as_json:
            click.echo(format_json(report_to_dict(report)))
            return

        tracking = report.time_tracking
        costs = report.costs
        margin = "-" if costs.profit_margin is None else f"{costs.profit_margin}%"
        click.echo(format_info(f"{report.project.name} ({report.client.name})"))
        _echo_pairs(
            [
                ("Hours", f"{tracking.total_hours} ({tracking.billable_hours} billable)"),
                ("Estimated hours", tracking.estimated_hours),
                ("Efficiency", f"{tracking.efficiency}%"),
                ("Labour cost", format_amount(costs.total_labor_cost)),
                ("Estimated cost", format_amount(costs.estimated_labor_cost)),
                ("Profit margin", margin),
                ("Tasks", f"{report.tasks.completed}/{report.tasks.total} completed"),
            ]
        )

        click.echo()
        click.echo(
            format_table(
                ["Member", "Role", "Rate/h", "Hours", "Cost"],
                [
                    [
                        member.name,
                        member.role,
                        format_amount(member.hourly_rate),
                        member.hours_worked,
                        format_amount(member.cost),
                    ]
                    for member in report.developers
                ],
            )
        )


@click.command(name="developer")
@click.argument("worker_id")
@json_option
@click.pass_obj
def developer(session: FinanceSession, worker_id: str, as_json: bool):
    """Show hours, earnings and task throughput of a worker."""
    with with_error_handling(session.debug):
        service = session.accounts_service()
        report = service.developer_account_summary(worker_id)
        if as_json:
            click.echo(format_json(report_to_dict(report)))
            return

        click.echo(format_info(f"{report.name} ({report.role})"))
        _echo_pairs(
            [
                ("Hourly rate", format_amount(report.hourly_rate)),
                ("Hours worked", report.total_hours_worked),
                ("Earnings", format_amount(report.total_earnings)),
                ("Tasks", f"{report.tasks_completed}/{report.tasks_assigned} completed"),
                ("Tasks per hour", report.productivity),
            ]
        )
        click.echo()
        click.echo(
            format_table(
                ["Project", "Hours", "Completed", "Assigned"],
                [
                    [row.name, row.hours_worked, row.tasks_completed, row.tasks_assigned]
                    for row in report.projects
                ],
            )
        )


@click.command(name="milestones")
@click.option("--project", "project_id", default=None, help="Only this project's milestones")
@json_option
@click.pass_obj
def milestones(session: FinanceSession, project_id: Optional[str], as_json: bool):
    """List milestones, newest first."""
    with with_error_handling(session.debug):
        service = session.accounts_service()
        listings = service.list_milestones(project_id)
        if as_json:
            click.echo(format_json([report_to_dict(m) for m in listings]))
            return

        if not listings:
            click.echo(format_info("No milestones found."))
            return

        click.echo(
            format_table(
                ["Milestone", "Project", "Amount", "Base", "Status", "Payment"],
                [
                    [
                        m.title,
                        m.project_name or m.project_id,
                        format_amount(m.amount, m.currency),
                        format_amount(m.amount_base),
                        m.status,
                        m.payment_status,
                    ]
                    for m in listings
                ],
            )
        )
        click.echo()
        click.echo(format_success(f"Found {len(listings)} milestone(s)"))


@click.command(name="time-breakdown")
@json_option
@click.pass_obj
def time_breakdown(session: FinanceSession, as_json: bool):
    """Show logged hours per task and worker for every active project."""
    with with_error_handling(session.debug):
        service = session.accounts_service()
        breakdown = service.time_breakdown_by_project()
        if as_json:
            click.echo(format_json([report_to_dict(p) for p in breakdown]))
            return

        rows = []
        for project_row in breakdown:
            for task in project_row.tasks:
                for worker in task.by_worker:
                    rows.append(
                        [project_row.name, task.title, worker.name or worker.id, worker.hours]
                    )
        click.echo(format_table(["Project", "Task", "Worker", "Hours"], rows))

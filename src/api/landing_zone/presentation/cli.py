"""Command-line interface for landing zone deployments.

Usage:
    landing-zone plan <descriptor.yaml>            # Dry run, no AWS calls
    landing-zone plan <descriptor.yaml> --json     # Plan as JSON on stdout
    landing-zone apply <descriptor.yaml>           # Apply against AWS

Exit codes: 0 when every team and account succeeded, 1 when any team or
account failed, 2 for descriptor errors and 3 when the run was aborted.
"""

from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from rich import box
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings
from landing_zone.application.services import LandingZoneService
from landing_zone.application.value_objects import (
    DeploymentReport,
    TeamProvisioningResult,
)
from landing_zone.dependencies import build_landing_zone_service, get_descriptor_defaults
from landing_zone.domain.exceptions import DeploymentDescriptorError, ProvisioningError
from landing_zone.domain.plan import DeploymentPlanner, ProvisioningPlan
from landing_zone.infrastructure.descriptor_loader import load_descriptor
from landing_zone.presentation.models import PlanResponse

EXIT_OK = 0
EXIT_PARTIAL_FAILURE = 1
EXIT_INVALID_DESCRIPTOR = 2
EXIT_ABORTED = 3

console = Console()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="landing-zone",
        description="Plan and apply AWS landing zone deployments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s plan landing-zone.yaml
  %(prog)s plan landing-zone.yaml --json
  %(prog)s apply landing-zone.yaml --log-level DEBUG
        """,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Minimum log level (default: from LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON logs even on a terminal",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    plan = commands.add_parser("plan", help="Validate a descriptor and print its plan")
    plan.add_argument("descriptor", type=Path, help="Descriptor file (YAML or JSON)")
    plan.add_argument("--json", action="store_true", help="Print the plan as JSON")

    apply = commands.add_parser("apply", help="Apply a descriptor against AWS")
    apply.add_argument("descriptor", type=Path, help="Descriptor file (YAML or JSON)")

    return parser.parse_args(argv)


def render_plan(plan: ProvisioningPlan) -> Table:
    table = Table(title="Provisioning plan", box=box.SIMPLE_HEAVY)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Action")
    table.add_column("Depends on", style="dim")

    for index, step in enumerate(plan.steps, start=1):
        table.add_row(str(index), step.key, step.action.value, ", ".join(step.depends_on))
    return table


def render_report(report: DeploymentReport) -> Table:
    table = Table(title=f"Deployment {report.deployment_id}", box=box.SIMPLE_HEAVY)
    table.add_column("Team / account", style="cyan")
    table.add_column("Account id")
    table.add_column("Assignments", justify="right")
    table.add_column("Status")

    for team in report.teams:
        created = sum(1 for a in team.assignments if a.succeeded)
        table.add_row(
            team.team_name,
            team.account.account_id if team.account else "-",
            f"{created}/{len(team.assignments)}",
            "[green]ok[/green]" if team.succeeded else f"[red]{_team_error(team)}[/red]",
        )
    for account in report.accounts:
        table.add_row(
            account.account_name,
            account.account.account_id if account.account else "-",
            "-",
            "[green]ok[/green]" if account.succeeded else f"[red]{account.error}[/red]",
        )
    return table


def _team_error(team: TeamProvisioningResult) -> str:
    if team.error:
        return team.error
    return "; ".join(f"{a.principal.id}: {a.error}" for a in team.failed_assignments)


def run_plan(descriptor_path: Path, as_json: bool = False) -> int:
    descriptor = load_descriptor(descriptor_path, get_descriptor_defaults())
    plan = DeploymentPlanner().build(descriptor)

    if as_json:
        console.print_json(json.dumps(PlanResponse.from_domain(plan).model_dump(mode="json")))
    else:
        console.print(render_plan(plan))
    return EXIT_OK


async def run_apply(descriptor_path: Path, service: LandingZoneService) -> int:
    descriptor = load_descriptor(descriptor_path, get_descriptor_defaults())

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Applying landing zone...", total=None)
        report = await service.deploy(descriptor)

    console.print(render_report(report))
    if not report.succeeded:
        failed = len(report.failed_teams) + sum(
            1 for account in report.accounts if not account.succeeded
        )
        console.print(
            f"[red]{failed} team(s) or account(s) failed; "
            "accounts already created were kept.[/red]"
        )
        return EXIT_PARTIAL_FAILURE
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Entry point of the landing-zone command."""
    args = parse_args(argv)
    configure_logging(
        level=args.log_level or get_settings().log_level,
        json_output=True if args.json_logs else None,
    )

    try:
        if args.command == "plan":
            return run_plan(args.descriptor, as_json=args.json)
        return asyncio.run(run_apply(args.descriptor, build_landing_zone_service()))
    except DeploymentDescriptorError as e:
        console.print("[bold red]Invalid deployment descriptor[/bold red]")
        for problem in e.problems:
            console.print(f"  - {problem}")
        return EXIT_INVALID_DESCRIPTOR
    except ProvisioningError as e:
        console.print(f"[bold red]Deployment aborted:[/bold red] {e}")
        return EXIT_ABORTED


if __name__ == "__main__":
    raise SystemExit(main())

"""
Permit Setup Flow Reset and Verify Screens.

Shared by the interactive menu and the flag-driven CLI: the caller
supplies the confirmation function so each surface asks in its own way.
"""

from typing import Callable, Optional

from rich.console import Console
from rich.table import Table

from permit_setup.admin import PolicyAdmin, run_with_admin
from permit_setup.config.settings import PermitConfig
from permit_setup.flow.theme import Colors, Icons
from permit_setup.reset import ResetOrchestrator, ResetReport, ResetVariant
from permit_setup.verify import Reconciler, VerificationReport, render_report

RESET_WARNINGS = {
    ResetVariant.ALL: (
        "This will DELETE all resources, roles, user sets, resource sets, "
        "and set rules. Are you sure?"
    ),
    ResetVariant.ABAC: (
        "This will DELETE all user attributes, user sets, resource sets, "
        "and set rules. Are you sure?"
    ),
    ResetVariant.RBAC: "This will DELETE all roles and resources. Are you sure?",
    ResetVariant.RESOURCES: "This will DELETE all resources. Are you sure?",
    ResetVariant.ROLES: "This will DELETE all roles. Are you sure?",
}


def run_verify(config: PermitConfig, console: Optional[Console] = None) -> VerificationReport:
    console = console or Console()
    console.print(f"  [{Colors.INFO}]Verifying setup...[/]")

    async def verify(admin: PolicyAdmin) -> VerificationReport:
        return await Reconciler(admin).verify()

    report = run_with_admin(config, verify)
    render_report(report, console)
    return report


def render_reset_report(report: ResetReport, console: Console) -> None:
    table = Table(title=f"Reset ({report.variant.value})", title_justify="left")
    table.add_column("Stage", style="bold")
    table.add_column("Deleted", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Failed", justify="right")
    for stage in report.stages:
        failed = f"[{Colors.ERROR}]{stage.failed}[/]" if stage.failed else "0"
        table.add_row(stage.stage.value, str(stage.deleted), str(stage.skipped), failed)
    console.print(table)

    for stage in report.stages:
        for key in stage.failed_keys:
            console.print(f"  [{Colors.WARNING}]{Icons.WARNING} Could not delete {stage.stage.value}: {key}[/]")

    if report.complete:
        console.print(f"  [{Colors.SUCCESS}]{Icons.SUCCESS} Reset complete[/]")
    else:
        console.print(f"  [{Colors.WARNING}]{Icons.WARNING} Reset finished with {report.failed} failure(s)[/]")


def run_reset(
    config: PermitConfig,
    variant: ResetVariant,
    confirm: Callable[[str], bool],
    console: Optional[Console] = None,
) -> Optional[ResetReport]:
    """
    Confirm, run one reset variant, then show what is left remotely.

    Returns None when the user declines.
    """
    console = console or Console()
    if not confirm(RESET_WARNINGS[variant]):
        console.print(f"  [{Colors.DIM}]Reset cancelled.[/]")
        return None

    async def reset(admin: PolicyAdmin) -> ResetReport:
        return await ResetOrchestrator(admin).run(variant)

    console.print()
    report = run_with_admin(config, reset)
    render_reset_report(report, console)
    console.print()
    run_verify(config, console)
    return report

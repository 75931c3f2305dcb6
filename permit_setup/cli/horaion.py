"""
CLI entry point for the Horaion preset.

Provisions the Horaion policy bundle (resources, the ``groups`` user
attribute, user sets and set rules) and verifies the result.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from permit_setup._version import __version__
from permit_setup.admin import PolicyAdmin, run_with_admin
from permit_setup.cli.context import LOG_LEVELS, CLIContext, handle_setup_error
from permit_setup.config.settings import PermitConfig
from permit_setup.flow.theme import Colors, Icons
from permit_setup.presets.horaion import HoraionProvisioner, ProvisionSummary
from permit_setup.verify import VerificationReport, render_report

HEADER = """\
This command configures Permit.io for the Horaion application
using pure ABAC (Attribute-Based Access Control).

Key Design:
  - Users are NOT synced to Permit.io
  - Cognito groups are passed as user.groups at check time
  - User Sets match users based on user.groups
"""


def show_horaion_header(config: PermitConfig, console: Console) -> None:
    console.print()
    console.print("[title]Horaion - Permit.io ABAC Setup[/]")
    console.print()
    console.print(HEADER)
    console.print(f"Project: {config.project_id}")
    console.print(f"Environment: {config.env_id}")
    console.print(f"API URL: {config.api_url}")
    console.print()


def _report_step(console: Console, label: str, summary: ProvisionSummary) -> None:
    if summary.failed:
        console.print(
            f"  [{Colors.WARNING}]{Icons.WARNING} {label}: {summary.succeeded} ok, "
            f"{summary.failed} failed[/]"
        )
    else:
        console.print(f"  [{Colors.SUCCESS}]{Icons.SUCCESS} {label} setup complete ({summary.succeeded})[/]")


def verify_horaion(config: PermitConfig, console: Console) -> VerificationReport:
    console.print(f"  [{Colors.INFO}]Verifying setup...[/]")

    async def verify(admin: PolicyAdmin) -> VerificationReport:
        return await HoraionProvisioner(admin).verify()

    report = run_with_admin(config, verify)
    render_report(report, console)
    if report.misconfigured_user_sets:
        console.print(f"  [{Colors.WARNING}]These will NOT work with the Horaion application.[/]")
    return report


def provision_horaion(config: PermitConfig, console: Console, user_sets_only: bool = False) -> None:
    async def provision(admin: PolicyAdmin):
        provisioner = HoraionProvisioner(admin)
        if user_sets_only:
            return [await provisioner.setup_user_sets()]
        return await provisioner.provision()

    console.print(f"  [{Colors.INFO}]Using user.groups for condition matching (NOT subject.groups)[/]")
    summaries = run_with_admin(config, provision)
    labels = ["User sets"] if user_sets_only else ["Resources", "User attributes", "User sets", "Set rules"]
    for label, summary in zip(labels, summaries):
        _report_step(console, label, summary)
    console.print()


@click.command()
@click.option("--verify", "-v", is_flag=True, help="Verify current setup only")
@click.option("--user-sets", "-u", is_flag=True, help="Setup predefined user sets only")
@click.option("--add-user-set", "-a", is_flag=True, help="Add custom user set interactively")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured logging level",
)
@click.version_option(version=__version__, prog_name="horaion-setup")
@handle_setup_error
def main(
    verify: bool,
    user_sets: bool,
    add_user_set: bool,
    config_path: Optional[Path],
    log_level: Optional[str],
) -> None:
    """
    Horaion - Permit.io ABAC Setup.

    Without options the whole bundle is provisioned and then verified.
    """
    ctx = CLIContext.load(config_path, log_level)
    show_horaion_header(ctx.config, ctx.console)
    ctx.config.validate()

    if verify:
        verify_horaion(ctx.config, ctx.console)
        return

    if add_user_set:
        from permit_setup.flow.screens.horaion_flow import add_custom_user_sets

        add_custom_user_sets(ctx.config, ctx.console)
    else:
        provision_horaion(ctx.config, ctx.console, user_sets_only=user_sets)

    verify_horaion(ctx.config, ctx.console)
    ctx.console.print(f"  [{Colors.SUCCESS}]{Icons.SUCCESS} Setup complete![/]")


if __name__ == "__main__":
    main()

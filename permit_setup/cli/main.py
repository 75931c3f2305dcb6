"""
CLI entry point for Permit Setup.

Flag-driven verify and reset operations; without a flag the interactive
menu starts.
"""

from pathlib import Path
from typing import Optional

import click

from permit_setup._version import __version__
from permit_setup.cli.context import LOG_LEVELS, CLIContext, handle_setup_error
from permit_setup.config.settings import get_default_config_path
from permit_setup.reset import ResetVariant

# Flag name -> reset variant, in precedence order
RESET_FLAGS = (
    ("reset", ResetVariant.ALL),
    ("reset_resources", ResetVariant.RESOURCES),
    ("reset_roles", ResetVariant.ROLES),
    ("reset_abac", ResetVariant.ABAC),
    ("reset_rbac", ResetVariant.RBAC),
)


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help=f"Path to configuration file (default: {get_default_config_path()})",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured logging level",
)
@click.option("--verify", "-v", is_flag=True, help="Verify current setup only")
@click.option("--reset", "-r", is_flag=True, help="Reset/delete all configuration")
@click.option("--reset-resources", is_flag=True, help="Reset/delete resources only")
@click.option("--reset-roles", is_flag=True, help="Reset/delete roles only")
@click.option("--reset-abac", is_flag=True, help="Reset/delete ABAC configuration only")
@click.option("--reset-rbac", is_flag=True, help="Reset/delete roles and resources only")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation before a reset")
@click.version_option(version=__version__, prog_name="permit-setup")
@handle_setup_error
def cli(
    config_path: Optional[Path],
    log_level: Optional[str],
    verify: bool,
    yes: bool,
    **reset_flags: bool,
) -> None:
    """
    Permit.io Edge PDP Setup (ABAC with User Sets).

    Creates resources, roles, user attributes, user sets and resource sets
    in a Permit.io project environment, verifies what exists, and resets it.

    Examples:

        # Interactive menu
        permit-setup

        # Show the current configuration
        permit-setup --verify

        # Delete ABAC configuration without prompting
        permit-setup --reset-abac --yes
    """
    # Lazy imports keep --help fast
    from permit_setup.flow.screens.main_menu import show_header
    from permit_setup.flow.screens.reset_flow import run_reset, run_verify

    ctx = CLIContext.load(config_path, log_level, yes=yes)
    show_header(ctx.config, ctx.console)
    ctx.config.validate()

    if verify:
        run_verify(ctx.config, ctx.console)
        return

    for flag, variant in RESET_FLAGS:
        if reset_flags.get(flag):
            run_reset(ctx.config, variant, confirm=ctx.confirm, console=ctx.console)
            return

    from permit_setup.flow.app import FlowApp

    FlowApp(ctx.config, console=ctx.console).start()


if __name__ == "__main__":
    cli()

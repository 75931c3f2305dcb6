"""
Permit Setup Flow Main Menu.

Header, Edge PDP connectivity check and the top-level menu.
"""

from typing import Optional

from rich.console import Console

from permit_setup.admin import PolicyAdmin, run_with_admin
from permit_setup.config.settings import PermitConfig
from permit_setup.flow.components.menu import Menu, MenuItem
from permit_setup.flow.components.prompt import FlowPrompt
from permit_setup.flow.theme import Colors, Icons

MAIN_MENU_ITEMS = [
    MenuItem(key="how-to", label="How-to Guide (Start Here)", icon=Icons.HELP),
    MenuItem(key="create-resource", label="Create Resource", icon=Icons.RESOURCE),
    MenuItem(key="create-role", label="Create Role", icon=Icons.ROLE),
    MenuItem(key="create-user-attribute", label="Create User Attribute (ABAC)", icon=Icons.ABAC),
    MenuItem(key="create-user-set", label="Create User Set (ABAC)", icon=Icons.ABAC),
    MenuItem(key="create-resource-set", label="Create Resource Set (ABAC)", icon=Icons.ABAC),
    MenuItem(key="verify", label="Verify Setup", icon=Icons.VERIFY),
    MenuItem(
        key="reset-all",
        label="Reset All",
        description="Delete everything",
        icon=Icons.RESET,
    ),
    MenuItem(key="reset-resources", label="Reset Resources Only", icon=Icons.RESET),
    MenuItem(key="reset-roles", label="Reset Roles Only", icon=Icons.RESET),
    MenuItem(key="reset-abac", label="Reset ABAC Only", icon=Icons.RESET),
    MenuItem(key="exit", label="Exit", icon=Icons.ARROW_RIGHT),
]


def show_header(config: PermitConfig, console: Console, title: str = "Permit.io Edge PDP Setup (ABAC)") -> None:
    console.print()
    console.print(f"[title]{title}[/]")
    console.print(f"[muted]{Icons.DASH * len(title)}[/]")
    view = config.redacted()
    console.print(f"Project: {view['project']}")
    console.print(f"Environment: {view['environment']}")
    console.print(f"Cloud API: {view['api_url']}")
    console.print(f"Edge PDP: {view['pdp_url']}")
    console.print(f"API key: {view['api_key']}")
    console.print()


def check_edge_pdp(config: PermitConfig, console: Console, prompt: Optional[FlowPrompt] = None) -> bool:
    """
    Probe the Edge PDP; when unreachable, explain and ask whether to go on.

    Returns False if the user chose to stop.
    """
    console.print(f"  [{Colors.INFO}]Checking Edge PDP connectivity...[/]")

    async def probe(admin: PolicyAdmin) -> bool:
        return await admin.check_health()

    if run_with_admin(config, probe):
        console.print(f"  [{Colors.SUCCESS}]{Icons.SUCCESS} Edge PDP is running at {config.pdp_url}[/]")
        return True

    console.print(f"  [{Colors.WARNING}]{Icons.WARNING} Edge PDP may not be running at {config.pdp_url}[/]")
    console.print()
    console.print("  To start Edge PDP, run:")
    console.print("    docker compose -f deployments/compose.yaml up permit-pdp -d")
    console.print()
    console.print("  ABAC with User Sets REQUIRES Edge PDP!")
    console.print("  Cloud PDP (https://cloudpdp.api.permit.io) does NOT support ABAC.")
    console.print()

    prompt = prompt or FlowPrompt(console)
    if not prompt.confirm("Continue anyway?", default=False):
        console.print(f"  [{Colors.ERROR}]{Icons.ERROR} Setup cancelled. Please start Edge PDP first.[/]")
        return False
    return True


def show_main_menu() -> Optional[str]:
    """Returns the selected menu key, or None if the user backs out."""
    menu = Menu(
        title="Permit.io Setup",
        subtitle="Select an option",
        items=MAIN_MENU_ITEMS,
    )
    result = menu.run()
    return result.key if result else None

"""
Permit Setup Flow Role Screen.

Creates a role, then optionally attaches ``resource:action`` permissions
one resource at a time.
"""

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel

from permit_setup.admin import PolicyAdmin, run_with_admin
from permit_setup.config.presets import (
    PROTECTED_RESOURCES,
    Choice,
    key_to_display_name,
    validate_key,
)
from permit_setup.config.settings import PermitConfig
from permit_setup.flow.components.menu import choose, show_checklist
from permit_setup.flow.components.prompt import FlowPrompt
from permit_setup.flow.theme import Colors, Icons
from permit_setup.models import Resource, Role


async def list_assignable_resources(admin: PolicyAdmin) -> List[Resource]:
    """Resources a user may reference; system resources are hidden."""
    return [r for r in await admin.resources.list() if r.key not in PROTECTED_RESOURCES]


def run_create_role(config: PermitConfig, console: Optional[Console] = None) -> bool:
    console = console or Console()
    prompt = FlowPrompt(console)

    console.print(Panel(
        f"[{Colors.NEUTRAL}]A role groups resource:action permissions that can be granted together.[/]",
        title=f"[bold {Colors.INFO}]Create Role[/]",
        border_style=Colors.PRIMARY,
    ))
    console.print()

    key = prompt.text('Role key (lowercase, e.g. "editor")', validator=validate_key)
    name = prompt.text("Role name", default=key_to_display_name(key))
    description = prompt.text("Role description", default=f"{name} role")

    console.print()
    console.print(f"  [{Colors.INFO}]Role Summary:[/]")
    console.print(f"    Key: [{Colors.NEUTRAL}]{key}[/]")
    console.print(f"    Name: [{Colors.NEUTRAL}]{name}[/]")
    console.print(f"    Description: [{Colors.NEUTRAL}]{description}[/]")
    console.print()

    if not prompt.confirm("Create this role?", default=True):
        console.print(f"  [{Colors.WARNING}]{Icons.WARNING} Role creation cancelled[/]")
        return False

    role = Role(key=key, name=name, description=description)
    if not run_with_admin(config, lambda admin: admin.roles.create(role)):
        console.print(f"  [{Colors.WARNING}]{Icons.WARNING} Failed to create role '{key}'[/]")
        return False
    console.print(f"  [{Colors.SUCCESS}]{Icons.SUCCESS} Role '{key}' created/exists[/]")

    if prompt.confirm("Do you want to assign permissions to this role?", default=False):
        _assign_permissions(config, console, prompt, key)
    return True


def _assign_permissions(config: PermitConfig, console: Console, prompt: FlowPrompt, role_key: str) -> None:
    resources = run_with_admin(config, list_assignable_resources)
    if not resources:
        console.print(
            f"  [{Colors.WARNING}]{Icons.WARNING} No resources found. "
            "Create resources first to assign permissions.[/]"
        )
        return

    by_key = {r.key: r for r in resources}
    while True:
        resource_key = choose(
            "Select resource",
            [Choice(r.key, r.name) for r in resources],
        )
        if resource_key is None:
            return

        action_keys = list(by_key[resource_key].actions)
        if not action_keys:
            console.print(
                f"  [{Colors.WARNING}]{Icons.WARNING} No actions found for resource '{resource_key}'[/]"
            )
        else:
            selected = show_checklist(
                f"Select actions for {resource_key}",
                [Choice(a, by_key[resource_key].actions[a].name) for a in action_keys],
            ) or []

            async def assign(admin: PolicyAdmin) -> List[str]:
                granted = []
                for action in selected:
                    if await admin.roles.assign_permission(role_key, resource_key, action):
                        granted.append(f"{resource_key}:{action}")
                return granted

            for permission in run_with_admin(config, assign):
                console.print(f"  [{Colors.SUCCESS}]{Icons.SUCCESS} Assigned {permission} to {role_key}[/]")

        if not prompt.confirm("Assign more permissions?", default=False):
            return

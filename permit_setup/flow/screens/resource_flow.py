"""
Permit Setup Flow Resource Screen.

Guided resource creation: key, display name, a checklist of the standard
actions and any number of custom actions.
"""

from typing import Dict, Optional

from rich.console import Console
from rich.panel import Panel

from permit_setup.admin import run_with_admin
from permit_setup.config.presets import (
    AVAILABLE_ACTIONS,
    capitalize,
    key_to_display_name,
    validate_key,
)
from permit_setup.config.settings import PermitConfig
from permit_setup.flow.components.menu import show_checklist
from permit_setup.flow.components.prompt import FlowPrompt
from permit_setup.flow.theme import Colors, Icons
from permit_setup.models import ActionDef, Resource


def _action(resource_name: str, key: str, name: Optional[str] = None, description: str = "") -> ActionDef:
    name = name or capitalize(key)
    return ActionDef(name=name, description=description or f"{name} {resource_name.lower()}")


def run_create_resource(config: PermitConfig, console: Optional[Console] = None) -> bool:
    """Prompt for a resource and create it. Returns True if it exists afterwards."""
    console = console or Console()
    prompt = FlowPrompt(console)

    console.print(Panel(
        f"[{Colors.NEUTRAL}]Define something to protect (e.g. invoice) and the actions users can take on it.[/]",
        title=f"[bold {Colors.INFO}]Create Resource[/]",
        border_style=Colors.PRIMARY,
    ))
    console.print()

    key = prompt.text('Resource key (lowercase, e.g. "invoice")', validator=validate_key)
    name = prompt.text("Resource name", default=key_to_display_name(key))
    description = prompt.text("Resource description", default=f"{name} resource")

    selected = None
    while not selected:
        selected = show_checklist("Select actions for this resource", AVAILABLE_ACTIONS)
        if selected is None:
            console.print(f"  [{Colors.WARNING}]{Icons.WARNING} Cancelled[/]")
            return False
        if not selected:
            console.print(f"  [{Colors.ERROR}]Select at least one action[/]")

    actions: Dict[str, ActionDef] = {key_: _action(name, key_) for key_ in selected}

    if prompt.confirm("Do you want to add custom actions?", default=False):
        while True:
            action_key = prompt.text('Custom action key (e.g. "approve")', validator=validate_key)
            action_name = prompt.text("Custom action name", default=capitalize(action_key))
            action_desc = prompt.text(
                "Custom action description",
                default=f"{action_name} {name.lower()}",
            )
            actions[action_key] = _action(name, action_key, action_name, action_desc)
            if not prompt.confirm("Add another custom action?", default=False):
                break

    console.print()
    console.print(f"  [{Colors.INFO}]Resource Summary:[/]")
    console.print(f"    Key: [{Colors.NEUTRAL}]{key}[/]")
    console.print(f"    Name: [{Colors.NEUTRAL}]{name}[/]")
    console.print(f"    Description: [{Colors.NEUTRAL}]{description}[/]")
    console.print(f"    Actions: [{Colors.NEUTRAL}]{', '.join(actions)}[/]")
    console.print()

    if not prompt.confirm("Create this resource?", default=True):
        console.print(f"  [{Colors.WARNING}]{Icons.WARNING} Resource creation cancelled[/]")
        return False

    resource = Resource(key=key, name=name, description=description, actions=actions)
    created = run_with_admin(config, lambda admin: admin.resources.create(resource))
    if created:
        console.print(f"  [{Colors.SUCCESS}]{Icons.SUCCESS} Resource '{key}' created/exists[/]")
    else:
        console.print(f"  [{Colors.WARNING}]{Icons.WARNING} Failed to create resource '{key}'[/]")
    return created

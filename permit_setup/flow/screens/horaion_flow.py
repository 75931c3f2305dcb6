"""
Permit Setup Flow Horaion Screen.

Interactive wizard adding custom user sets next to the Horaion preset.
"""

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel

from permit_setup.admin import run_with_admin
from permit_setup.config.presets import key_to_display_name, validate_key
from permit_setup.config.settings import PermitConfig
from permit_setup.flow.components.prompt import FlowPrompt
from permit_setup.flow.screens.abac_flow import prompt_condition
from permit_setup.flow.theme import Colors, Icons
from permit_setup.models import ConditionSet
from permit_setup.presets.horaion import USER_ATTRIBUTES, HoraionProvisioner


def collect_custom_user_sets(console: Console, prompt: FlowPrompt) -> List[ConditionSet]:
    user_sets: List[ConditionSet] = []
    while True:
        key = prompt.text('User set key (lowercase, e.g. "managers")', validator=validate_key)
        name = prompt.text("Display name", default=key_to_display_name(key))
        description = prompt.text("Description", default=f"Users in {name} set")

        condition = prompt_condition(console, prompt, USER_ATTRIBUTES)
        if condition is not None:
            user_sets.append(ConditionSet.user_set(
                key=key,
                name=name,
                description=description,
                conditions=[condition],
            ))
            console.print()
            console.print(f"  [{Colors.INFO}]User Set Summary:[/]")
            console.print(f"    Key: [{Colors.NEUTRAL}]{key}[/]")
            console.print(f"    Name: [{Colors.NEUTRAL}]{name}[/]")
            console.print(f"    Condition: [{Colors.NEUTRAL}]{condition.describe()}[/]")
            console.print()

        if not prompt.confirm("Add another custom user set?", default=False):
            return user_sets


def add_custom_user_sets(config: PermitConfig, console: Optional[Console] = None) -> List[ConditionSet]:
    """Collect user sets interactively, then create or update each one."""
    console = console or Console()
    prompt = FlowPrompt(console)
    console.print(Panel(
        f"[{Colors.NEUTRAL}]User sets match on user.<attribute>, passed with each permission check.[/]",
        title=f"[bold {Colors.INFO}]Add Custom User Sets[/]",
        border_style=Colors.PRIMARY,
    ))
    console.print()

    user_sets = collect_custom_user_sets(console, prompt)
    if not user_sets:
        return user_sets

    console.print(f"  [{Colors.INFO}]Creating custom user sets...[/]")
    summary = run_with_admin(
        config,
        lambda admin: HoraionProvisioner(admin).setup_user_sets(user_sets),
    )
    if summary.failed:
        console.print(f"  [{Colors.WARNING}]{Icons.WARNING} {summary.failed} user set(s) failed[/]")
    console.print(f"  [{Colors.SUCCESS}]{Icons.SUCCESS} Created {summary.succeeded} custom user set(s)[/]")
    return user_sets

"""
Permit Setup Flow ABAC Screens.

User attributes, user sets and resource sets. User sets always match on
``user.<attribute>`` so they see attributes passed at check time.
"""

from typing import List, Optional, Sequence

from rich.console import Console
from rich.panel import Panel

from permit_setup.admin import run_with_admin
from permit_setup.config.presets import (
    ATTRIBUTE_TYPES,
    BUILTIN_USER_ATTRIBUTES,
    CONDITION_OPERATORS,
    Choice,
    key_to_display_name,
    validate_key,
)
from permit_setup.config.settings import PermitConfig
from permit_setup.flow.components.menu import choose
from permit_setup.flow.components.prompt import FlowPrompt, required
from permit_setup.flow.screens.role_flow import list_assignable_resources
from permit_setup.flow.theme import Colors, Icons
from permit_setup.models import (
    AttributeType,
    Condition,
    ConditionOperator,
    ConditionSet,
    UserAttribute,
)

CUSTOM_ATTRIBUTE = "__custom__"


def _header(console: Console, title: str, text: str) -> None:
    console.print(Panel(
        f"[{Colors.NEUTRAL}]{text}[/]",
        title=f"[bold {Colors.INFO}]{title}[/]",
        border_style=Colors.PRIMARY,
    ))
    console.print()


def _report(console: Console, ok: bool, entity: str, key: str) -> None:
    if ok:
        console.print(f"  [{Colors.SUCCESS}]{Icons.SUCCESS} {entity} '{key}' created/exists[/]")
    else:
        console.print(f"  [{Colors.WARNING}]{Icons.WARNING} Failed to create {entity.lower()} '{key}'[/]")


def prompt_condition(
    console: Console,
    prompt: FlowPrompt,
    attributes: Sequence[Choice],
) -> Optional[Condition]:
    """
    Ask for one ``user.<attribute> <operator> <value>`` predicate.

    An attribute choice whose value is ``CUSTOM_ATTRIBUTE`` asks for a free
    attribute name. Returns None if the user backs out of a menu.
    """
    attribute = choose("User attribute to match", attributes)
    if attribute is None:
        return None
    if attribute == CUSTOM_ATTRIBUTE:
        attribute = prompt.text(
            "Custom attribute name",
            validator=lambda v: (bool(v), "Attribute name is required"),
        )

    operator = choose("Condition operator", CONDITION_OPERATORS)
    if operator is None:
        return None
    value = prompt.text("Value to match", validator=lambda v: (bool(v), "Value is required"))
    return Condition(attribute=attribute, operator=ConditionOperator(operator), value=value)


def attribute_choices(custom: Sequence[UserAttribute]) -> List[Choice]:
    """Built-in attributes followed by the remote custom ones."""
    return list(BUILTIN_USER_ATTRIBUTES) + [
        Choice(attr.key, f"{attr.description or attr.type.value} (custom)")
        for attr in custom
    ]


def run_create_user_attribute(config: PermitConfig, console: Optional[Console] = None) -> bool:
    console = console or Console()
    prompt = FlowPrompt(console)
    _header(
        console,
        "Create User Attribute",
        "Attributes are declared once and then passed with every permission check.",
    )

    key = prompt.text('Attribute key (lowercase, e.g. "department")', validator=validate_key)
    attr_type = choose("Attribute type", ATTRIBUTE_TYPES)
    if attr_type is None:
        return False
    description = prompt.text(
        "Attribute description",
        default=f"{key_to_display_name(key)} attribute for ABAC",
        required_input=False,
    )

    console.print()
    console.print(f"  [{Colors.INFO}]User Attribute Summary:[/]")
    console.print(f"    Key: [{Colors.NEUTRAL}]{key}[/]")
    console.print(f"    Type: [{Colors.NEUTRAL}]{attr_type}[/]")
    console.print(f"    Description: [{Colors.NEUTRAL}]{description}[/]")
    console.print()

    if not prompt.confirm("Create this user attribute?", default=True):
        console.print(f"  [{Colors.WARNING}]{Icons.WARNING} User attribute creation cancelled[/]")
        return False

    attribute = UserAttribute(key=key, type=AttributeType(attr_type), description=description)
    ok = run_with_admin(config, lambda admin: admin.user_attributes.create(attribute))
    _report(console, ok, "User attribute", key)
    return ok


def run_create_user_set(config: PermitConfig, console: Optional[Console] = None) -> bool:
    console = console or Console()
    prompt = FlowPrompt(console)
    _header(
        console,
        "Create User Set (ABAC)",
        "A user set matches users whose check-time attributes satisfy a condition.",
    )

    console.print(f"  [{Colors.INFO}]Fetching available user attributes...[/]")
    custom = run_with_admin(config, lambda admin: admin.user_attributes.list())
    if not custom:
        console.print(f"  [{Colors.WARNING}]{Icons.WARNING} No custom user attributes found.[/]")
        console.print(
            f"  [{Colors.DIM}]Use \"Create User Attribute\" to add one; "
            "built-in attributes are still available.[/]"
        )
    console.print()

    key = prompt.text('User set key (lowercase, e.g. "admins")', validator=validate_key)
    name = prompt.text("User set name", default=key_to_display_name(key), validator=required)
    condition = prompt_condition(console, prompt, attribute_choices(custom))
    if condition is None:
        return False

    console.print()
    console.print(f"  [{Colors.INFO}]User Set Summary:[/]")
    console.print(f"    Key: [{Colors.NEUTRAL}]{key}[/]")
    console.print(f"    Name: [{Colors.NEUTRAL}]{name}[/]")
    console.print(f"    Condition: [{Colors.NEUTRAL}]{condition.describe()}[/]")
    console.print()

    if not prompt.confirm("Create this user set?", default=True):
        console.print(f"  [{Colors.WARNING}]{Icons.WARNING} User set creation cancelled[/]")
        return False

    user_set = ConditionSet.user_set(key=key, name=name, conditions=[condition])
    ok = run_with_admin(config, lambda admin: admin.condition_sets.create_user_set(user_set))
    _report(console, ok, "User set", key)
    return ok


def run_create_resource_set(config: PermitConfig, console: Optional[Console] = None) -> bool:
    """Create a resource set covering every instance of one resource."""
    console = console or Console()
    prompt = FlowPrompt(console)
    _header(
        console,
        "Create Resource Set (ABAC)",
        "A resource set selects the resources a set rule applies to.",
    )

    resources = run_with_admin(config, list_assignable_resources)
    if not resources:
        console.print(f"  [{Colors.WARNING}]{Icons.WARNING} No resources found. Create resources first.[/]")
        return False

    resource_key = choose(
        "Select resource for this resource set",
        [Choice(r.key, r.name) for r in resources],
    )
    if resource_key is None:
        return False
    resource = next(r for r in resources if r.key == resource_key)

    key = prompt.text(
        'Resource set key (e.g. "all-invoices")',
        default=f"all-{resource_key}s",
        validator=validate_key,
    )
    name = prompt.text("Resource set name", default=f"All {resource.name}s", validator=required)

    console.print()
    console.print(f"  [{Colors.INFO}]Resource Set Summary:[/]")
    console.print(f"    Key: [{Colors.NEUTRAL}]{key}[/]")
    console.print(f"    Name: [{Colors.NEUTRAL}]{name}[/]")
    console.print(f"    Resource: [{Colors.NEUTRAL}]{resource_key}[/]")
    console.print(f"    Conditions: [{Colors.DIM}]All {resource_key} resources (no filter)[/]")
    console.print()

    if not prompt.confirm("Create this resource set?", default=True):
        console.print(f"  [{Colors.WARNING}]{Icons.WARNING} Resource set creation cancelled[/]")
        return False

    resource_set = ConditionSet.resource_set(
        key=key,
        name=name,
        resource_id=resource.id or resource.key,
    )
    ok = run_with_admin(config, lambda admin: admin.condition_sets.create_resource_set(resource_set))
    _report(console, ok, "Resource set", key)
    return ok

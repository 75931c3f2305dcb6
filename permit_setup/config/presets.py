"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Presets and defaults shared by the CLI, the interactive flow and the reset
orchestrator.
"""

import re
from dataclasses import dataclass


KEY_PATTERN = re.compile(r"^[a-z][a-z0-9_-]*$")
KEY_DESCRIPTION = (
    "Key must start with lowercase letter and contain only lowercase letters, "
    "numbers, hyphens, or underscores"
)


@dataclass(frozen=True)
class Choice:
    """A selectable option in an interactive prompt."""

    value: str
    label: str
    checked: bool = False


AVAILABLE_ACTIONS = (
    Choice("create", "Create new items", checked=True),
    Choice("read", "View/read items", checked=True),
    Choice("update", "Modify existing items", checked=True),
    Choice("delete", "Remove items", checked=True),
    Choice("list", "List all items", checked=True),
    Choice("manage", "Full management access"),
    Choice("configure", "Configuration access"),
    Choice("monitor", "Monitoring access"),
)

CONDITION_OPERATORS = (
    Choice("array_contains", "Array contains value"),
    Choice("equals", "Exact match"),
    Choice("not_equals", "Does not equal"),
    Choice("contains", "String contains"),
    Choice("starts_with", "String starts with"),
    Choice("ends_with", "String ends with"),
)

ATTRIBUTE_TYPES = (
    Choice("string", "Text value"),
    Choice("number", "Numeric value"),
    Choice("bool", "True/false value"),
    Choice("array", "List of values"),
)

# Attributes every user carries without being declared on __user
BUILTIN_USER_ATTRIBUTES = (
    Choice("email", "User email address (built-in)"),
    Choice("key", "User key/ID (built-in)"),
)

USER_RESOURCE = "__user"

# System resources and roles that reset never deletes
PROTECTED_RESOURCES = (USER_RESOURCE,)
PROTECTED_ROLES = ("admin", "viewer")

DEFAULT_TENANT = "default"


@dataclass(frozen=True)
class AttributePreset:
    key: str
    type: str
    description: str


DEFAULT_USER_ATTRIBUTE = AttributePreset(
    key="department",
    type="string",
    description="User department for attribute-based access control",
)

HEALTH_KEYWORDS = ("healthy", "ok")


def validate_key(value: str) -> tuple[bool, str]:
    """
    Validate a resource, role, attribute or set key.

    Returns:
        (is_valid, error_message) in the form the flow validators expect
    """
    if not value.strip():
        return False, "Key is required"
    if not KEY_PATTERN.match(value):
        return False, KEY_DESCRIPTION
    return True, ""


def capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def key_to_display_name(key: str) -> str:
    """``billing-team`` -> ``Billing team``."""
    return capitalize(key.replace("-", " "))

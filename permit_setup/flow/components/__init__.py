"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Permit Setup Flow Components - UI building blocks.

- Menu / Checklist: arrow-key navigable lists
- FlowPrompt: validated line input
"""

from permit_setup.flow.components.menu import (
    Checklist,
    Menu,
    MenuItem,
    choose,
    show_checklist,
)
from permit_setup.flow.components.prompt import FlowPrompt, FlowValidator

__all__ = [
    "Checklist",
    "Menu",
    "MenuItem",
    "choose",
    "show_checklist",
    "FlowPrompt",
    "FlowValidator",
]

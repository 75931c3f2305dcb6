"""
Permit Setup Flow Application Controller.

Runs the Edge PDP check, then loops over the main menu until the user
exits. Each menu action performs its remote calls on a fresh event loop.
"""

from functools import partial
from typing import Callable, Dict, Optional

from rich.console import Console

from permit_setup.config.settings import PermitConfig
from permit_setup.flow.components.prompt import FlowPrompt
from permit_setup.flow.screens.abac_flow import (
    run_create_resource_set,
    run_create_user_attribute,
    run_create_user_set,
)
from permit_setup.flow.screens.guide import show_how_to
from permit_setup.flow.screens.main_menu import check_edge_pdp, show_main_menu
from permit_setup.flow.screens.reset_flow import run_reset, run_verify
from permit_setup.flow.screens.resource_flow import run_create_resource
from permit_setup.flow.screens.role_flow import run_create_role
from permit_setup.flow.theme import FLOW_THEME, Colors, Icons
from permit_setup.logging_config import get_logger
from permit_setup.reset import ResetVariant

logger = get_logger(__name__)


class FlowApp:
    """Interactive setup menu."""

    def __init__(self, config: PermitConfig, console: Optional[Console] = None):
        self.config = config
        self.console = console or Console(theme=FLOW_THEME)
        self.prompt = FlowPrompt(self.console)

    def _handlers(self) -> Dict[str, Callable[[], object]]:
        config, console = self.config, self.console
        reset = partial(run_reset, config, confirm=self._confirm_reset, console=console)
        return {
            "how-to": partial(show_how_to, console),
            "create-resource": partial(run_create_resource, config, console),
            "create-role": partial(run_create_role, config, console),
            "create-user-attribute": partial(run_create_user_attribute, config, console),
            "create-user-set": partial(run_create_user_set, config, console),
            "create-resource-set": partial(run_create_resource_set, config, console),
            "verify": partial(run_verify, config, console),
            "reset-all": partial(reset, ResetVariant.ALL),
            "reset-resources": partial(reset, ResetVariant.RESOURCES),
            "reset-roles": partial(reset, ResetVariant.ROLES),
            "reset-abac": partial(reset, ResetVariant.ABAC),
        }

    def _confirm_reset(self, message: str) -> bool:
        return self.prompt.confirm(message, default=False)

    def start(self) -> None:
        if not check_edge_pdp(self.config, self.console, self.prompt):
            raise SystemExit(1)

        handlers = self._handlers()
        while True:
            selection = show_main_menu()
            if selection is None or selection == "exit":
                break

            self.console.print()
            logger.debug("flow_action_selected", action=selection)
            handlers[selection]()
            self.console.print()

            if not self.prompt.confirm("Run another operation?", default=True):
                break

        self.console.print(f"  [{Colors.INFO}]{Icons.INFO} Exiting...[/]")

"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

CLI context shared by the ``permit-setup`` and ``horaion-setup`` commands.
"""

import functools
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from permit_setup.config.settings import PermitConfig, load_config
from permit_setup.exceptions import PermitSetupError
from permit_setup.flow.theme import FLOW_THEME
from permit_setup.logging_config import set_correlation_id, setup_logging

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class CLIContext:
    """Configuration, console and flags for one command invocation."""

    def __init__(self, config: PermitConfig, console: Optional[Console] = None, yes: bool = False):
        self.config = config
        self.console = console or Console(theme=FLOW_THEME)
        self.yes = yes

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        log_level: Optional[str] = None,
        yes: bool = False,
    ) -> "CLIContext":
        """
        Load configuration and set up logging.

        ``log_level`` overrides the configured level when given. Every
        invocation gets a fresh correlation id.

        Raises:
            InvalidConfigurationError: If the configuration cannot be loaded
        """
        config = load_config(str(config_path) if config_path else None)

        effective_log_level = log_level.upper() if log_level else config.logging.level
        log_file = Path(config.logging.file) if config.logging.file else None
        setup_logging(
            level=effective_log_level,
            log_file=log_file,
            json_format=config.logging.format == "json",
        )
        set_correlation_id()
        return cls(config=config, yes=yes)

    def confirm(self, message: str) -> bool:
        """Ask before a destructive operation; ``--yes`` answers for the user."""
        if self.yes:
            return True
        return click.confirm(message, default=False)


def handle_setup_error(func):
    """
    Decorator turning errors into a message and exit status 1.

    Configuration errors carry their own remediation text; anything else
    is reported as unexpected, with a traceback at DEBUG level.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo("\nGoodbye!")
            sys.exit(0)
        except click.exceptions.Abort:
            # Ctrl-C or EOF at a click prompt; click reports it as "Aborted!"
            raise
        except PermitSetupError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        except Exception as e:
            click.echo(f"Unexpected error: {e}", err=True)
            if logging.getLogger("permit_setup").isEnabledFor(logging.DEBUG):
                import traceback
                traceback.print_exc()
            sys.exit(1)

    return wrapper

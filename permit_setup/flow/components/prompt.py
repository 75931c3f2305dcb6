"""
Permit Setup Flow Prompt Component.

Line prompts with inline validation. Validators are plain functions that
return ``(is_valid, error_message)``, the same shape as
``permit_setup.config.presets.validate_key``.
"""

from typing import Callable, Optional, Tuple

from prompt_toolkit import prompt as pt_prompt
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.validation import ValidationError, Validator
from rich.console import Console

from permit_setup.flow.theme import Colors, Icons

ValidateFn = Callable[[str], Tuple[bool, str]]


class FlowValidator(Validator):
    """prompt_toolkit validator that wraps a ``ValidateFn``."""

    def __init__(self, validate_fn: ValidateFn):
        self.validate_fn = validate_fn

    def validate(self, document):
        is_valid, error_msg = self.validate_fn(document.text.strip())
        if not is_valid:
            raise ValidationError(message=error_msg)


def required(value: str) -> Tuple[bool, str]:
    return bool(value.strip()), "This field is required"


class FlowPrompt:
    """Prompts used by every flow screen."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    @staticmethod
    def _message(message: str, hint: str = "") -> FormattedText:
        parts = [
            (Colors.HINT, f"  {Icons.ARROW_RIGHT} "),
            (Colors.NEUTRAL, message),
        ]
        if hint:
            parts.append((Colors.DIM, f" {hint}"))
        parts.append(("", ": "))
        return FormattedText(parts)

    def text(
        self,
        message: str,
        default: str = "",
        validator: Optional[ValidateFn] = None,
        required_input: bool = True,
    ) -> str:
        """
        Prompt for one line of text.

        Args:
            message: Prompt message
            default: Pre-filled value
            validator: Optional validation function
            required_input: Reject empty input when no validator is given

        Returns:
            The stripped input
        """
        flow_validator = None
        if validator:
            flow_validator = FlowValidator(validator)
        elif required_input:
            flow_validator = FlowValidator(required)

        result = pt_prompt(
            self._message(message),
            default=default,
            validator=flow_validator,
            validate_while_typing=False,
        )
        return result.strip()

    def confirm(self, message: str, default: bool = False) -> bool:
        hint = "(Y/n)" if default else "(y/N)"
        result = pt_prompt(self._message(message, hint), default="").strip()
        if not result:
            return default
        return result.lower() in ("y", "yes")

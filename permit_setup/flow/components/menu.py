"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Permit Setup Flow Menu Component.

Arrow-key menus rendered inline with prompt_toolkit:
- ``Menu``: pick one item (↑/↓, Enter, q to go back)
- ``Checklist``: toggle several items (Space to toggle, a for all, Enter to confirm)
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from prompt_toolkit import Application
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl

from permit_setup.config.presets import Choice
from permit_setup.flow.theme import Colors, Icons


@dataclass
class MenuItem:
    """A single menu entry."""

    key: str
    label: str
    description: str = ""
    icon: str = ""
    disabled: bool = False
    data: Any = None


class _Navigable:
    """Cursor movement over a list that may contain disabled entries."""

    def __init__(self, count: int):
        self.count = count
        self.selected_index = 0

    def _enabled(self, index: int) -> bool:
        return True

    def _step(self, direction: int) -> None:
        for offset in range(1, self.count + 1):
            index = (self.selected_index + direction * offset) % self.count
            if self._enabled(index):
                self.selected_index = index
                return

    def _bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("up")
        @kb.add("k")
        def _up(event):
            self._step(-1)

        @kb.add("down")
        @kb.add("j")
        def _down(event):
            self._step(1)

        return kb

    def _run_app(self, kb: KeyBindings, render) -> None:
        app = Application(
            layout=Layout(Window(content=FormattedTextControl(text=render))),
            key_bindings=kb,
            full_screen=False,
        )
        app.run()


class Menu(_Navigable):
    """Single-choice menu. ``run()`` returns the chosen item or None."""

    def __init__(
        self,
        title: str,
        items: List[MenuItem],
        subtitle: str = "",
        show_hints: bool = True,
    ):
        super().__init__(len(items))
        self.title = title
        self.subtitle = subtitle
        self.items = items
        self.show_hints = show_hints
        self._result: Optional[MenuItem] = None
        if items and items[0].disabled:
            self._step(1)

    def _enabled(self, index: int) -> bool:
        return not self.items[index].disabled

    def _get_menu_text(self) -> FormattedText:
        lines = []
        if self.title:
            lines.append((f"bold {Colors.INFO}", f"\n  {self.title}\n"))
        if self.subtitle:
            lines.append((Colors.DIM, f"  {self.subtitle}\n"))
        if self.title or self.subtitle:
            lines.append(("", "\n"))

        for i, item in enumerate(self.items):
            is_selected = i == self.selected_index
            if item.disabled:
                style, prefix = Colors.DIM, "    "
            elif is_selected:
                style, prefix = f"bold {Colors.PRIMARY}", f"  {Icons.ARROW_SELECT} "
            else:
                style, prefix = Colors.NEUTRAL, "    "

            icon_part = f"{item.icon} " if item.icon else ""
            lines.append((style, f"{prefix}{icon_part}{item.label}"))
            if is_selected and item.description:
                lines.append((Colors.DIM, f"  - {item.description}"))
            lines.append(("", "\n"))

        if self.show_hints:
            lines.append(("", "\n"))
            lines.append((Colors.HINT, "  ↑↓ navigate  Enter select  q back\n"))
        return FormattedText(lines)

    def run(self) -> Optional[MenuItem]:
        if not self.items:
            return None
        kb = self._bindings()

        @kb.add("enter")
        def _select(event):
            item = self.items[self.selected_index]
            if not item.disabled:
                self._result = item
                event.app.exit()

        @kb.add("q")
        @kb.add("escape")
        @kb.add("c-c")
        def _back(event):
            self._result = None
            event.app.exit()

        self._run_app(kb, self._get_menu_text)
        return self._result


class Checklist(_Navigable):
    """
    Multi-choice list of ``Choice`` entries.

    ``run()`` returns the selected values in display order, or None when
    the user backs out. Confirming with nothing checked returns ``[]``.
    """

    def __init__(self, title: str, choices: Sequence[Choice]):
        super().__init__(len(choices))
        self.title = title
        self.choices = list(choices)
        self.checked = [choice.checked for choice in self.choices]
        self._confirmed = False

    def toggle(self, index: int) -> None:
        self.checked[index] = not self.checked[index]

    def toggle_all(self) -> None:
        state = not all(self.checked)
        self.checked = [state] * len(self.choices)

    def selected_values(self) -> List[str]:
        return [c.value for c, on in zip(self.choices, self.checked) if on]

    def _get_text(self) -> FormattedText:
        lines = [(f"bold {Colors.INFO}", f"\n  {self.title}\n\n")]
        for i, choice in enumerate(self.choices):
            marker = Icons.COMPLETE if self.checked[i] else Icons.PENDING
            if i == self.selected_index:
                style = f"bold {Colors.PRIMARY}"
            elif self.checked[i]:
                style = Colors.SUCCESS
            else:
                style = Colors.NEUTRAL
            lines.append((style, f"    {marker} {choice.label}\n"))
        lines.append(("", "\n"))
        lines.append((Colors.HINT, "  Space toggle  a all  Enter confirm  q back\n"))
        return FormattedText(lines)

    def run(self) -> Optional[List[str]]:
        if not self.choices:
            return []
        kb = self._bindings()

        @kb.add("space")
        def _toggle(event):
            self.toggle(self.selected_index)

        @kb.add("a")
        def _all(event):
            self.toggle_all()

        @kb.add("enter")
        def _confirm(event):
            self._confirmed = True
            event.app.exit()

        @kb.add("q")
        @kb.add("escape")
        @kb.add("c-c")
        def _back(event):
            event.app.exit()

        self._run_app(kb, self._get_text)
        return self.selected_values() if self._confirmed else None


def show_checklist(title: str, choices: Sequence[Choice]) -> Optional[List[str]]:
    return Checklist(title, choices).run()


def choose(title: str, choices: Sequence[Choice]) -> Optional[str]:
    """Single-choice menu over ``Choice`` entries; returns the value or None."""
    menu = Menu(
        title=title,
        items=[MenuItem(key=c.value, label=f"{c.value} - {c.label}") for c in choices],
        show_hints=False,
    )
    result = menu.run()
    return result.key if result else None

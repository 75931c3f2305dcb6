"""
Permit Setup Flow Theme.

One palette shared by rich output (markup names in ``FLOW_THEME``) and the
prompt_toolkit menus (raw ``Colors`` values):

- Green: created, exists, healthy
- Yellow: skipped, cancelled, partial failure
- Red: failed, misconfigured scope
- Magenta: headings and summaries
- Blue/Cyan: selection and key hints
"""

from rich.theme import Theme


class Colors:
    SUCCESS = "#00d787"
    PRIMARY = "#5f87ff"
    WARNING = "#ffd700"
    ERROR = "#ff5f5f"
    NEUTRAL = "#ffffff"
    INFO = "#d787ff"
    HINT = "#5fd7ff"
    DIM = "#808080"


FLOW_THEME = Theme({
    "title": f"bold {Colors.INFO}",
    "muted": Colors.DIM,
    "success": f"bold {Colors.SUCCESS}",
    "warning": f"bold {Colors.WARNING}",
    "error": f"bold {Colors.ERROR}",
    "info": Colors.INFO,
})


class Icons:
    """Status and menu glyphs."""

    SUCCESS = "✓"
    ERROR = "✗"
    WARNING = "⚠"
    INFO = "ℹ"

    # Checklist markers
    PENDING = "○"
    COMPLETE = "●"

    ARROW_RIGHT = "→"
    ARROW_SELECT = "▶"
    DASH = "─"

    # Main menu
    RESOURCE = "📦"
    ROLE = "👤"
    ABAC = "🔐"
    VERIFY = "🔍"
    RESET = "🗑 "
    HELP = "❓"

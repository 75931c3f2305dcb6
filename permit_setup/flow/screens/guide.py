"""
Permit Setup Flow How-to Guide.
"""

from typing import Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from permit_setup.flow.theme import Colors

GUIDE = """
ABAC (Attribute-Based Access Control) grants access from user attributes
rather than from roles alone.

## Setup order

1. **Create a Resource** - what you protect (e.g. `invoice`) and its
   actions (`create`, `read`, `update`, `delete`).
2. **Create User Attribute(s)** - e.g. `groups` of type `array`.
   Types: `string` (department: "engineering"), `number` (level: 5),
   `bool` (is_manager: true), `array` (groups: ["admin", "billing"]).
3. **Create User Set(s)** - e.g. `billing-team` where
   `user.groups array_contains "billing"`.
4. **Create Resource Set(s)** - e.g. `all-invoices` for every `invoice`.
5. **Link them with Set Rules** - user set + resource set + permission,
   created from the dashboard or by a preset such as `horaion-setup`.

## Example: billing team reads invoices

1. Resource `invoice` with action `read`
2. User attribute `groups` (array)
3. User set `billing-users`: `user.groups array_contains "billing"`
4. Resource set `all-invoices` for resource `invoice`
5. Set rule `billing-users` + `all-invoices` + `invoice:read`

## Checking a permission

```python
permitted = await permit.check(
    {"key": "user-123", "attributes": {"groups": ["billing", "finance"]}},
    "read",
    {"type": "invoice", "key": "invoice-456"},
)
```

## Notes

- ABAC requires the Edge PDP; the cloud PDP does not evaluate user sets.
- User attributes must exist before a user set references them.
- Built-in attributes (`email`, `key`) are always available.
- Use **Verify Setup** to see the current configuration.
"""


def show_how_to(console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(Panel(
        Markdown(GUIDE),
        title=f"[bold {Colors.INFO}]How to Set Up ABAC[/]",
        border_style=Colors.PRIMARY,
    ))

"""
Permit Setup Flow Screens.

- main_menu: header, Edge PDP check and top-level menu
- resource_flow / role_flow: RBAC entities
- abac_flow: user attributes, user sets, resource sets
- reset_flow: verify and reset runners
- horaion_flow: custom user-set wizard for the Horaion preset
- guide: how-to text
"""

"""
Unit tests for the interactive flow screens.

Prompts and menus are replaced with scripted answers so each screen runs
headless against the in-memory API.
"""

from collections import deque

import pytest
from rich.console import Console

from permit_setup.flow.app import FlowApp
from permit_setup.flow.components.prompt import FlowPrompt
from permit_setup.flow.screens import abac_flow, horaion_flow, main_menu, resource_flow, role_flow
from permit_setup.flow.theme import FLOW_THEME

USE_DEFAULT = object()


class Script:
    """Answers consumed in order by ``FlowPrompt.text`` and ``FlowPrompt.confirm``."""

    def __init__(self):
        self.answers = deque()
        self.asked = []

    def feed(self, *answers):
        self.answers.extend(answers)

    def text(self, message, default="", validator=None, required_input=True):
        self.asked.append(message)
        answer = self.answers.popleft()
        value = default if answer is USE_DEFAULT else answer
        if validator is not None:
            ok, error = validator(value)
            assert ok, f"{message!r} rejected {value!r}: {error}"
        return value

    def confirm(self, message, default=False):
        self.asked.append(message)
        answer = self.answers.popleft()
        return default if answer is USE_DEFAULT else answer


@pytest.fixture
def script(monkeypatch) -> Script:
    scripted = Script()
    monkeypatch.setattr(FlowPrompt, "text", scripted.text)
    monkeypatch.setattr(FlowPrompt, "confirm", scripted.confirm)
    return scripted


@pytest.fixture
def console() -> Console:
    return Console(record=True, theme=FLOW_THEME, width=120, color_system=None)


def _menu_answers(monkeypatch, module, *answers):
    queue = deque(answers)
    monkeypatch.setattr(module, "choose", lambda title, choices: queue.popleft())


class TestResourceScreen:

    def test_create_with_custom_action(self, monkeypatch, script, console, permit_config, patch_transport):
        monkeypatch.setattr(resource_flow, "show_checklist", lambda title, choices: ["read", "update"])
        script.feed("invoice", USE_DEFAULT, USE_DEFAULT, True, "approve", USE_DEFAULT, USE_DEFAULT, False, True)

        assert resource_flow.run_create_resource(permit_config, console) is True

        stored = patch_transport.resources["invoice"]
        assert stored["name"] == "Invoice"
        assert stored["description"] == "Invoice resource"
        assert list(stored["actions"]) == ["read", "update", "approve"]
        assert stored["actions"]["approve"] == {"name": "Approve", "description": "Approve invoice"}
        assert "Resource 'invoice' created/exists" in console.export_text()

    def test_cancelled_checklist_creates_nothing(self, monkeypatch, script, console, permit_config, patch_transport):
        monkeypatch.setattr(resource_flow, "show_checklist", lambda title, choices: None)
        script.feed("invoice", USE_DEFAULT, USE_DEFAULT)

        assert resource_flow.run_create_resource(permit_config, console) is False
        assert patch_transport.calls == []


class TestRoleScreen:

    def test_create_role_and_assign_permissions(
        self, monkeypatch, script, console, permit_config, patch_transport
    ):
        patch_transport.resources["invoice"] = {
            "key": "invoice",
            "name": "Invoice",
            "actions": {"read": {"name": "Read"}, "approve": {"name": "Approve"}},
        }
        _menu_answers(monkeypatch, role_flow, "invoice")
        monkeypatch.setattr(role_flow, "show_checklist", lambda title, choices: ["read", "approve"])
        script.feed("approver", USE_DEFAULT, USE_DEFAULT, True, True, False)

        assert role_flow.run_create_role(permit_config, console) is True

        stored = patch_transport.roles["approver"]
        assert stored["description"] == "Approver role"
        assert stored["permissions"] == ["invoice:read", "invoice:approve"]
        assert "Assigned invoice:approve to approver" in console.export_text()


class TestAbacScreens:

    def test_create_user_attribute(self, monkeypatch, script, console, permit_config, patch_transport):
        _menu_answers(monkeypatch, abac_flow, "string")
        script.feed("department", USE_DEFAULT, True)

        assert abac_flow.run_create_user_attribute(permit_config, console) is True
        assert patch_transport.user_attributes["department"] == {
            "key": "department",
            "type": "string",
            "description": "Department attribute for ABAC",
        }

    def test_create_user_set_uses_user_scope(self, monkeypatch, script, console, permit_config, patch_transport):
        _menu_answers(monkeypatch, abac_flow, "email", "ends_with")
        script.feed("staff", USE_DEFAULT, "@example.com", True)

        assert abac_flow.run_create_user_set(permit_config, console) is True

        stored = patch_transport.condition_sets["staff"]
        assert stored["type"] == "userset"
        assert stored["conditions"] == {"allOf": [{"user.email": {"ends_with": "@example.com"}}]}
        assert "No custom user attributes found." in console.export_text()

    def test_create_resource_set_references_resource_id(
        self, monkeypatch, script, console, permit_config, patch_transport
    ):
        patch_transport.resources["invoice"] = {"key": "invoice", "name": "Invoice", "id": "id-invoice"}
        _menu_answers(monkeypatch, abac_flow, "invoice")
        script.feed(USE_DEFAULT, USE_DEFAULT, True)

        assert abac_flow.run_create_resource_set(permit_config, console) is True

        stored = patch_transport.condition_sets["all-invoices"]
        assert stored["type"] == "resourceset"
        assert stored["resource_id"] == "id-invoice"
        assert stored["name"] == "All Invoices"
        assert stored["conditions"] == {"allOf": []}

    def test_resource_set_without_resources(self, script, console, permit_config, patch_transport):
        assert abac_flow.run_create_resource_set(permit_config, console) is False
        assert "No resources found" in console.export_text()


class TestHoraionScreen:

    def test_add_custom_user_sets(self, monkeypatch, script, console, permit_config, patch_transport):
        _menu_answers(monkeypatch, abac_flow, "groups", "array_contains")
        script.feed("auditors", USE_DEFAULT, USE_DEFAULT, "auditor", False)

        created = horaion_flow.add_custom_user_sets(permit_config, console)

        assert [user_set.key for user_set in created] == ["auditors"]
        assert patch_transport.condition_sets["auditors"]["conditions"] == {
            "allOf": [{"user.groups": {"array_contains": "auditor"}}]
        }
        assert "Created 1 custom user set(s)" in console.export_text()


class TestFlowApp:

    def test_unreachable_pdp_declined_exits(self, monkeypatch, script, console, permit_config, patch_transport):
        monkeypatch.setattr(main_menu, "run_with_admin", lambda config, operation: False)
        script.feed(False)

        with pytest.raises(SystemExit) as exc_info:
            FlowApp(permit_config, console).start()

        assert exc_info.value.code == 1
        assert "docker compose" in console.export_text()

    def test_menu_loop_dispatches_until_exit(self, monkeypatch, script, console, permit_config, patch_transport):
        selections = deque(["verify", "reset-roles", "exit"])
        monkeypatch.setattr("permit_setup.flow.app.show_main_menu", selections.popleft)
        patch_transport.roles["editor"] = {"key": "editor", "name": "Editor", "permissions": []}
        # run another? yes; confirm reset: yes; run another? yes
        script.feed(True, True, True)

        FlowApp(permit_config, console).start()

        output = console.export_text()
        assert "Edge PDP is running" in output
        assert "Setup verification complete" in output
        assert set(patch_transport.roles) == {"admin", "viewer"}
        assert "Exiting..." in output
        assert selections == deque()

"""
Unit tests for the ``permit-setup`` and ``horaion-setup`` commands.

Commands run through ``CliRunner`` against the in-memory API; every
``HttpAdapter`` they build is routed to the fake by ``patch_transport``.
"""

import pytest
from click.testing import CliRunner

from permit_setup.cli.horaion import main as horaion_main
from permit_setup.cli.main import cli
from permit_setup.models import ConditionSet, Condition, ConditionOperator


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestCLIMain:
    """Test the flag-driven entry point."""

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Permit.io Edge PDP Setup" in result.output
        for option in ("--verify", "--reset", "--reset-abac", "--yes", "--config"):
            assert option in result.output

    def test_cli_version(self, runner):
        from permit_setup import __version__

        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_verify_prints_header_and_report(self, runner, permit_env, patch_transport):
        result = runner.invoke(cli, ["--config", str(permit_env), "--verify"])

        assert result.exit_code == 0, result.output
        assert "Project: proj" in result.output
        assert "Environment: dev" in result.output
        assert "API key: perm...6789" in result.output
        assert "permit_key_test_0123456789" not in result.output
        assert "Setup verification complete" in result.output
        assert all(method == "GET" for method, _, _ in patch_transport.calls)

    def test_missing_api_key_exits_1(self, runner, permit_env, patch_transport, monkeypatch):
        monkeypatch.delenv("PERMIT_API_KEY")

        result = runner.invoke(cli, ["--config", str(permit_env), "--verify"])

        assert result.exit_code == 1
        assert "PERMIT_API_KEY environment variable is not set" in result.output
        assert patch_transport.calls == []

    def test_malformed_config_exits_1(self, runner, permit_env, patch_transport):
        permit_env.write_text("api_url: [unclosed\n")

        result = runner.invoke(cli, ["--config", str(permit_env), "--verify"])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_reset_roles_with_yes(self, runner, permit_env, patch_transport):
        patch_transport.roles["editor"] = {"key": "editor", "name": "Editor", "permissions": []}

        result = runner.invoke(cli, ["--config", str(permit_env), "--reset-roles", "--yes"])

        assert result.exit_code == 0, result.output
        assert set(patch_transport.roles) == {"admin", "viewer"}
        assert "Reset complete" in result.output
        assert "Setup verification complete" in result.output

    def test_declined_reset_deletes_nothing(self, runner, permit_env, patch_transport):
        result = runner.invoke(cli, ["--config", str(permit_env), "--reset"], input="n\n")

        assert result.exit_code == 0
        assert "Are you sure?" in result.output
        assert "Reset cancelled." in result.output
        assert patch_transport.deletes() == []

    def test_eof_at_confirmation_aborts(self, runner, permit_env, patch_transport):
        result = runner.invoke(cli, ["--config", str(permit_env), "--reset"], input="")

        assert result.exit_code == 1
        assert "Aborted!" in result.output
        assert "Unexpected error" not in result.output
        assert patch_transport.deletes() == []

    def test_confirmed_reset_all(self, runner, permit_env, patch_transport):
        result = runner.invoke(cli, ["--config", str(permit_env), "--reset"], input="y\n")

        assert result.exit_code == 0, result.output
        assert ("tenants", "default") in patch_transport.deletes()

    def test_failed_deletes_are_reported(self, runner, permit_env, patch_transport):
        patch_transport.roles["editor"] = {"key": "editor", "name": "Editor", "permissions": []}
        patch_transport.failures[("DELETE", "roles")] = 403

        result = runner.invoke(cli, ["--config", str(permit_env), "--reset-rbac", "-y"])

        assert result.exit_code == 0
        assert "Could not delete roles: editor" in result.output
        assert "Reset finished with 1 failure(s)" in result.output


class TestHoraionCLI:

    def test_provisions_then_verifies(self, runner, permit_env, patch_transport):
        result = runner.invoke(horaion_main, ["--config", str(permit_env)])

        assert result.exit_code == 0, result.output
        assert "Horaion - Permit.io ABAC Setup" in result.output
        assert "Set rules setup complete (49)" in result.output
        assert "All user sets use the correct user.groups condition" in result.output
        assert "Setup complete!" in result.output
        assert len(patch_transport.set_rules) == 49

    def test_user_sets_only(self, runner, permit_env, patch_transport):
        result = runner.invoke(horaion_main, ["--config", str(permit_env), "--user-sets"])

        assert result.exit_code == 0, result.output
        assert len(patch_transport.condition_sets) == 4
        assert patch_transport.resources.keys() == {"__user"}
        assert patch_transport.set_rules == []

    def test_verify_warns_about_subject_scope(self, runner, permit_env, patch_transport):
        wrong = ConditionSet.user_set(
            "users", "Users",
            [Condition("groups", ConditionOperator.ARRAY_CONTAINS, "user", scope="subject")],
        )
        patch_transport.condition_sets["users"] = wrong.to_payload()

        result = runner.invoke(horaion_main, ["--config", str(permit_env), "-v"])

        assert result.exit_code == 0, result.output
        assert "subject.groups - WRONG!" in result.output
        assert "These will NOT work with the Horaion application." in result.output
        assert [m for m, _, _ in patch_transport.calls if m != "GET"] == []

"""
Unit tests for the reset orchestrator.
"""

import pytest

from permit_setup.models import (
    AttributeType,
    Condition,
    ConditionOperator,
    ConditionSet,
    Resource,
    Role,
    SetRule,
    UserAttribute,
)
from permit_setup.reset import ResetOrchestrator, ResetStage, ResetVariant


async def _seed(admin):
    await admin.resources.create(Resource.with_actions("invoice", "Invoice", action_keys=["read"]))
    await admin.roles.create(Role("editor", "Editor", permissions=["invoice:read"]))
    await admin.user_attributes.create(UserAttribute("department", AttributeType.STRING))
    await admin.condition_sets.create(
        ConditionSet.user_set(
            "finance", "Finance",
            [Condition("department", ConditionOperator.EQUALS, "finance")],
        )
    )
    await admin.condition_sets.create(
        ConditionSet.resource_set("all-invoices", "All Invoices", resource_id="id-invoice")
    )
    await admin.set_rules.create(SetRule("finance", "all-invoices", "invoice:read"))


def _stage(report, stage):
    return next(s for s in report.stages if s.stage is stage)


class TestResetAll:

    @pytest.mark.asyncio
    async def test_deletes_in_dependency_order(self, admin, fake_api):
        await _seed(admin)
        fake_api.calls.clear()

        report = await ResetOrchestrator(admin).reset_all()

        assert fake_api.deletes() == [
            ("set_rules", None),
            ("condition_sets", "all-invoices"),
            ("condition_sets", "finance"),
            ("user_attributes", "department"),
            ("roles", "editor"),
            ("resources", "invoice"),
            ("tenants", "default"),
        ]
        assert [s.stage for s in report.stages] == list(ResetStage)
        assert report.complete is True

    @pytest.mark.asyncio
    async def test_protected_entities_are_kept(self, admin, fake_api):
        await _seed(admin)

        report = await ResetOrchestrator(admin).reset_all()

        assert set(fake_api.roles) == {"admin", "viewer"}
        assert set(fake_api.resources) == {"__user"}
        assert _stage(report, ResetStage.ROLES).skipped == 2
        assert _stage(report, ResetStage.RESOURCES).skipped == 1
        assert ("roles", "admin") not in fake_api.deletes()
        assert ("resources", "__user") not in fake_api.deletes()

    @pytest.mark.asyncio
    async def test_running_twice_is_harmless(self, admin, fake_api):
        await _seed(admin)
        orchestrator = ResetOrchestrator(admin)

        await orchestrator.reset_all()
        second = await orchestrator.reset_all()

        assert second.complete is True
        assert _stage(second, ResetStage.SET_RULES).deleted == 0
        # Already-absent attribute and tenant count as deleted
        assert _stage(second, ResetStage.USER_ATTRIBUTES).deleted == 1
        assert _stage(second, ResetStage.TENANT).deleted == 1

    @pytest.mark.asyncio
    async def test_refused_delete_is_counted_and_sequence_continues(self, admin, fake_api):
        await _seed(admin)
        fake_api.failures[("DELETE", "roles")] = 403

        report = await ResetOrchestrator(admin).reset_all()

        roles = _stage(report, ResetStage.ROLES)
        assert roles.failed == 1
        assert roles.failed_keys == ["editor"]
        assert report.failed == 1
        assert report.complete is False
        assert ("tenants", "default") in fake_api.deletes()
        assert "invoice" not in fake_api.resources

    @pytest.mark.asyncio
    async def test_deletes_keys_created_outside_this_tool(self, admin, fake_api):
        fake_api.roles["Editor"] = {"key": "Editor", "name": "Editor", "permissions": []}
        fake_api.resources["invoice"] = {
            "key": "invoice",
            "name": "Invoice",
            "actions": {"Approve": {"name": "Approve"}},
        }

        report = await ResetOrchestrator(admin).reset_all()

        assert set(fake_api.roles) == {"admin", "viewer"}
        assert set(fake_api.resources) == {"__user"}
        assert ("roles", "Editor") in fake_api.deletes()
        assert ("resources", "invoice") in fake_api.deletes()
        assert report.complete is True

    @pytest.mark.asyncio
    async def test_failed_set_rule_is_reported_by_full_triple(self, admin, fake_api):
        await _seed(admin)
        fake_api.failures[("DELETE", "set_rules")] = 500

        report = await ResetOrchestrator(admin).reset_abac()

        assert _stage(report, ResetStage.SET_RULES).failed_keys == [
            "finance -> all-invoices (invoice:read)"
        ]

    @pytest.mark.asyncio
    async def test_listing_failure_yields_empty_stage(self, admin, fake_api):
        await _seed(admin)
        fake_api.failures[("GET", "condition_sets")] = 500

        report = await ResetOrchestrator(admin).reset_all()

        condition_sets = _stage(report, ResetStage.CONDITION_SETS)
        assert (condition_sets.deleted, condition_sets.failed) == (0, 0)
        assert len(report.stages) == 6


class TestResetVariants:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "variant,collections",
        [
            (ResetVariant.RESOURCES, ["resources"]),
            (ResetVariant.ROLES, ["roles"]),
            (ResetVariant.RBAC, ["roles", "resources"]),
            (ResetVariant.ABAC, ["set_rules", "condition_sets", "condition_sets", "user_attributes"]),
        ],
    )
    async def test_variant_touches_only_its_stages(self, admin, fake_api, variant, collections):
        await _seed(admin)
        fake_api.calls.clear()

        await ResetOrchestrator(admin).run(variant)

        assert [collection for collection, _ in fake_api.deletes()] == collections

    @pytest.mark.asyncio
    async def test_abac_keeps_roles_and_resources(self, admin, fake_api):
        await _seed(admin)

        await ResetOrchestrator(admin).reset_abac()

        assert "editor" in fake_api.roles
        assert "invoice" in fake_api.resources
        assert fake_api.condition_sets == {}
        assert fake_api.set_rules == []
        assert fake_api.tenants == {"default"}

    @pytest.mark.asyncio
    async def test_custom_attribute_key(self, admin, fake_api):
        await admin.user_attributes.create(UserAttribute("groups", AttributeType.ARRAY))

        await ResetOrchestrator(admin, attribute_key="groups").delete_user_attributes()

        assert fake_api.user_attributes == {}

    @pytest.mark.asyncio
    async def test_named_variants(self, admin):
        orchestrator = ResetOrchestrator(admin)

        assert (await orchestrator.reset_rbac()).variant is ResetVariant.RBAC
        assert (await orchestrator.reset_resources()).variant is ResetVariant.RESOURCES
        assert (await orchestrator.reset_roles()).variant is ResetVariant.ROLES
        assert (await orchestrator.reset_abac()).variant is ResetVariant.ABAC

"""
Unit tests for the policy model and key validation.
"""

import json

import pytest

from permit_setup.config.presets import capitalize, key_to_display_name, validate_key
from permit_setup.exceptions import InvalidConditionError, InvalidKeyError
from permit_setup.models import (
    AttributeType,
    Condition,
    ConditionExpression,
    ConditionOperator,
    ConditionSet,
    ConditionSetType,
    Resource,
    Role,
    SetRule,
    UserAttribute,
    check_key,
)


class TestKeys:

    @pytest.mark.parametrize("key", ["invoice", "a", "all-invoices", "team_2", "x9-y_z"])
    def test_valid_keys(self, key):
        assert validate_key(key) == (True, "")
        assert check_key(key) == key

    @pytest.mark.parametrize("key", ["Invoice", "9lives", "-dash", "has space", "émoji"])
    def test_invalid_keys(self, key):
        ok, message = validate_key(key)
        assert ok is False
        assert "lowercase" in message
        with pytest.raises(InvalidKeyError):
            check_key(key)

    def test_reserved_prefix_is_accepted(self):
        assert check_key("__user") == "__user"
        assert check_key("__autogen_company") == "__autogen_company"

    def test_display_helpers(self):
        assert capitalize("read") == "Read"
        assert key_to_display_name("all-invoices") == "All invoices"
        assert key_to_display_name("team_lead") == "Team_lead"

    def test_empty_key_is_required(self):
        assert validate_key("   ") == (False, "Key is required")


class TestResource:

    def test_with_actions_labels(self):
        resource = Resource.with_actions("invoice", "Invoice", "Invoices", ["read", "create"])
        payload = resource.to_payload()
        assert payload["key"] == "invoice"
        assert payload["actions"] == {
            "read": {"name": "Read", "description": "Read invoice"},
            "create": {"name": "Create", "description": "Create invoice"},
        }

    def test_invalid_action_key(self):
        with pytest.raises(InvalidKeyError):
            Resource.with_actions("invoice", "Invoice", action_keys=["Approve"])

    def test_from_payload(self):
        resource = Resource.from_payload({
            "key": "invoice",
            "name": "Invoice",
            "id": "abc",
            "actions": {"read": {"name": "Read"}, "approve": None},
        })
        assert resource.id == "abc"
        assert resource.actions["read"].name == "Read"
        assert resource.actions["approve"].name == "approve"

    def test_from_payload_keeps_keys_local_rules_reject(self):
        resource = Resource.from_payload({
            "key": "Invoice",
            "actions": {"Approve": {"name": "Approve"}},
        })
        assert resource.key == "Invoice"
        assert list(resource.actions) == ["Approve"]


class TestRole:

    def test_permissions_not_in_payload(self):
        role = Role("editor", "Editor", permissions=["invoice:read"])
        assert role.to_payload() == {"key": "editor", "name": "Editor", "description": ""}

    def test_invalid_role_key(self):
        with pytest.raises(InvalidKeyError):
            Role("Editor", "Editor")

    def test_from_payload_keeps_uppercase_key(self):
        assert Role.from_payload({"key": "Editor"}).key == "Editor"


class TestUserAttribute:

    def test_type_coercion(self):
        attribute = UserAttribute("groups", "array")
        assert attribute.type is AttributeType.ARRAY
        assert attribute.to_payload() == {"key": "groups", "type": "array", "description": ""}

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            UserAttribute("groups", "list")


class TestConditions:

    def test_condition_payload(self):
        condition = Condition("groups", ConditionOperator.ARRAY_CONTAINS, "billing")
        assert condition.to_payload() == {"user.groups": {"array_contains": "billing"}}
        assert condition.describe() == 'user.groups array_contains "billing"'

    def test_unknown_operator(self):
        with pytest.raises(InvalidConditionError):
            Condition("groups", "matches", "x")

    def test_expression_payload(self):
        expression = ConditionExpression([
            Condition("department", ConditionOperator.EQUALS, "sales"),
            Condition("email", ConditionOperator.ENDS_WITH, "@acme.com"),
        ])
        assert expression.to_payload() == {
            "allOf": [
                {"user.department": {"equals": "sales"}},
                {"user.email": {"ends_with": "@acme.com"}},
            ]
        }

    def test_parse_subject_scope(self):
        expression = ConditionExpression.from_payload(
            {"allOf": [{"subject.groups": {"array_contains": "admin"}}]}
        )
        condition = expression.all_of[0]
        assert condition.scope == "subject"
        assert condition.attribute == "groups"
        assert condition.operator is ConditionOperator.ARRAY_CONTAINS

    def test_parse_empty_expression(self):
        assert ConditionExpression.from_payload({"allOf": []}).all_of == []
        assert ConditionExpression.from_payload(None).all_of == []

    def test_parse_rejects_multi_attribute_predicate(self):
        with pytest.raises(InvalidConditionError):
            Condition.from_payload({"user.a": {"equals": 1}, "user.b": {"equals": 2}})


class TestConditionSet:

    def test_user_set_payload(self):
        user_set = ConditionSet.user_set(
            "billing-users",
            "Billing Users",
            [Condition("groups", ConditionOperator.ARRAY_CONTAINS, "billing")],
        )
        payload = user_set.to_payload()
        assert payload["type"] == "userset"
        assert payload["conditions"] == {"allOf": [{"user.groups": {"array_contains": "billing"}}]}
        assert "resource_id" not in payload

    def test_resource_set_payload(self):
        resource_set = ConditionSet.resource_set("all-invoices", "All Invoices", resource_id="id-invoice")
        payload = resource_set.to_payload()
        assert payload["type"] == "resourceset"
        assert payload["resource_id"] == "id-invoice"
        assert payload["conditions"] == {"allOf": []}

    def test_from_payload_keeps_raw_conditions(self):
        raw = {"allOf": [{"subject.groups": {"array_contains": "admin"}}], "extra": True}
        condition_set = ConditionSet.from_payload({"key": "admins", "type": "userset", "conditions": raw})
        assert condition_set.type is ConditionSetType.USER_SET
        assert condition_set.conditions == raw
        assert condition_set.serialized_conditions() == json.dumps(raw, sort_keys=True)


class TestSetRule:

    def test_identity_is_the_triple(self):
        a = SetRule("users", "__autogen_company", "company:read")
        b = SetRule.from_payload(a.to_payload())
        assert a == b
        assert hash(a) == hash(b)

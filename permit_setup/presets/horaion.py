"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Horaion policy bundle: pure ABAC without user sync.

Users are never synced to the policy service. Identity-provider groups are
passed as the ``user.groups`` attribute at check time, user sets match on
``user.groups array_contains "<group>"``, and set rules grant permissions
to those user sets over the auto-generated per-resource resource sets.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from permit_setup.admin import PolicyAdmin
from permit_setup.config.presets import Choice
from permit_setup.logging_config import get_logger
from permit_setup.models import (
    AttributeType,
    Condition,
    ConditionOperator,
    ConditionSet,
    Resource,
    SetRule,
    UserAttribute,
    permission_string,
)
from permit_setup.verify import Reconciler, VerificationReport

logger = get_logger(__name__)

CRUD = ("create", "read", "update", "delete")
READ = ("read",)

GROUPS_ATTRIBUTE = UserAttribute(
    key="groups",
    type=AttributeType.ARRAY,
    description="Identity provider groups passed at check time",
)

# Attributes offered when adding a custom user set
USER_ATTRIBUTES = (
    Choice("groups", "Identity provider groups (array)"),
    Choice("email", "User email address (built-in)"),
    Choice("key", "User key/ID (built-in)"),
    Choice("__custom__", "Other attribute..."),
)


@dataclass(frozen=True)
class ResourceSpec:
    key: str
    name: str
    description: str
    actions: Tuple[str, ...] = CRUD

    def to_resource(self) -> Resource:
        return Resource.with_actions(self.key, self.name, self.description, self.actions)


@dataclass(frozen=True)
class Grant:
    """Actions on one resource granted to one user set."""

    user_set: str
    resource: str
    actions: Tuple[str, ...]

    def set_rules(self) -> List[SetRule]:
        return [
            SetRule(
                user_set=self.user_set,
                resource_set=autogen_resource_set(self.resource),
                permission=permission_string(self.resource, action),
            )
            for action in self.actions
        ]


def autogen_resource_set(resource_key: str) -> str:
    """Key of the resource set the service generates for every resource."""
    return f"__autogen_{resource_key}"


def groups_user_set(key: str, name: str, group: str, description: str) -> ConditionSet:
    return ConditionSet.user_set(
        key=key,
        name=name,
        description=description,
        conditions=[Condition("groups", ConditionOperator.ARRAY_CONTAINS, group)],
    )


RESOURCES = (
    ResourceSpec("company", "Company", "Company management"),
    ResourceSpec("branch", "Branch", "Branch management"),
    ResourceSpec("department", "Department", "Department management"),
    ResourceSpec("employee", "Employee", "Employee management"),
    ResourceSpec("rule", "Rule", "Rule management"),
)

USER_SETS = (
    groups_user_set(
        "system-administrators",
        "System Administrators",
        "system-administrator",
        "Users with system-administrator group - Full system access",
    ),
    groups_user_set(
        "system-owners",
        "System Owners",
        "system-owner",
        "Users with system-owner group - Organization owner access",
    ),
    groups_user_set(
        "privileged-system-users",
        "Privileged System Users",
        "privileged-system-user",
        "Users with privileged-system-user group - Elevated access",
    ),
    groups_user_set(
        "users",
        "Users",
        "user",
        "Users with user group - Basic access",
    ),
)

GRANTS = (
    # System administrators: full access to everything
    Grant("system-administrators", "company", CRUD),
    Grant("system-administrators", "branch", CRUD),
    Grant("system-administrators", "department", CRUD),
    Grant("system-administrators", "employee", CRUD),
    Grant("system-administrators", "rule", CRUD),

    # System owners: full access except rules
    Grant("system-owners", "company", CRUD),
    Grant("system-owners", "branch", CRUD),
    Grant("system-owners", "department", CRUD),
    Grant("system-owners", "employee", CRUD),
    Grant("system-owners", "rule", READ),

    # Privileged users: manage employees, read the rest
    Grant("privileged-system-users", "company", READ),
    Grant("privileged-system-users", "branch", READ),
    Grant("privileged-system-users", "department", READ),
    Grant("privileged-system-users", "employee", ("create", "read", "update")),
    Grant("privileged-system-users", "rule", READ),

    # Basic users: read only
    Grant("users", "company", READ),
    Grant("users", "branch", READ),
    Grant("users", "department", READ),
    Grant("users", "employee", READ),
    Grant("users", "rule", READ),
)


def set_rules() -> List[SetRule]:
    """Every set rule the bundle grants, in table order."""
    return [rule for grant in GRANTS for rule in grant.set_rules()]


@dataclass
class ProvisionSummary:
    succeeded: int = 0
    failed: int = 0

    def record(self, success: bool) -> None:
        if success:
            self.succeeded += 1
        else:
            self.failed += 1


class HoraionProvisioner:
    """Pushes the Horaion bundle through the entity repositories."""

    def __init__(self, admin: PolicyAdmin):
        self.admin = admin

    async def setup_resources(self, resources: Sequence[ResourceSpec] = RESOURCES) -> ProvisionSummary:
        summary = ProvisionSummary()
        for definition in resources:
            summary.record(await self.admin.resources.create(definition.to_resource()))
        logger.info("horaion_resources_ready", **vars(summary))
        return summary

    async def setup_user_attributes(self) -> ProvisionSummary:
        summary = ProvisionSummary()
        summary.record(await self.admin.user_attributes.create(GROUPS_ATTRIBUTE))
        return summary

    async def setup_user_sets(
        self,
        user_sets: Optional[Iterable[ConditionSet]] = None,
    ) -> ProvisionSummary:
        """Create or update user sets; defaults to the bundle's sets."""
        summary = ProvisionSummary()
        for user_set in USER_SETS if user_sets is None else user_sets:
            outcome = await self.admin.condition_sets.create_or_update_user_set(user_set)
            summary.record(outcome.success)
        logger.info("horaion_user_sets_ready", **vars(summary))
        return summary

    async def setup_set_rules(self, rules: Optional[Iterable[SetRule]] = None) -> ProvisionSummary:
        summary = ProvisionSummary()
        for rule in set_rules() if rules is None else rules:
            summary.record(await self.admin.set_rules.create(rule))
        logger.info("horaion_set_rules_ready", **vars(summary))
        return summary

    async def provision(self) -> List[ProvisionSummary]:
        """Resources, user attributes, user sets and set rules, in that order."""
        return [
            await self.setup_resources(),
            await self.setup_user_attributes(),
            await self.setup_user_sets(),
            await self.setup_set_rules(),
        ]

    async def verify(self) -> VerificationReport:
        return await Reconciler(self.admin, lint_scope=GROUPS_ATTRIBUTE.key).verify()

"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Ordered deletion of remote policy state.

Stages run sequentially in dependency order so the remote service never
rejects a delete for a dangling reference:

    set rules -> condition sets (resource sets, then user sets)
    -> user attributes -> roles -> resources -> default tenant

Every stage is idempotent: a 404 counts as deleted, an item the service
refuses to delete is logged and counted, and no stage aborts the sequence.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from permit_setup.admin import PolicyAdmin
from permit_setup.config.presets import (
    DEFAULT_TENANT,
    DEFAULT_USER_ATTRIBUTE,
    PROTECTED_RESOURCES,
    PROTECTED_ROLES,
)
from permit_setup.logging_config import get_logger, log_reset_stage

logger = get_logger(__name__)


class ResetStage(Enum):
    SET_RULES = "set_rules"
    CONDITION_SETS = "condition_sets"
    USER_ATTRIBUTES = "user_attributes"
    ROLES = "roles"
    RESOURCES = "resources"
    TENANT = "tenant"


class ResetVariant(Enum):
    ALL = "all"
    ABAC = "abac"
    RBAC = "rbac"
    RESOURCES = "resources"
    ROLES = "roles"


VARIANT_STAGES = {
    ResetVariant.ALL: [
        ResetStage.SET_RULES,
        ResetStage.CONDITION_SETS,
        ResetStage.USER_ATTRIBUTES,
        ResetStage.ROLES,
        ResetStage.RESOURCES,
        ResetStage.TENANT,
    ],
    ResetVariant.ABAC: [
        ResetStage.SET_RULES,
        ResetStage.CONDITION_SETS,
        ResetStage.USER_ATTRIBUTES,
    ],
    ResetVariant.RBAC: [ResetStage.ROLES, ResetStage.RESOURCES],
    ResetVariant.RESOURCES: [ResetStage.RESOURCES],
    ResetVariant.ROLES: [ResetStage.ROLES],
}


@dataclass
class StageSummary:
    """Per-stage counts; ``deleted`` includes items that were already absent."""

    stage: ResetStage
    deleted: int = 0
    skipped: int = 0
    failed: int = 0
    failed_keys: List[str] = field(default_factory=list)

    def record(self, key: str, success: bool) -> None:
        if success:
            self.deleted += 1
        else:
            self.failed += 1
            self.failed_keys.append(key)


@dataclass
class ResetReport:
    variant: ResetVariant
    stages: List[StageSummary] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return sum(stage.failed for stage in self.stages)

    @property
    def complete(self) -> bool:
        return self.failed == 0


class ResetOrchestrator:
    """
    Runs reset stages against one ``PolicyAdmin``.

    Args:
        admin: Repository bundle to delete through
        attribute_key: The single user attribute removed by the attributes stage
        tenant_key: The tenant removed by the tenant stage
    """

    def __init__(
        self,
        admin: PolicyAdmin,
        attribute_key: str = DEFAULT_USER_ATTRIBUTE.key,
        tenant_key: str = DEFAULT_TENANT,
    ):
        self.admin = admin
        self.attribute_key = attribute_key
        self.tenant_key = tenant_key

    async def delete_set_rules(self) -> StageSummary:
        summary = StageSummary(ResetStage.SET_RULES)
        for rule in await self.admin.set_rules.list():
            summary.record(rule.label, await self.admin.set_rules.delete(rule))
        return self._finish(summary)

    async def delete_condition_sets(self) -> StageSummary:
        """Delete resource sets first, then user sets."""
        summary = StageSummary(ResetStage.CONDITION_SETS)
        ordered = await self.admin.condition_sets.list_resource_sets()
        ordered += await self.admin.condition_sets.list_user_sets()
        for condition_set in ordered:
            summary.record(
                condition_set.key,
                await self.admin.condition_sets.delete(condition_set.key),
            )
        return self._finish(summary)

    async def delete_user_attributes(self, attribute_key: Optional[str] = None) -> StageSummary:
        """
        Delete the well-known user attribute.

        Only ``attribute_key`` is removed; other custom attributes are not
        enumerated.
        """
        key = attribute_key or self.attribute_key
        summary = StageSummary(ResetStage.USER_ATTRIBUTES)
        summary.record(key, await self.admin.user_attributes.delete(key))
        return self._finish(summary)

    async def delete_roles(self) -> StageSummary:
        summary = StageSummary(ResetStage.ROLES)
        for role in await self.admin.roles.list():
            if role.key in PROTECTED_ROLES:
                logger.info("reset_skipped_protected", entity="role", key=role.key)
                summary.skipped += 1
                continue
            summary.record(role.key, await self.admin.roles.delete(role.key))
        return self._finish(summary)

    async def delete_resources(self) -> StageSummary:
        summary = StageSummary(ResetStage.RESOURCES)
        for resource in await self.admin.resources.list():
            if resource.key in PROTECTED_RESOURCES:
                logger.info("reset_skipped_protected", entity="resource", key=resource.key)
                summary.skipped += 1
                continue
            summary.record(resource.key, await self.admin.resources.delete(resource.key))
        return self._finish(summary)

    async def delete_default_tenant(self, tenant_key: Optional[str] = None) -> StageSummary:
        key = tenant_key or self.tenant_key
        summary = StageSummary(ResetStage.TENANT)
        summary.record(key, await self.admin.tenants.delete(key))
        return self._finish(summary)

    async def run(self, variant: ResetVariant) -> ResetReport:
        """Run the stages of one reset variant in order."""
        stage_runners = {
            ResetStage.SET_RULES: self.delete_set_rules,
            ResetStage.CONDITION_SETS: self.delete_condition_sets,
            ResetStage.USER_ATTRIBUTES: self.delete_user_attributes,
            ResetStage.ROLES: self.delete_roles,
            ResetStage.RESOURCES: self.delete_resources,
            ResetStage.TENANT: self.delete_default_tenant,
        }

        logger.info("reset_started", variant=variant.value)
        report = ResetReport(variant=variant)
        for stage in VARIANT_STAGES[variant]:
            report.stages.append(await stage_runners[stage]())
        logger.info("reset_completed", variant=variant.value, failed=report.failed)
        return report

    async def reset_all(self) -> ResetReport:
        return await self.run(ResetVariant.ALL)

    async def reset_abac(self) -> ResetReport:
        return await self.run(ResetVariant.ABAC)

    async def reset_rbac(self) -> ResetReport:
        return await self.run(ResetVariant.RBAC)

    async def reset_resources(self) -> ResetReport:
        return await self.run(ResetVariant.RESOURCES)

    async def reset_roles(self) -> ResetReport:
        return await self.run(ResetVariant.ROLES)

    @staticmethod
    def _finish(summary: StageSummary) -> StageSummary:
        log_reset_stage(
            logger,
            summary.stage.value,
            summary.deleted,
            summary.skipped,
            summary.failed,
        )
        return summary

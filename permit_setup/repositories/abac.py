"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

ABAC repositories: user attributes, condition sets and set rules.

User sets are the only entity with an update path: ``create_or_update_user_set``
posts the set and, when it already exists, patches its conditions.
"""

from enum import Enum
from typing import List, Optional

from permit_setup.config.presets import USER_RESOURCE
from permit_setup.logging_config import get_logger, log_entity_outcome
from permit_setup.models import ConditionSet, ConditionSetType, SetRule, UserAttribute
from permit_setup.repositories.base import BaseRepository

logger = get_logger(__name__)


class UserAttributeRepository(BaseRepository):
    """Attributes of the implicit user resource (``resources/__user/attributes``)."""

    entity = "user_attribute"

    def _path(self, *parts: str) -> str:
        return self.config.schema_path("resources", USER_RESOURCE, "attributes", *parts)

    async def create(self, attribute: UserAttribute) -> bool:
        result = await self._create(self._path(), attribute.to_payload(), attribute.key)
        return result.success

    async def list(self) -> List[UserAttribute]:
        return await self._list(self._path(), UserAttribute.from_payload)

    async def delete(self, key: str) -> bool:
        return await self._delete(self._path(key), key)


class UpsertOutcome(Enum):
    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"

    @property
    def success(self) -> bool:
        return self is not UpsertOutcome.FAILED


class ConditionSetRepository(BaseRepository):
    """User sets and resource sets under ``/schema/{project}/{env}/condition_sets``."""

    entity = "condition_set"

    def _path(self, *parts: str) -> str:
        return self.config.schema_path("condition_sets", *parts)

    async def create(self, condition_set: ConditionSet) -> bool:
        """Create a condition set; the type discriminant travels in the payload."""
        result = await self._create(
            self._path(), condition_set.to_payload(), condition_set.key
        )
        return result.success

    async def create_user_set(self, user_set: ConditionSet) -> bool:
        return await self.create(_with_type(user_set, ConditionSetType.USER_SET))

    async def create_resource_set(self, resource_set: ConditionSet) -> bool:
        return await self.create(_with_type(resource_set, ConditionSetType.RESOURCE_SET))

    async def create_or_update_user_set(self, user_set: ConditionSet) -> UpsertOutcome:
        """
        Create a user set, or replace the conditions of an existing one.

        A 409 on create is followed by a PATCH carrying only the condition
        expression; name and description of an existing set are left alone.
        """
        user_set = _with_type(user_set, ConditionSetType.USER_SET)
        result = await self.client.call("POST", self._path(), user_set.to_payload())

        if result.success and not result.exists:
            log_entity_outcome(logger, "user_set", user_set.key, "create", "created")
            return UpsertOutcome.CREATED

        if not result.exists:
            log_entity_outcome(
                logger, "user_set", user_set.key, "create", "failed",
                status=result.status, error=result.error,
            )
            return UpsertOutcome.FAILED

        update = await self.client.call(
            "PATCH",
            self._path(user_set.key),
            {"conditions": user_set.conditions},
        )
        if update.success:
            log_entity_outcome(logger, "user_set", user_set.key, "update", "updated")
            return UpsertOutcome.UPDATED

        log_entity_outcome(
            logger, "user_set", user_set.key, "update", "failed",
            status=update.status, error=update.error,
        )
        return UpsertOutcome.FAILED

    async def list(self) -> List[ConditionSet]:
        return await self._list(self._path(), ConditionSet.from_payload)

    async def list_user_sets(self) -> List[ConditionSet]:
        return [cs for cs in await self.list() if cs.type is ConditionSetType.USER_SET]

    async def list_resource_sets(self) -> List[ConditionSet]:
        return [cs for cs in await self.list() if cs.type is ConditionSetType.RESOURCE_SET]

    async def get(self, key: str) -> Optional[ConditionSet]:
        data = await self._get(self._path(key))
        return ConditionSet.from_payload(data) if data else None

    async def delete(self, key: str) -> bool:
        return await self._delete(self._path(key), key)


class SetRuleRepository(BaseRepository):
    """
    Set rules under ``/facts/{project}/{env}/set_rules``.

    A rule has no id of its own; deleting one sends the full triple again.
    """

    entity = "set_rule"

    def _path(self) -> str:
        return self.config.facts_path("set_rules")

    async def create(self, rule: SetRule) -> bool:
        result = await self._create(self._path(), rule.to_payload(), rule.label)
        return result.success

    async def list(self) -> List[SetRule]:
        return await self._list(self._path(), SetRule.from_payload)

    async def delete(self, rule: SetRule) -> bool:
        return await self._delete(self._path(), rule.label, body=rule.to_payload())


def _with_type(condition_set: ConditionSet, set_type: ConditionSetType) -> ConditionSet:
    if condition_set.type is set_type:
        return condition_set
    return ConditionSet(
        key=condition_set.key,
        name=condition_set.name,
        type=set_type,
        conditions=condition_set.conditions,
        description=condition_set.description,
        resource_id=condition_set.resource_id,
    )

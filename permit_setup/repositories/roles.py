"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Role repository.
"""

from typing import List, Optional

from permit_setup.logging_config import get_logger
from permit_setup.models import Role, permission_string
from permit_setup.repositories.base import BaseRepository

logger = get_logger(__name__)


class RoleRepository(BaseRepository):
    """Roles under ``/schema/{project}/{env}/roles``."""

    entity = "role"

    def _path(self, *parts: str) -> str:
        return self.config.schema_path("roles", *parts)

    async def create(self, role: Role) -> bool:
        """
        Create a role, then attach each of its permissions.

        Returns True if the role exists afterwards; individual permission
        failures are logged and do not change the outcome.
        """
        result = await self._create(self._path(), role.to_payload(), role.key)
        if not result.success:
            return False
        for permission in role.permissions:
            resource, _, action = permission.partition(":")
            await self.assign_permission(role.key, resource, action)
        return True

    async def assign_permission(self, role_key: str, resource: str, action: str) -> bool:
        """Append one ``resource:action`` permission to a role."""
        permission = permission_string(resource, action)
        result = await self.client.call(
            "POST",
            self._path(role_key, "permissions"),
            {"permission": permission},
        )
        if result.success:
            logger.info("role_permission_assigned", role=role_key, permission=permission)
        else:
            logger.warning(
                "role_permission_assign_failed",
                role=role_key,
                permission=permission,
                status=result.status,
            )
        return result.success

    async def list(self) -> List[Role]:
        return await self._list(self._path(), Role.from_payload)

    async def get(self, key: str) -> Optional[Role]:
        data = await self._get(self._path(key))
        return Role.from_payload(data) if data else None

    async def delete(self, key: str) -> bool:
        return await self._delete(self._path(key), key)

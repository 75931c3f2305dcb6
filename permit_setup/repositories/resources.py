"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Resource repository.
"""

from typing import List, Optional

from permit_setup.models import Resource
from permit_setup.repositories.base import BaseRepository


class ResourceRepository(BaseRepository):
    """Resources under ``/schema/{project}/{env}/resources``."""

    entity = "resource"

    def _path(self, *parts: str) -> str:
        return self.config.schema_path("resources", *parts)

    async def create(self, resource: Resource) -> bool:
        """Create a resource; an existing key counts as success."""
        result = await self._create(self._path(), resource.to_payload(), resource.key)
        return result.success

    async def list(self) -> List[Resource]:
        return await self._list(self._path(), Resource.from_payload)

    async def get(self, key: str) -> Optional[Resource]:
        data = await self._get(self._path(key))
        return Resource.from_payload(data) if data else None

    async def delete(self, key: str) -> bool:
        return await self._delete(self._path(key), key)

"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Tenant repository; tenants are only ever removed by reset.
"""

from permit_setup.repositories.base import BaseRepository


class TenantRepository(BaseRepository):
    """Tenants under ``/facts/{project}/{env}/tenants``."""

    entity = "tenant"

    async def delete(self, key: str) -> bool:
        """Delete a tenant if it exists."""
        return await self._delete(self.config.facts_path("tenants", key), key)

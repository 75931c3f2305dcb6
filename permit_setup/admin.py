"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

PolicyAdmin bundles one API client with every entity repository.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from permit_setup.api.adapters.base import BaseAdapter
from permit_setup.api.client import PermitApiClient
from permit_setup.config.settings import PermitConfig
from permit_setup.repositories import (
    ConditionSetRepository,
    ResourceRepository,
    RoleRepository,
    SetRuleRepository,
    TenantRepository,
    UserAttributeRepository,
)

T = TypeVar("T")


class PolicyAdmin:
    """
    Entry point for all remote policy operations.

    Example::

        async with PolicyAdmin(config) as admin:
            await admin.resources.create(resource)
    """

    def __init__(
        self,
        config: PermitConfig,
        client: Optional[PermitApiClient] = None,
        adapter: Optional[BaseAdapter] = None,
    ):
        self.config = config
        self.client = client or PermitApiClient(config, adapter=adapter)
        self.resources = ResourceRepository(self.client)
        self.roles = RoleRepository(self.client)
        self.user_attributes = UserAttributeRepository(self.client)
        self.condition_sets = ConditionSetRepository(self.client)
        self.set_rules = SetRuleRepository(self.client)
        self.tenants = TenantRepository(self.client)

    async def __aenter__(self) -> "PolicyAdmin":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.client.close()

    async def check_health(self) -> bool:
        return await self.client.check_health()


def run_with_admin(
    config: PermitConfig,
    operation: Callable[[PolicyAdmin], Awaitable[T]],
) -> T:
    """
    Run one coroutine against a fresh ``PolicyAdmin`` on its own event loop.

    Synchronous callers (click commands, prompt_toolkit screens) use this
    once per remote operation; the client is closed before returning.
    """

    async def _run() -> T:
        async with PolicyAdmin(config) as admin:
            return await operation(admin)

    return asyncio.run(_run())

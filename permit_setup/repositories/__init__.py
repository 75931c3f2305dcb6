"""
Entity repositories for the administrative API.
"""

from permit_setup.repositories.abac import (
    ConditionSetRepository,
    SetRuleRepository,
    UpsertOutcome,
    UserAttributeRepository,
)
from permit_setup.repositories.resources import ResourceRepository
from permit_setup.repositories.roles import RoleRepository
from permit_setup.repositories.tenants import TenantRepository

__all__ = [
    "ConditionSetRepository",
    "ResourceRepository",
    "RoleRepository",
    "SetRuleRepository",
    "TenantRepository",
    "UpsertOutcome",
    "UserAttributeRepository",
]

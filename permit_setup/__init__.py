"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Permit Setup - Policy provisioning for the Permit.io administrative API.

Translates a declarative policy model (resources, roles, user attributes,
condition sets and set rules) into idempotent calls against the remote
policy-administration service, and resets or verifies remote state.
"""

from permit_setup._version import __version__

__all__ = ["__version__"]

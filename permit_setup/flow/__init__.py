"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Permit Setup Flow - Interactive menu for provisioning a policy environment.

Provides a guided terminal experience with:
- Arrow-key menus for every entity operation
- Validated prompts with inline error messages
- Rich tables for verification output
"""

from permit_setup._version import __version__

__all__ = ["__version__"]

"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Command-line entry points: ``permit-setup`` and ``horaion-setup``.
"""

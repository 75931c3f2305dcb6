"""
Preset policy bundles provisioned through the entity repositories.
"""

from permit_setup.presets.horaion import HoraionProvisioner

__all__ = ["HoraionProvisioner"]
